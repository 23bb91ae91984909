from __future__ import annotations
import os
import subprocess
from pathlib import Path
from typing import Mapping, Optional
from .errors import ProcessError
from .logging_setup import get_logger

log = get_logger("mc.launcher.proc")

SHELL = "/bin/sh"

def build_path_env(java_bin: Path, base_env: Optional[Mapping[str, str]] = None) -> dict:
    """Copy of the environment with the Java bin directory first on PATH."""
    env = dict(os.environ if base_env is None else base_env)
    current = env.get("PATH", "")
    env["PATH"] = f"{java_bin}{os.pathsep}{current}" if current else str(java_bin)
    return env

class ProcessRunner:
    """
    Runs shell commands in the foreground. stdin/stdout/stderr are inherited
    so the server console stays attached to the container.
    """

    def __init__(self, base_env: Optional[Mapping[str, str]] = None):
        self.base_env = base_env

    def run_foreground(self, name: str, command: str, *, cwd: Path, java_bin: Path) -> int:
        log.info("Starting %s: %s", name, command)
        try:
            proc = subprocess.run(
                [SHELL, "-c", command],
                cwd=str(cwd),
                env=build_path_env(java_bin, self.base_env),
            )
        except OSError as e:
            raise ProcessError(f"run {name}", f"failed to start: {e}") from e
        log.info("%s exited with rc=%s", name, proc.returncode)
        return proc.returncode

    def run_checked(self, name: str, command: str, *, cwd: Path, java_bin: Path) -> None:
        rc = self.run_foreground(name, command, cwd=cwd, java_bin=java_bin)
        if rc != 0:
            raise ProcessError(f"run {name}", f"exited with status {rc}", returncode=rc)
