"""
Files the Minecraft server itself reads: eula.txt and user_jvm_args.txt.
"""
from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from .errors import ConfigWriteError
from .logging_setup import get_logger

log = get_logger("mc.launcher.config")

EULA_FILE = "eula.txt"
JVM_ARGS_FILE = "user_jvm_args.txt"


def eula_content(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    timestamp = now.astimezone(timezone.utc).strftime("%a %b %d %I:%M:%S %p UTC %Y")
    return f"# Created with Docker\n# {timestamp}\neula=true\n"


def write_eula(server_dir: Path, now: Optional[datetime] = None) -> bool:
    """Create eula.txt with eula=true unless it already exists."""
    path = Path(server_dir) / EULA_FILE
    try:
        path.stat()
    except FileNotFoundError:
        pass
    except OSError as e:
        raise ConfigWriteError("create eula.txt", f"error checking {path}: {e}") from e
    else:
        log.info("eula.txt already exists.")
        return False

    log.info("eula.txt not found, creating it.")
    try:
        path.write_text(eula_content(now), encoding="utf-8")
    except OSError as e:
        raise ConfigWriteError("create eula.txt", f"failed to write {path}: {e}") from e
    log.info("eula.txt created successfully.")
    return True


def jvm_args_content(min_ram: str, max_ram: str) -> str:
    return f"-Xms{min_ram} -Xmx{max_ram}"


def write_jvm_args(server_dir: Path, min_ram: str, max_ram: str) -> Path:
    # rewritten every run, memory limits may change between container starts
    path = Path(server_dir) / JVM_ARGS_FILE
    try:
        path.write_text(jvm_args_content(min_ram, max_ram), encoding="utf-8")
    except OSError as e:
        raise ConfigWriteError("write user_jvm_args.txt", f"failed to write {path}: {e}") from e
    log.debug("Wrote %s", path)
    return path
