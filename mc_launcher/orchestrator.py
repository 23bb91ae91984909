from __future__ import annotations
from pathlib import Path
from typing import Optional
from .settings import Settings
from .logging_setup import get_logger
from .errors import InstallError, LauncherError
from .fs_layout import build_layout, ensure_dirs
from .versions import select_java_version
from .java_runtime import JavaProvisioner, JavaRuntime, mark_bin_executable, mark_executable
from .config_writer import EULA_FILE, write_eula
from .flavors import FlavorHandler, handler_for
from .process_runner import ProcessRunner
from .planner import Plan, PlanAction

log = get_logger("mc.launcher.orch")

class Orchestrator:
    """
    Runs the whole container start sequentially:
    java version -> java install -> eula.txt -> flavor install -> server.
    The first LauncherError aborts the run.
    """

    def __init__(self, settings: Settings, runner: Optional[ProcessRunner] = None,
                 provisioner: Optional[JavaProvisioner] = None):
        self.settings = settings
        self.layout = build_layout(settings)
        self.runner = runner or ProcessRunner()
        self.provisioner = provisioner or JavaProvisioner(settings)
        self._runtime: Optional[JavaRuntime] = None

    @property
    def runtime(self) -> JavaRuntime:
        if self._runtime is None:
            version = select_java_version(self.settings)
            log.info("Determined Java version: %s", version)
            self._runtime = JavaRuntime(major_version=version, install_dir=self.layout.java_dir)
        return self._runtime

    def prepare_environment(self) -> None:
        try:
            ensure_dirs(self.layout)
        except OSError as e:
            raise InstallError("prepare directories", str(e)) from e

    def ensure_java(self) -> JavaRuntime:
        runtime = self.runtime
        self.provisioner.ensure_installed(runtime)
        mark_executable(runtime.java_binary)
        mark_bin_executable(runtime.bin_dir)
        return runtime

    def write_configs(self) -> None:
        write_eula(self.layout.server_dir)

    def handler(self) -> FlavorHandler:
        return handler_for(self.settings, self.layout.server_dir, self.runtime.bin_dir, self.runner)

    def start_server(self) -> int:
        rc = self.handler().handle()
        log.info("Server exited with rc=%s", rc)
        return rc

    def run(self) -> int:
        self.prepare_environment()
        self.ensure_java()
        self.write_configs()
        return self.start_server()

    def plan(self) -> Plan:
        """Describe what run() would do. No network access, no writes."""
        plan = Plan()
        runtime = self.runtime
        installed = runtime.is_installed()
        plan.add(PlanAction(
            action="install_java",
            target=str(runtime.home),
            detail=f"Java {runtime.major_version} " + ("already installed" if installed
                                                       else f"missing, will download {self.settings.java_platform_marker}"),
            will_change=not installed,
        ))
        eula = self.layout.server_dir / EULA_FILE
        plan.add(PlanAction(
            action="write_eula",
            target=str(eula),
            detail="present" if eula.exists() else "will be created",
            will_change=not eula.exists(),
        ))
        try:
            for action in self.handler().plan_actions():
                plan.add(action)
        except LauncherError as e:
            plan.add(PlanAction(action="server", target=str(self.layout.server_dir),
                                detail=str(e), will_change=False, severity="error"))
        if not self.settings.minecraft_version:
            plan.notes.append("MINECRAFT_VERSION is not set, Java 8 is used unless overridden")
        return plan
