"""
flavors.py — per server flavor install and launch logic
-------------------------------------------------------
paper     PaperMC jar, latest build for MINECRAFT_VERSION
neoforge  NeoForge installer, produces run.sh + libraries/
<other>   any jar mcutils.com can serve, keyed by the literal Type value

Exactly one handler runs per container start. The presence of the jar (or
run.sh) is the only state carried between runs.
"""
from __future__ import annotations

import shlex
import shutil
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from . import net
from .config_writer import jvm_args_content, write_jvm_args
from .errors import ConfigurationError, InstallError, UnsupportedVersionError, UpstreamError
from .logging_setup import get_logger
from .models import PaperBuilds, ServerInstallation
from .planner import PlanAction
from .process_runner import ProcessRunner
from .settings import Settings

log = get_logger("mc.launcher.flavors")


class ServerFlavor(str, Enum):
    PAPER = "paper"
    NEOFORGE = "neoforge"
    OTHER = "other"

    @classmethod
    def from_type(cls, server_type: str) -> "ServerFlavor":
        value = (server_type or "").strip().lower()
        if value == cls.PAPER.value:
            return cls.PAPER
        if value == cls.NEOFORGE.value:
            return cls.NEOFORGE
        return cls.OTHER


def jar_launch_command(settings: Settings, jar_name: str) -> str:
    return (
        f"java -Xms{shlex.quote(settings.min_ram)} -Xmx{shlex.quote(settings.max_ram)} "
        f"-jar {shlex.quote(jar_name)} nogui"
    )


class FlavorHandler(ABC):
    flavor: ServerFlavor

    def __init__(self, settings: Settings, server_dir: Path, java_bin: Path,
                 runner: Optional[ProcessRunner] = None):
        self.settings = settings
        self.server_dir = Path(server_dir)
        self.java_bin = Path(java_bin)
        self.runner = runner or ProcessRunner()

    @property
    def label(self) -> str:
        return self.flavor.value

    def _require_minecraft_version(self, stage: str) -> str:
        if not self.settings.minecraft_version:
            raise ConfigurationError(stage, "MINECRAFT_VERSION is not set")
        return self.settings.minecraft_version

    @property
    @abstractmethod
    def installation(self) -> ServerInstallation:
        ...

    @abstractmethod
    def ensure_installed(self) -> bool:
        ...

    @abstractmethod
    def launch_command(self) -> str:
        ...

    def prepare(self) -> None:
        """Hook for files that must be (re)written before installing."""

    def handle(self) -> int:
        """Install if needed, then run the server until it exits."""
        self.prepare()
        self.ensure_installed()
        return self.runner.run_foreground(
            f"{self.label} server", self.launch_command(), cwd=self.server_dir, java_bin=self.java_bin
        )

    def plan_actions(self) -> List[PlanAction]:
        inst = self.installation
        present = inst.is_present()
        return [
            PlanAction(
                action=f"install_{self.flavor.value}",
                target=str(inst.artifact_path),
                detail="present" if present else f"{inst.artifact} missing, will download",
                will_change=not present,
            ),
            PlanAction(
                action="launch",
                target=str(self.server_dir),
                detail=self.launch_command(),
                will_change=False,
            ),
        ]


class _JarHandler(FlavorHandler):
    """Flavors that run a single downloaded server jar."""

    @abstractmethod
    def jar_name(self) -> str:
        ...

    @abstractmethod
    def download_url(self) -> str:
        ...

    @property
    def installation(self) -> ServerInstallation:
        return ServerInstallation(path=self.server_dir, flavor=self.flavor.value, artifact=self.jar_name())

    def ensure_installed(self) -> bool:
        inst = self.installation
        if inst.is_present():
            log.info("%s already present", inst.artifact)
            return False
        log.info("%s not found, downloading...", inst.artifact)
        url = self.download_url()
        net.download_file(url, inst.artifact_path, stage=f"download {self.label} jar",
                          timeout=self.settings.http_timeout)
        return True

    def launch_command(self) -> str:
        return jar_launch_command(self.settings, self.jar_name())


class PaperHandler(_JarHandler):
    flavor = ServerFlavor.PAPER

    def jar_name(self) -> str:
        return f"paper-{self._require_minecraft_version('select paper jar')}.jar"

    def builds_url(self) -> str:
        mc = self._require_minecraft_version("resolve paper build")
        return f"{self.settings.paper_api_url.rstrip('/')}/projects/paper/versions/{mc}/builds"

    def latest_build(self) -> int:
        stage = "resolve paper build"
        data = net.fetch_json(self.builds_url(), stage=stage, timeout=self.settings.http_timeout)
        try:
            builds = PaperBuilds.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(stage, f"unexpected builds payload: {e.error_count()} validation error(s)") from e
        if not builds.builds:
            raise UnsupportedVersionError(stage, f"unsupported version of Minecraft: {self.settings.minecraft_version}")
        return max(b.build for b in builds.builds)

    def download_url(self) -> str:
        mc = self._require_minecraft_version("resolve paper build")
        build = self.latest_build()
        log.info("Latest Paper build for %s is %d", mc, build)
        return (
            f"{self.settings.paper_api_url.rstrip('/')}/projects/paper/versions/{mc}"
            f"/builds/{build}/downloads/paper-{mc}-{build}.jar"
        )


class GenericJarHandler(_JarHandler):
    """Fallback for every other Type value (vanilla, fabric, purpur, ...)."""
    flavor = ServerFlavor.OTHER

    def __init__(self, settings: Settings, server_dir: Path, java_bin: Path,
                 runner: Optional[ProcessRunner] = None):
        super().__init__(settings, server_dir, java_bin, runner)
        self.server_type = (settings.server_type or "").strip()
        if not self.server_type:
            raise ConfigurationError("select server flavor", "Type is not set")

    @property
    def label(self) -> str:
        return self.server_type

    def jar_name(self) -> str:
        return f"{self.server_type}-{self._require_minecraft_version('select server jar')}.jar"

    def download_url(self) -> str:
        mc = self._require_minecraft_version("select server jar")
        return f"{self.settings.mcutils_api_url.rstrip('/')}/server-jars/{self.server_type}/{mc}/download"


class NeoForgeHandler(FlavorHandler):
    flavor = ServerFlavor.NEOFORGE

    RUN_SCRIPT = "run.sh"
    INSTALLER_JAR = "neoforge-installer.jar"

    @property
    def installation(self) -> ServerInstallation:
        return ServerInstallation(path=self.server_dir, flavor=self.flavor.value, artifact=self.RUN_SCRIPT)

    @property
    def run_script(self) -> Path:
        return self.server_dir / self.RUN_SCRIPT

    def marker_dir(self, neo_version: str) -> Path:
        return self.server_dir / "libraries" / "net" / "neoforged" / "neoforge" / neo_version

    def prepare(self) -> None:
        write_jvm_args(self.server_dir, self.settings.min_ram, self.settings.max_ram)

    def version_changed(self) -> bool:
        override = self.settings.neo_version_override
        return bool(override) and not self.marker_dir(override).exists()

    def reset_if_version_changed(self) -> bool:
        """Wipe libraries/, logs/ and run.sh when NEO_VERSION_OVERRIDE is not installed yet."""
        if not self.version_changed():
            return False
        log.info("Changing the neoforge version to %s...", self.settings.neo_version_override)
        try:
            for name in ("libraries", "logs"):
                path = self.server_dir / name
                if path.is_dir() and not path.is_symlink():
                    shutil.rmtree(path)
                else:
                    path.unlink(missing_ok=True)
            self.run_script.unlink(missing_ok=True)
        except OSError as e:
            raise InstallError("reset neoforge", f"failed to remove previous installation: {e}") from e
        return True

    def metadata_url(self) -> str:
        return f"{self.settings.neoforge_maven_url.rstrip('/')}/maven-metadata.xml"

    def version_filter(self) -> str:
        mc = self._require_minecraft_version("resolve neoforge version")
        return mc[2:] if mc.startswith("1.") else mc

    def latest_version(self) -> str:
        stage = "resolve neoforge version"
        version_filter = self.version_filter()
        body = net.fetch_text(self.metadata_url(), stage=stage, timeout=self.settings.http_timeout)
        # line scan instead of XML parsing: "1.21" -> "<version>21" also hits 21.1.x
        needle = f"<version>{version_filter}"
        versions = []
        for line in body.split("\n"):
            if needle in line:
                v = line.strip()
                v = v.removeprefix("<version>").removesuffix("</version>")
                versions.append(v)
        if not versions:
            raise UnsupportedVersionError(
                stage, f"unsupported version of Minecraft for Neoforge: {self.settings.minecraft_version}"
            )
        return versions[-1]

    def resolve_version(self) -> str:
        return self.settings.neo_version_override or self.latest_version()

    def installer_url(self, neo_version: str) -> str:
        base = self.settings.neoforge_maven_url.rstrip("/")
        return f"{base}/{neo_version}/neoforge-{neo_version}-installer.jar"

    def ensure_installed(self) -> bool:
        self.reset_if_version_changed()
        if self.run_script.exists():
            log.info("%s already present", self.RUN_SCRIPT)
            return False

        neo_version = self.resolve_version()
        log.info("Installing NeoForge %s", neo_version)
        installer = self.server_dir / self.INSTALLER_JAR
        net.download_file(self.installer_url(neo_version), installer, stage="download neoforge installer",
                          timeout=self.settings.http_timeout)
        try:
            self.runner.run_checked(
                "neoforge installer",
                f"java -jar {self.INSTALLER_JAR} --installServer",
                cwd=self.server_dir,
                java_bin=self.java_bin,
            )
        finally:
            self._remove_installer(installer)

        if not self.run_script.exists():
            raise InstallError("install neoforge", f"installer finished but {self.RUN_SCRIPT} was not created")
        return True

    def _remove_installer(self, installer: Path) -> None:
        try:
            installer.unlink(missing_ok=True)
        except OSError as e:
            log.warning("Failed to remove %s: %s", installer, e)

    def launch_command(self) -> str:
        return f"./{self.RUN_SCRIPT}"

    def plan_actions(self) -> List[PlanAction]:
        actions = [
            PlanAction(action="write_jvm_args", target=str(self.server_dir / "user_jvm_args.txt"),
                       detail=jvm_args_content(self.settings.min_ram, self.settings.max_ram), will_change=True),
        ]
        changed = self.version_changed()
        if changed:
            actions.append(PlanAction(
                action="reset_neoforge",
                target=str(self.server_dir),
                detail=f"NEO_VERSION_OVERRIDE={self.settings.neo_version_override} not installed, "
                       "libraries/, logs/ and run.sh will be removed",
                will_change=True,
                severity="warn",
            ))
        missing = changed or not self.run_script.exists()
        actions.append(PlanAction(
            action="install_neoforge",
            target=str(self.run_script),
            detail="run installer" if missing else "present",
            will_change=missing,
        ))
        actions.append(PlanAction(action="launch", target=str(self.server_dir),
                                  detail=self.launch_command(), will_change=False))
        return actions


_HANDLERS = {
    ServerFlavor.PAPER: PaperHandler,
    ServerFlavor.NEOFORGE: NeoForgeHandler,
    ServerFlavor.OTHER: GenericJarHandler,
}


def handler_for(settings: Settings, server_dir: Path, java_bin: Path,
                runner: Optional[ProcessRunner] = None) -> FlavorHandler:
    flavor = ServerFlavor.from_type(settings.server_type)
    return _HANDLERS[flavor](settings, server_dir, java_bin, runner)
