from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError

from . import net
from .archive_installer import ArchiveInstaller
from .errors import InstallError, NoSuitableAssetError, UpstreamError
from .logging_setup import get_logger
from .models import GithubRelease, ReleaseAsset
from .settings import Settings

log = get_logger("mc.launcher.java")

JDK_PREFIX = "jdk"
ARCHIVE_SUFFIX = ".tar.gz"
EXECUTABLE_MODE = 0o755


@dataclass(frozen=True)
class JavaRuntime:
    major_version: str
    install_dir: Path

    @property
    def home(self) -> Path:
        return Path(self.install_dir) / f"{JDK_PREFIX}{self.major_version}"

    @property
    def bin_dir(self) -> Path:
        return self.home / "bin"

    @property
    def java_binary(self) -> Path:
        return self.bin_dir / "java"

    def is_installed(self) -> bool:
        return self.home.is_dir()


def resolve_release_asset(assets: Iterable[ReleaseAsset], platform_marker: str,
                          suffix: str = ARCHIVE_SUFFIX) -> Optional[ReleaseAsset]:
    """First asset whose name contains ``platform_marker`` and ends with ``suffix``."""
    for asset in assets:
        if platform_marker in asset.name and asset.name.endswith(suffix):
            return asset
    return None


class JavaProvisioner:
    """Installs Eclipse Temurin JDKs from the adoptium GitHub releases."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def release_url(self, major_version: str) -> str:
        base = self.settings.github_api_url.rstrip("/")
        return f"{base}/repos/adoptium/temurin{major_version}-binaries/releases/latest"

    def resolve_download_url(self, runtime: JavaRuntime) -> str:
        stage = f"resolve Java {runtime.major_version}"
        data = net.fetch_json(self.release_url(runtime.major_version), stage=stage,
                              timeout=self.settings.http_timeout)
        try:
            release = GithubRelease.model_validate(data)
        except ValidationError as e:
            raise UpstreamError(stage, f"unexpected release payload: {e.error_count()} validation error(s)") from e

        asset = resolve_release_asset(release.assets, self.settings.java_platform_marker)
        if asset is None:
            raise NoSuitableAssetError(
                stage,
                f"could not find a download URL for Java {runtime.major_version} "
                f"matching {self.settings.java_platform_marker!r}",
            )
        log.info("Selected %s (%s)", asset.name, release.tag_name or "latest")
        return asset.download_url

    def ensure_installed(self, runtime: JavaRuntime) -> bool:
        installer = ArchiveInstaller(
            name=f"Java {runtime.major_version}",
            resolve_url=lambda: self.resolve_download_url(runtime),
            archive_path=Path(runtime.install_dir) / f"{JDK_PREFIX}{runtime.major_version}{ARCHIVE_SUFFIX}",
            timeout=self.settings.http_timeout,
        )
        return installer.ensure_installed(runtime.home)


def mark_executable(path: Path) -> None:
    try:
        os.chmod(path, EXECUTABLE_MODE)
    except OSError as e:
        raise InstallError("set Java permissions", f"failed to chmod {path}: {e}") from e


def mark_bin_executable(bin_dir: Path) -> int:
    """chmod 755 every file in a JDK bin directory. Returns the number of files."""
    try:
        entries = list(Path(bin_dir).iterdir())
    except OSError as e:
        raise InstallError("set Java permissions", f"failed to read {bin_dir}: {e}") from e
    count = 0
    for entry in entries:
        if not entry.is_dir():
            mark_executable(entry)
            count += 1
    log.debug("Set executable permissions for %d Java binaries in %s", count, bin_dir)
    return count
