"""
archive_installer.py — idempotent download / extract / relocate
---------------------------------------------------------------
Installs a .tar.gz distribution whose contents live under one top-level
directory. The target directory doubles as the "already installed" marker,
so extraction happens in a staging directory next to it and the extracted
root is renamed into place only once everything succeeded.
"""
from __future__ import annotations

import gzip
import os
import shutil
import tarfile
import tempfile
import zlib
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

from .errors import ArchiveError, InstallError
from .logging_setup import get_logger
from . import net

log = get_logger("mc.launcher.archive")

DEFAULT_FILE_MODE = 0o644
DIR_MODE = 0o755


def _ensure_inside(root: Path, path: Path, name: str, stage: str) -> None:
    if not path.resolve().is_relative_to(root):
        raise ArchiveError(stage, f"refusing to extract entry outside of archive root: {name!r}")


def _member_parts(name: str, stage: str):
    parts = [p for p in PurePosixPath(name).parts if p not in ("", ".")]
    if not parts:
        return parts
    if PurePosixPath(name).is_absolute() or ".." in parts:
        raise ArchiveError(stage, f"refusing to extract entry outside of archive root: {name!r}")
    return parts


def extract_tar_gz(archive: Path, dest: Path, *, stage: str = "extract archive") -> Optional[str]:
    """
    Unpack ``archive`` into ``dest`` entry by entry.

    Returns the name of the first top-level entry seen (the archive root),
    or None for an archive without entries.
    """
    root: Optional[str] = None
    dest_root = Path(dest).resolve()
    try:
        with tarfile.open(archive, "r:gz") as tar:
            for member in tar:
                parts = _member_parts(member.name, stage)
                if not parts:
                    continue
                if root is None:
                    root = parts[0]
                target = Path(dest).joinpath(*parts)

                if member.isdir():
                    _ensure_inside(dest_root, target, member.name, stage)
                    target.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
                elif member.isfile():
                    _ensure_inside(dest_root, target.parent, member.name, stage)
                    if target.is_symlink():
                        raise ArchiveError(stage, f"refusing to write through symlink: {member.name!r}")
                    target.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
                    src = tar.extractfile(member)
                    with open(target, "wb") as fh:
                        if src is not None:
                            shutil.copyfileobj(src, fh)
                    os.chmod(target, (member.mode & 0o7777) or DEFAULT_FILE_MODE)
                elif member.issym():
                    _ensure_inside(dest_root, target.parent, member.name, stage)
                    if os.path.isabs(member.linkname):
                        raise ArchiveError(stage, f"refusing absolute symlink {member.name!r} -> {member.linkname!r}")
                    _ensure_inside(dest_root, target.parent / member.linkname, member.name, stage)
                    target.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
                    if not target.is_symlink() and not target.exists():
                        os.symlink(member.linkname, target)
                else:
                    log.debug("Skipping unsupported archive entry %s", member.name)
    except (tarfile.TarError, EOFError, gzip.BadGzipFile, zlib.error) as e:
        raise ArchiveError(stage, f"failed to read {archive}: {e}") from e
    except OSError as e:
        raise InstallError(stage, f"failed to write extracted files: {e}") from e
    return root


class ArchiveInstaller:
    """
    Generic "resolve URL -> download -> extract -> relocate" installer.

    ``resolve_url`` is the upstream specific strategy and is only called
    when the target is missing.
    """

    def __init__(self, name: str, resolve_url: Callable[[], str], archive_path: Path,
                 timeout: Optional[float] = None):
        self.name = name
        self.resolve_url = resolve_url
        self.archive_path = Path(archive_path)
        self.timeout = timeout

    def ensure_installed(self, target_dir: Path) -> bool:
        """Return True if an installation happened, False if already present."""
        target_dir = Path(target_dir)
        if target_dir.is_dir():
            log.info("%s is already installed at %s", self.name, target_dir)
            return False

        log.info("Starting installation of %s", self.name)
        url = self.resolve_url()

        try:
            target_dir.parent.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
        except OSError as e:
            raise InstallError(f"install {self.name}", f"failed to create {target_dir.parent}: {e}") from e

        net.download_file(url, self.archive_path, stage=f"download {self.name}", timeout=self.timeout)
        try:
            self._extract_and_relocate(target_dir)
        finally:
            self._remove_archive()

        log.info("%s installation completed successfully.", self.name)
        return True

    def _extract_and_relocate(self, target_dir: Path) -> None:
        stage = f"extract {self.name}"
        try:
            staging = Path(tempfile.mkdtemp(prefix=f".{target_dir.name}-", dir=target_dir.parent))
        except OSError as e:
            raise InstallError(stage, f"failed to create staging directory: {e}") from e

        try:
            root = extract_tar_gz(self.archive_path, staging, stage=stage)
            if root is None or not (staging / root).is_dir():
                raise ArchiveError(stage, "could not determine root directory from archive")

            log.info("Moving %s to %s", root, target_dir)
            try:
                os.rename(staging / root, target_dir)
            except OSError as e:
                raise InstallError(f"relocate {self.name}", f"failed to move {root} to {target_dir}: {e}") from e
        except BaseException:
            shutil.rmtree(staging, ignore_errors=True)
            raise

        try:
            shutil.rmtree(staging)
        except OSError as e:
            raise InstallError(f"relocate {self.name}", f"failed to remove extraction root {staging}: {e}") from e

    def _remove_archive(self) -> None:
        try:
            self.archive_path.unlink(missing_ok=True)
        except OSError as e:
            log.warning("Failed to remove archive %s: %s", self.archive_path, e)
