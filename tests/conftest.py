"""
Shared fixtures: a clean environment and helpers to build test archives.
"""

import io
import tarfile
from pathlib import Path

import pytest

from mc_launcher.settings import Settings

ENV_VARS = [
    "MINECRAFT_VERSION", "JAVA_VERSION_OVERRIDE", "NEO_VERSION_OVERRIDE",
    "Type", "TYPE", "type", "SERVER_TYPE",
    "Min_Ram", "Max_Ram", "MIN_RAM", "MAX_RAM",
    "LAUNCHER_BASE_DIR", "JAVA_PLATFORM_MARKER",
    "GITHUB_API_URL", "PAPER_API_URL", "NEOFORGE_MAVEN_URL", "MCUTILS_API_URL",
    "HTTP_TIMEOUT", "LOG_LEVEL", "LOG_JSON", "LOG_FILE",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_settings(tmp_path):
    def _make(**kwargs) -> Settings:
        kwargs.setdefault("base_dir", tmp_path)
        return Settings(**kwargs)
    return _make


def make_tar_gz(path: Path, root: str, files: dict, with_root_entry: bool = True) -> Path:
    """files maps relative name -> (bytes, mode)."""
    with tarfile.open(path, "w:gz") as tar:
        if with_root_entry:
            info = tarfile.TarInfo(root)
            info.type = tarfile.DIRTYPE
            info.mode = 0o755
            tar.addfile(info)
        for name, (data, mode) in files.items():
            info = tarfile.TarInfo(f"{root}/{name}")
            info.size = len(data)
            info.mode = mode
            tar.addfile(info, io.BytesIO(data))
    return path


@pytest.fixture
def jdk_archive(tmp_path):
    src = tmp_path / "upstream"
    src.mkdir()
    return make_tar_gz(
        src / "OpenJDK21U-jdk_x64_linux_hotspot_21.0.5_11.tar.gz",
        "jdk-21.0.5+11",
        {
            "bin/java": (b"#!/bin/sh\necho java\n", 0o755),
            "release": (b'JAVA_VERSION="21.0.5"\n', 0o644),
        },
    )
