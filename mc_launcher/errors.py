"""
Exception hierarchy for the launcher.

Every error carries the stage that failed so the command line boundary can
print a single line like ``download paper jar failed: HTTP 404 Not Found``.
"""
from __future__ import annotations
from typing import Optional


class LauncherError(Exception):
    """Base class. ``stage`` names the step that failed."""

    def __init__(self, stage: str, message: str):
        super().__init__(f"{stage} failed: {message}")
        self.stage = stage
        self.message = message


class ConfigurationError(LauncherError):
    """Missing or invalid environment configuration."""


class UnsupportedVersionError(ConfigurationError):
    """No build / loader version exists for the requested Minecraft version."""


class UpstreamError(LauncherError):
    """Non-success HTTP status, unreachable host or undecodable response."""


class NoSuitableAssetError(UpstreamError):
    """A release listing had no asset matching the platform filter."""


class InstallError(LauncherError):
    """Local filesystem problem while installing."""


class ConfigWriteError(InstallError):
    """Could not write a server side config file."""


class ArchiveError(InstallError):
    """Malformed archive or unexpected archive layout."""


class ProcessError(LauncherError):
    """A subprocess could not be started or exited non-zero."""

    def __init__(self, stage: str, message: str, returncode: Optional[int] = None):
        super().__init__(stage, message)
        self.returncode = returncode
