from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List
from pydantic import BaseModel, Field


class ReleaseAsset(BaseModel):
    name: str
    download_url: str = Field(..., alias="browser_download_url")


class GithubRelease(BaseModel):
    """Subset of the GitHub "latest release" payload we care about."""
    tag_name: str = ""
    assets: List[ReleaseAsset] = Field(default_factory=list)


class PaperBuild(BaseModel):
    build: int


class PaperBuilds(BaseModel):
    """PaperMC build listing, ordered oldest to newest."""
    builds: List[PaperBuild] = Field(default_factory=list)


@dataclass(frozen=True)
class ServerInstallation:
    path: Path
    flavor: str
    artifact: str

    @property
    def artifact_path(self) -> Path:
        return self.path / self.artifact

    def is_present(self) -> bool:
        return self.artifact_path.exists()
