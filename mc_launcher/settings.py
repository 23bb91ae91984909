from __future__ import annotations
from pathlib import Path
from typing import Optional
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    minecraft_version: str = Field(default="", alias="MINECRAFT_VERSION")
    java_version_override: str = Field(default="", alias="JAVA_VERSION_OVERRIDE")
    neo_version_override: str = Field(default="", alias="NEO_VERSION_OVERRIDE")
    server_type: str = Field(default="", validation_alias=AliasChoices("Type", "SERVER_TYPE"))

    min_ram: str = Field(default="1G", validation_alias=AliasChoices("Min_Ram", "MIN_RAM"))
    max_ram: str = Field(default="2G", validation_alias=AliasChoices("Max_Ram", "MAX_RAM"))

    base_dir: Path = Field(default_factory=Path.cwd, alias="LAUNCHER_BASE_DIR")
    java_platform_marker: str = Field(default="jdk_x64_linux", alias="JAVA_PLATFORM_MARKER")

    github_api_url: str = Field(default="https://api.github.com", alias="GITHUB_API_URL")
    paper_api_url: str = Field(default="https://api.papermc.io/v2", alias="PAPER_API_URL")
    neoforge_maven_url: str = Field(
        default="https://maven.neoforged.net/releases/net/neoforged/neoforge", alias="NEOFORGE_MAVEN_URL"
    )
    mcutils_api_url: str = Field(default="https://mcutils.com/api", alias="MCUTILS_API_URL")
    http_timeout: Optional[float] = Field(default=None, alias="HTTP_TIMEOUT")

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    log_file: str = Field(default="", alias="LOG_FILE")

    model_config = SettingsConfigDict(extra="ignore", populate_by_name=True)
