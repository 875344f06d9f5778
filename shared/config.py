"""
Shared configuration management for cache-dirs.
"""

import os
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="CACHE_DIRS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="ci")
    log_level: str = Field(default="info")
    log_format: str = Field(default="console")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.lower()
        if value not in LOG_LEVELS:
            raise ValueError(f"unsupported log level: {value}")
        return value

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("console", "json"):
            raise ValueError(f"unsupported log format: {value}")
        return value


class CacheDirsConfig(BaseConfig):
    """Settings for the cache-dirs action."""

    # Directory cache store
    store_dir: Path = Field(default=Path("~/.cache/cache-dirs"))

    # Base directory for relative cache paths and trigger patterns
    workspace: Optional[Path] = Field(default=None)

    def resolved_store_dir(self) -> Path:
        """Store directory with ``~`` expanded."""
        return self.store_dir.expanduser()

    def resolved_workspace(self) -> Path:
        """Workspace directory, falling back to the runner's workspace."""
        if self.workspace is not None:
            return self.workspace.expanduser()
        return Path(os.getenv("GITHUB_WORKSPACE") or os.getcwd())


def get_config(**overrides) -> CacheDirsConfig:
    """Get configuration for the action."""
    return CacheDirsConfig(**overrides)
