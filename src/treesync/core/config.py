"""
TreeSync configuration management.

Provides centralized configuration with validation using Pydantic.
"""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_HOME = Path.home() / ".treesync"


class LoggingConfig(BaseModel):
    """Configuration for structured logging."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_enabled: bool = True
    console_enabled: bool = True
    json_format: bool = False
    log_directory: Path = Field(default_factory=lambda: DEFAULT_HOME / "logs")

    @field_validator("log_directory", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()


class SyncConfig(BaseModel):
    """Defaults for synchronization runs."""

    delete_missing: bool = False
    mtime_tolerance_seconds: float = Field(default=0.0, ge=0.0, le=86400.0)
    exclude_patterns: list[str] = Field(default_factory=list)
    save_reports: bool = False
    report_directory: Path = Field(default_factory=lambda: DEFAULT_HOME / "reports")

    @field_validator("report_directory", mode="before")
    @classmethod
    def expand_report_path(cls, v: str | Path) -> Path:
        return Path(v).expanduser().resolve()

    @field_validator("exclude_patterns")
    @classmethod
    def drop_blank_patterns(cls, v: list[str]) -> list[str]:
        return [pattern.strip() for pattern in v if pattern.strip()]


class TreeSyncConfig(BaseModel):
    """Main TreeSync configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    sync: SyncConfig = Field(default_factory=SyncConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> TreeSyncConfig:
        """Load configuration from file or create default."""
        if config_path is None:
            config_path = DEFAULT_HOME / "config.json"

        if config_path.exists():
            with open(config_path) as f:
                data = json.load(f)
            return cls.model_validate(data)

        return cls()

    def save(self, config_path: Path | None = None) -> None:
        """Save configuration to file."""
        if config_path is None:
            config_path = DEFAULT_HOME / "config.json"

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2, default=str)

    def ensure_directories(self) -> None:
        """Create all required directories."""
        if self.logging.file_enabled:
            self.logging.log_directory.mkdir(parents=True, exist_ok=True)

    def get_report_file(self) -> Path:
        """Get path for a new sync report file."""
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return self.sync.report_directory / f"sync_{timestamp}.json"


def load_config(config_path: Path | None = None) -> TreeSyncConfig:
    """Load or create configuration."""
    config = TreeSyncConfig.load(config_path)
    config.ensure_directories()
    return config
