"""
Tests for treesync.core.config module.
"""

import json
import tempfile
from pathlib import Path

import pytest
from pydantic import ValidationError

from treesync.core.config import (
    LoggingConfig,
    SyncConfig,
    TreeSyncConfig,
    load_config,
)


class TestLoggingConfig:
    """Tests for LoggingConfig."""

    def test_default_values(self) -> None:
        config = LoggingConfig()
        assert config.level == "INFO"
        assert config.file_enabled is True
        assert config.console_enabled is True
        assert config.json_format is False

    def test_custom_values(self) -> None:
        config = LoggingConfig(level="DEBUG", json_format=True)
        assert config.level == "DEBUG"
        assert config.json_format is True

    def test_invalid_level(self) -> None:
        with pytest.raises(ValidationError):
            LoggingConfig(level="LOUD")

    def test_path_expansion(self) -> None:
        config = LoggingConfig(log_directory="~/logs")
        assert "~" not in str(config.log_directory)


class TestSyncConfig:
    """Tests for SyncConfig."""

    def test_default_values(self) -> None:
        config = SyncConfig()
        assert config.delete_missing is False
        assert config.mtime_tolerance_seconds == 0.0
        assert config.exclude_patterns == []
        assert config.save_reports is False

    def test_negative_tolerance_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SyncConfig(mtime_tolerance_seconds=-1)

    def test_blank_patterns_dropped(self) -> None:
        config = SyncConfig(exclude_patterns=["*.tmp", "  ", " .git "])
        assert config.exclude_patterns == ["*.tmp", ".git"]

    def test_report_path_expansion(self) -> None:
        config = SyncConfig(report_directory="~/reports")
        assert "~" not in str(config.report_directory)


class TestTreeSyncConfig:
    """Tests for TreeSyncConfig."""

    def test_default_config(self) -> None:
        config = TreeSyncConfig()
        assert isinstance(config.logging, LoggingConfig)
        assert isinstance(config.sync, SyncConfig)

    def test_save_and_load(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"

            original = TreeSyncConfig(
                sync=SyncConfig(delete_missing=True, exclude_patterns=["*.bak"]),
                logging=LoggingConfig(level="WARNING"),
            )
            original.save(config_path)

            loaded = TreeSyncConfig.load(config_path)

            assert loaded.sync.delete_missing is True
            assert loaded.sync.exclude_patterns == ["*.bak"]
            assert loaded.logging.level == "WARNING"

    def test_load_partial_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            config_path.write_text(json.dumps({"sync": {"mtime_tolerance_seconds": 2}}))

            config = TreeSyncConfig.load(config_path)

            assert config.sync.mtime_tolerance_seconds == 2.0
            assert config.sync.delete_missing is False

    def test_load_nonexistent(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = TreeSyncConfig.load(Path(tmpdir) / "nonexistent.json")
            assert config.sync.delete_missing is False

    def test_load_config_creates_log_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config_path = Path(tmpdir) / "config.json"
            TreeSyncConfig(
                logging=LoggingConfig(log_directory=Path(tmpdir) / "logs"),
            ).save(config_path)

            config = load_config(config_path)

            assert config.logging.log_directory.exists()

    def test_get_report_file(self) -> None:
        with tempfile.TemporaryDirectory() as tmpdir:
            config = TreeSyncConfig(sync=SyncConfig(report_directory=Path(tmpdir)))
            report_file = config.get_report_file()
            assert str(report_file).startswith(str(Path(tmpdir).resolve()))
            assert "sync_" in report_file.name
            assert report_file.suffix == ".json"
