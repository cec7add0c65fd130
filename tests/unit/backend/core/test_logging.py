"""
Unit Tests for Centralized Logging.

Tests the logging configuration, handlers and log file location.
"""

import logging
from unittest.mock import patch

import pytest

from depot.backend.core import logging as logging_module


@pytest.fixture(autouse=True)
def _reset_logging_config():
    logging_module._logging_config = None
    yield
    logging_module._logging_config = None


@pytest.fixture
def mock_logging_config():
    return {
        "level": "INFO",
        "format": "json",
        "handlers": {
            "console": {"enabled": True},
            "file": {
                "enabled": True,
                "path": "logs/system.jsonl",
                "max_bytes": 10485760,
                "backup_count": 5,
            },
        },
    }


class TestLoggingConfigLoading:
    """Tests for logging configuration loading from YAML."""

    def test_reads_yaml_file(self, mock_logging_config):
        with patch(
            "depot.backend.core.logging.load_yaml_config",
            return_value=mock_logging_config,
        ) as loader:
            config = logging_module._load_logging_config()

        loader.assert_called_once_with("logging.yaml")
        assert config["level"] == "INFO"
        assert config["handlers"]["file"]["path"] == "logs/system.jsonl"

    def test_raises_if_file_missing(self):
        with patch(
            "depot.backend.core.logging.load_yaml_config",
            side_effect=FileNotFoundError("Configuration file not found: logging.yaml"),
        ):
            with pytest.raises(FileNotFoundError, match="logging.yaml"):
                logging_module._load_logging_config()

    def test_config_is_cached(self, mock_logging_config):
        with patch(
            "depot.backend.core.logging.load_yaml_config",
            return_value=mock_logging_config,
        ) as loader:
            first = logging_module._load_logging_config()
            second = logging_module._load_logging_config()

        assert first is second
        loader.assert_called_once()


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_configures_root_logger_level(self, mock_logging_config):
        logging_module._logging_config = mock_logging_config

        logging_module.setup_logging(level="DEBUG", enable_file_logging=False)

        assert logging.getLogger().level == logging.DEBUG

    def test_uses_config_defaults(self, mock_logging_config):
        logging_module._logging_config = mock_logging_config

        logging_module.setup_logging(enable_file_logging=False)

        assert logging.getLogger().level == logging.INFO

    def test_console_handler_without_file_logging(self, mock_logging_config):
        logging_module._logging_config = mock_logging_config

        logging_module.setup_logging(format_type="console", enable_file_logging=False)

        handler_types = [type(h).__name__ for h in logging.getLogger().handlers]
        assert handler_types == ["StreamHandler"]

    def test_file_logging_adds_rotating_handler(self, tmp_path, mock_logging_config):
        logging_module._logging_config = mock_logging_config
        log_file = tmp_path / "logs" / "system.jsonl"

        with patch("depot.backend.core.logging._resolve_log_path", return_value=log_file):
            logging_module.setup_logging(enable_file_logging=True)

        root_logger = logging.getLogger()
        handler_types = [type(h).__name__ for h in root_logger.handlers]
        assert "RotatingFileHandler" in handler_types
        assert log_file.parent.is_dir()

        for handler in root_logger.handlers[:]:
            handler.close()
            root_logger.removeHandler(handler)

    def test_quiets_sqlalchemy_engine_logger(self, mock_logging_config):
        logging_module._logging_config = mock_logging_config

        logging_module.setup_logging(level="DEBUG", enable_file_logging=False)

        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING


class TestGetLogger:
    """Tests for get_logger function."""

    def test_returns_structlog_logger(self):
        logger = logging_module.get_logger("test.module")
        assert hasattr(logger, "bind")
        assert hasattr(logger, "info")


class TestResolveLogPath:
    """Tests for _resolve_log_path function."""

    def test_relative_to_project_root(self, tmp_path):
        with patch("depot.backend.core.logging.find_project_root", return_value=tmp_path):
            result = logging_module._resolve_log_path("logs/system.jsonl")

        assert result == tmp_path / "logs" / "system.jsonl"
