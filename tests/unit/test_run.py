"""
Unit Tests for run.py Entry Script.

Tests individual functions with mocked dependencies.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from depot.backend.core.exceptions import StoreUnavailableError
from run import main, validate_project_root


@pytest.fixture
def runner():
    return CliRunner()


class TestValidateProjectRoot:
    """Tests for validate_project_root function."""

    def test_succeeds_when_marker_exists(self, tmp_path):
        (tmp_path / ".project_root").touch()

        with patch("run.PROJECT_ROOT", tmp_path):
            assert validate_project_root() == tmp_path

    def test_exits_when_marker_missing(self, tmp_path):
        with patch("run.PROJECT_ROOT", tmp_path):
            with pytest.raises(SystemExit) as exc_info:
                validate_project_root()

        assert exc_info.value.code == 1


class TestMainCLI:
    """Tests for main CLI entry point."""

    def test_help_displays_usage(self, runner):
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Notification Ledger Entry Point" in result.output
        for option in ("--action", "--verbose", "--debug", "--older-than-days", "--test-type"):
            assert option in result.output

    def test_info_action_displays_app_info(self, runner):
        result = runner.invoke(main, ["--action", "info"])

        assert result.exit_code == 0
        assert "Depot Notification Ledger" in result.output
        assert "Available Actions:" in result.output
        assert "--action purge" in result.output

    def test_verbose_flag_sets_info_logging(self, runner):
        with patch("run.setup_logging") as mock_setup:
            runner.invoke(main, ["--action", "info", "--verbose"])

        mock_setup.assert_called_once_with(level="INFO", format_type="console")

    def test_debug_flag_sets_debug_logging(self, runner):
        with patch("run.setup_logging") as mock_setup:
            runner.invoke(main, ["-d", "--action", "info"])

        mock_setup.assert_called_once_with(level="DEBUG", format_type="console")

    def test_config_action_shows_all_sections(self, runner):
        result = runner.invoke(main, ["--action", "config"])

        assert result.exit_code == 0
        assert "Application Settings" in result.output
        assert "Database Settings" in result.output
        assert "Logging Settings" in result.output
        assert "Notification Settings" in result.output
        assert "retention_days" in result.output

    def test_invalid_action_shows_error(self, runner):
        result = runner.invoke(main, ["--action", "invalid"])

        assert result.exit_code != 0
        assert "Invalid value" in result.output


class TestHealthAction:
    """Tests for --action health."""

    def test_reports_pass_when_store_reachable(self, runner):
        with patch(
            "depot.backend.api.health.check_database",
            AsyncMock(return_value={"status": "healthy", "latency_ms": 1}),
        ), patch("depot.backend.core.database.dispose_engine", AsyncMock()):
            result = runner.invoke(main, ["--action", "health"])

        assert result.exit_code == 0
        assert "Health Check Results" in result.output
        assert "Notification store" in result.output
        assert "All checks passed" in result.output

    def test_exits_nonzero_when_store_unreachable(self, runner):
        with patch(
            "depot.backend.api.health.check_database",
            AsyncMock(return_value={"status": "unhealthy", "error": "Connection refused"}),
        ), patch("depot.backend.core.database.dispose_engine", AsyncMock()):
            result = runner.invoke(main, ["--action", "health"])

        assert result.exit_code == 1
        assert "FAIL" in result.output
        assert "Connection refused" in result.output


class TestPurgeAction:
    """Tests for --action purge."""

    def test_uses_configured_retention_by_default(self, runner):
        purge = AsyncMock(return_value=4)

        with patch("run._purge", purge):
            result = runner.invoke(main, ["--action", "purge"])

        assert result.exit_code == 0
        purge.assert_awaited_once_with(30)
        assert "Deleted 4 notification(s) older than 30 day(s)." in result.output

    def test_older_than_days_overrides_retention(self, runner):
        purge = AsyncMock(return_value=0)

        with patch("run._purge", purge):
            result = runner.invoke(main, ["--action", "purge", "--older-than-days", "7"])

        assert result.exit_code == 0
        purge.assert_awaited_once_with(7)

    def test_rejects_non_positive_days(self, runner):
        result = runner.invoke(main, ["--action", "purge", "--older-than-days", "0"])

        assert result.exit_code != 0
        assert "Invalid value" in result.output

    def test_store_failure_exits_with_error(self, runner):
        purge = AsyncMock(side_effect=StoreUnavailableError("Database operation failed: purge_notifications"))

        with patch("run._purge", purge):
            result = runner.invoke(main, ["--action", "purge"])

        assert result.exit_code == 1
        assert "Purge failed" in result.output
