"""Tests for the logging configuration module."""

from pathlib import Path

import structlog

from lint_diff.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    add_context_processor,
    bind_context,
    clear_context,
    configure_logging,
)


class TestContextProcessor:
    """Tests for add_context_processor."""

    def test_adds_service_and_version(self) -> None:
        """Test that service metadata is added to every entry."""
        event_dict = {"event": "run_started"}
        event = add_context_processor(None, "info", event_dict)  # type: ignore[arg-type]
        assert event["service"] == "lint-diff"
        assert "version" in event
        assert event["event"] == "run_started"


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_configure_with_console_format(self) -> None:
        """Test configuration with console format."""
        configure_logging(level=LogLevel.DEBUG, log_format=LogFormat.CONSOLE)
        # Should not raise

    def test_configure_with_json_format(self) -> None:
        """Test configuration with JSON format."""
        configure_logging(level=LogLevel.INFO, log_format=LogFormat.JSON)
        # Should not raise

    def test_configure_with_string_values(self) -> None:
        """Test configuration with string values."""
        configure_logging(level="warning", log_format="JSON")
        # Should not raise

    def test_configure_with_file_logging(self, tmp_path: Path) -> None:
        """Test configuration with file logging."""
        log_file = tmp_path / "logs" / "lint-diff.log"
        configure_logging(
            level=LogLevel.INFO,
            log_format=LogFormat.JSON,
            file_path=log_file,
            file_enabled=True,
        )
        assert log_file.parent.exists()


class TestContextFunctions:
    """Tests for context binding functions."""

    def test_bind_and_clear_context(self) -> None:
        """Test binding and clearing context."""
        clear_context()
        bind_context(old_revision="100", new_revision="105")
        assert structlog.contextvars.get_contextvars() == {
            "old_revision": "100",
            "new_revision": "105",
        }
        clear_context()
        assert structlog.contextvars.get_contextvars() == {}


class TestEnums:
    """Tests for logging enums and event names."""

    def test_log_levels(self) -> None:
        """Test LogLevel values."""
        assert LogLevel.DEBUG.value == "DEBUG"
        assert LogLevel.CRITICAL.value == "CRITICAL"

    def test_log_formats(self) -> None:
        """Test LogFormat values."""
        assert LogFormat.JSON.value == "json"
        assert LogFormat.CONSOLE.value == "console"

    def test_event_names_are_snake_case(self) -> None:
        """Test that event names follow the snake_case convention."""
        names = [v for k, v in vars(LogEventNames).items() if k.isupper()]
        assert names
        assert all(name == name.lower() and " " not in name for name in names)
