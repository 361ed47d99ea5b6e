"""Unit tests for logging configuration and process settings.

Tests verify that setup_logging honours explicit overrides and environment
settings for level, format and file logging.
"""

import logging

import pytest

from local_services_bridge.core.logging_config import (
    DETAILED_FORMAT,
    JSON_FORMAT,
    LOG_FILE_NAME,
    MODULE_LOG_LEVELS,
    SIMPLE_FORMAT,
    get_logger,
    setup_logging,
)
from local_services_bridge.core.settings import BridgeSettings


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in saved_handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in saved_handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(saved_level)


def _console_handler() -> logging.Handler:
    return next(
        h
        for h in logging.getLogger().handlers
        if isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler)
    )


class TestSetupLoggingLevels:
    """Test setup_logging with different log levels."""

    @pytest.mark.parametrize(
        "log_level,expected_level",
        [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("debug", logging.DEBUG),
        ],
    )
    def test_console_handler_level(self, log_level, expected_level):
        setup_logging(log_level=log_level, enable_file=False)

        assert _console_handler().level == expected_level

    def test_default_level_from_settings(self, monkeypatch):
        monkeypatch.delenv("LOCAL_SERVICES_BRIDGE_LOG_LEVEL", raising=False)
        setup_logging(enable_file=False)

        assert _console_handler().level == logging.INFO

    def test_level_from_environment(self, monkeypatch):
        monkeypatch.setenv("LOCAL_SERVICES_BRIDGE_LOG_LEVEL", "error")
        setup_logging(enable_file=False)

        assert _console_handler().level == logging.ERROR

    def test_root_logger_passes_everything_to_handlers(self):
        setup_logging(log_level="ERROR", enable_file=False)

        assert logging.getLogger().level == logging.DEBUG


class TestSetupLoggingFormats:
    """Test the three format presets."""

    @pytest.mark.parametrize(
        "log_format,expected",
        [("simple", SIMPLE_FORMAT), ("detailed", DETAILED_FORMAT), ("json", JSON_FORMAT)],
    )
    def test_format_selection(self, log_format, expected):
        setup_logging(log_format=log_format, enable_file=False)

        assert _console_handler().formatter._fmt == expected

    def test_json_format_renders_record(self):
        setup_logging(log_format="json", enable_file=False)
        record = logging.LogRecord("local_services_bridge.tools", logging.INFO, "x.py", 7, "hello", None, None)

        line = _console_handler().format(record)

        assert '"level": "INFO"' in line
        assert '"logger": "local_services_bridge.tools"' in line
        assert '"message": "hello"' in line


class TestSetupLoggingHandlers:
    """Test handler replacement and file logging."""

    def test_existing_handlers_are_replaced(self):
        stale = logging.NullHandler()
        logging.getLogger().addHandler(stale)

        setup_logging(enable_file=False)

        assert stale not in logging.getLogger().handlers
        assert len(logging.getLogger().handlers) == 1

    def test_file_logging_writes_into_configured_dir(self, monkeypatch, tmp_path):
        log_dir = tmp_path / "nested" / "logs"
        monkeypatch.setenv("LOCAL_SERVICES_BRIDGE_LOG_FILE_DIR", str(log_dir))

        setup_logging(enable_file=True)

        file_handlers = [h for h in logging.getLogger().handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.DEBUG
        assert file_handlers[0].baseFilename == str(log_dir / LOG_FILE_NAME)
        assert (log_dir / LOG_FILE_NAME).exists()

    def test_file_logging_enabled_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOCAL_SERVICES_BRIDGE_ENABLE_FILE_LOGGING", "true")
        monkeypatch.setenv("LOCAL_SERVICES_BRIDGE_LOG_FILE_DIR", str(tmp_path))

        setup_logging()

        assert any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)

    def test_explicit_override_disables_file_logging(self, monkeypatch, tmp_path):
        monkeypatch.setenv("LOCAL_SERVICES_BRIDGE_ENABLE_FILE_LOGGING", "true")
        monkeypatch.setenv("LOCAL_SERVICES_BRIDGE_LOG_FILE_DIR", str(tmp_path / "unused"))

        setup_logging(enable_file=False)

        assert not any(isinstance(h, logging.FileHandler) for h in logging.getLogger().handlers)
        assert not (tmp_path / "unused").exists()


class TestModuleLevels:
    def test_module_levels_applied(self):
        setup_logging(enable_file=False)

        for name, level in MODULE_LOG_LEVELS.items():
            assert logging.getLogger(name).level == logging.getLevelName(level)

    def test_http_libraries_are_quieted(self):
        assert MODULE_LOG_LEVELS["httpx"] == "WARNING"
        assert MODULE_LOG_LEVELS["httpcore"] == "WARNING"

    def test_get_logger_returns_named_logger(self):
        assert get_logger("local_services_bridge.tools.naming") is logging.getLogger("local_services_bridge.tools.naming")


class TestBridgeSettings:
    def test_defaults(self, monkeypatch):
        for key in ("LOG_LEVEL", "LOG_FORMAT", "ENABLE_FILE_LOGGING", "LOG_FILE_DIR"):
            monkeypatch.delenv(f"LOCAL_SERVICES_BRIDGE_{key}", raising=False)

        settings = BridgeSettings(_env_file=None)

        assert settings.log_level == "INFO"
        assert settings.log_format == "detailed"
        assert settings.enable_file_logging is False
        assert settings.log_file_dir == "logs"

    def test_rejects_unknown_format(self, monkeypatch):
        monkeypatch.setenv("LOCAL_SERVICES_BRIDGE_LOG_FORMAT", "xml")

        with pytest.raises(ValueError):
            BridgeSettings(_env_file=None)
