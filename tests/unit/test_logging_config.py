"""
Unit tests for utils.logging

Tests JSON and console formatting, logging setup, context logging and
environment configuration.
"""

import json
import logging
import sys
from unittest.mock import patch

import pytest

from utils.logging import (
    ConsoleFormatter,
    ContextLogger,
    JSONFormatter,
    configure_from_env,
    get_logger,
    setup_logging,
    shutdown_logging,
)


def _record(msg="Validation started", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="reconciliation.runner",
        level=level,
        pathname="/app/src/reconciliation/runner.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
        func="run_validation",
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    """Put the root logger back the way the test found it."""
    root = logging.getLogger()
    level = root.level
    yield root
    # pytest manages its own capture handlers per phase
    for handler in root.handlers[:]:
        if not type(handler).__module__.startswith("_pytest"):
            handler.close()
            root.removeHandler(handler)
    root.setLevel(level)


class TestJSONFormatter:
    """Test JSONFormatter class"""

    def test_init_with_defaults(self):
        formatter = JSONFormatter()

        assert formatter.include_timestamp is True
        assert formatter.include_hostname is True
        assert formatter.app_name == "sheet-reconcile"
        assert formatter.hostname is not None

    def test_format_basic_log_record(self):
        data = json.loads(JSONFormatter(app_name="test-app").format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "reconciliation.runner"
        assert data["message"] == "Validation started"
        assert data["app"] == "test-app"
        assert data["source"] == {
            "file": "/app/src/reconciliation/runner.py",
            "line": 42,
            "function": "run_validation",
        }
        assert "timestamp" in data
        assert "hostname" in data

    def test_format_without_timestamp_and_hostname(self):
        formatter = JSONFormatter(include_timestamp=False, include_hostname=False)
        data = json.loads(formatter.format(_record()))

        assert "timestamp" not in data
        assert "hostname" not in data

    def test_format_with_exception_info(self):
        try:
            raise ValueError("bad cell")
        except ValueError:
            record = _record(level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad cell"
        assert any("ValueError" in line for line in data["exception"]["traceback"])

    def test_format_with_extra_context(self):
        data = json.loads(JSONFormatter().format(_record(check="date_match", rows=12)))
        assert data["context"] == {"check": "date_match", "rows": 12}

    def test_format_excludes_internal_fields(self):
        data = json.loads(JSONFormatter().format(_record()))
        assert "context" not in data


class TestConsoleFormatter:
    """Test ConsoleFormatter class"""

    def test_colors_disabled_without_terminal(self):
        with patch.object(sys.stderr, "isatty", return_value=False):
            assert ConsoleFormatter(use_colors=True).use_colors is False

    @patch("sys.stderr.isatty", return_value=True)
    def test_format_with_colors_enabled(self, mock_isatty):
        formatter = ConsoleFormatter(use_colors=True)
        record = _record(level=logging.WARNING)

        output = formatter.format(record)

        assert "\033[33mWARNING\033[0m" in output
        assert record.levelname == "WARNING"

    def test_format_without_colors(self):
        output = ConsoleFormatter(use_colors=False).format(_record())

        assert "[INFO] reconciliation.runner: Validation started" in output
        assert "\033[" not in output

    def test_format_with_extra_context(self):
        output = ConsoleFormatter(use_colors=False).format(_record(check="column_split", failing=3))
        assert output.endswith("[check=column_split, failing=3]")


class TestSetupLogging:
    """Test setup_logging function"""

    def test_setup_logging_with_defaults(self, restore_root_logger):
        setup_logging()

        assert restore_root_logger.level == logging.INFO
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, ConsoleFormatter)

    def test_invalid_level_defaults_to_info(self, restore_root_logger):
        setup_logging(level="LOUD")
        assert restore_root_logger.level == logging.INFO

    def test_lowercase_level(self, restore_root_logger):
        setup_logging(level="debug")
        assert restore_root_logger.level == logging.DEBUG

    def test_json_format(self, restore_root_logger):
        setup_logging(json_format=True)
        assert isinstance(restore_root_logger.handlers[0].formatter, JSONFormatter)

    def test_file_output_creates_directory(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "reconcile.log"

        setup_logging(log_file=str(log_file), console_output=False, json_format=True)
        get_logger("reconciliation.test").info("hello")
        shutdown_logging()

        line = log_file.read_text(encoding="utf-8").strip().splitlines()[-1]
        assert json.loads(line)["message"] == "hello"

    def test_clears_existing_handlers(self, restore_root_logger):
        setup_logging()
        setup_logging()
        assert len(restore_root_logger.handlers) == 1

    def test_quiets_openpyxl(self, restore_root_logger):
        setup_logging(level="DEBUG")
        assert logging.getLogger("openpyxl").level == logging.ERROR

    def test_shutdown_removes_handlers(self, restore_root_logger):
        setup_logging()
        shutdown_logging()
        assert restore_root_logger.handlers == []


class TestContextLogger:
    """Test ContextLogger class"""

    def test_init_with_context(self):
        logger = ContextLogger("reconciliation.runner", run_id="abc", excel="in.xlsx")

        assert logger.logger.name == "reconciliation.runner"
        assert logger.get_context() == {"run_id": "abc", "excel": "in.xlsx"}

    @patch("logging.Logger.log")
    def test_info_adds_context(self, mock_log):
        logger = ContextLogger("test", run_id="abc")

        logger.info("Check complete", rows=10)

        mock_log.assert_called_once_with(
            logging.INFO, "Check complete", exc_info=None, extra={"run_id": "abc", "rows": 10}
        )

    @patch("logging.Logger.log")
    def test_levels(self, mock_log):
        logger = ContextLogger("test")

        logger.debug("d")
        logger.warning("w")
        logger.error("e", exc_info=True)

        levels = [call.args[0] for call in mock_log.call_args_list]
        assert levels == [logging.DEBUG, logging.WARNING, logging.ERROR]
        assert mock_log.call_args_list[-1].kwargs["exc_info"] is True

    def test_bind_returns_new_logger(self):
        logger = ContextLogger("test", run_id="abc")

        bound = logger.bind(check="date_match")

        assert bound.get_context() == {"run_id": "abc", "check": "date_match"}
        assert logger.get_context() == {"run_id": "abc"}

    def test_get_context_returns_copy(self):
        logger = ContextLogger("test", run_id="abc")
        logger.get_context()["run_id"] = "changed"
        assert logger.get_context()["run_id"] == "abc"

    def test_context_reaches_handlers(self, caplog):
        logger = ContextLogger("reconciliation.test", check="device_entity")

        with caplog.at_level(logging.INFO, logger="reconciliation.test"):
            logger.info("done")

        assert caplog.records[0].check == "device_entity"


class TestConfigureFromEnv:
    """Test configure_from_env function"""

    @patch("utils.logging.config.setup_logging")
    def test_all_vars_set(self, mock_setup, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LOG_FILE", "/tmp/reconcile.log")
        monkeypatch.setenv("LOG_JSON", "true")
        monkeypatch.setenv("LOG_CONSOLE", "false")

        configure_from_env()

        mock_setup.assert_called_once_with(
            level="DEBUG",
            log_file="/tmp/reconcile.log",
            console_output=False,
            json_format=True,
        )

    @patch("utils.logging.config.setup_logging")
    def test_defaults(self, mock_setup, monkeypatch):
        for var in ("LOG_LEVEL", "LOG_FILE", "LOG_JSON", "LOG_CONSOLE"):
            monkeypatch.delenv(var, raising=False)

        configure_from_env()

        mock_setup.assert_called_once_with(
            level="INFO", log_file=None, console_output=True, json_format=False
        )

    @pytest.mark.parametrize("value", ["1", "yes", "TRUE"])
    @patch("utils.logging.config.setup_logging")
    def test_json_truthy_variations(self, mock_setup, value, monkeypatch):
        monkeypatch.setenv("LOG_JSON", value)
        configure_from_env()
        assert mock_setup.call_args.kwargs["json_format"] is True
