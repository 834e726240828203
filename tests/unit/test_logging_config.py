"""
Unit tests for auditrestore.utils.logging

Covers JSON and console formatting, context logging and handler setup.
"""

import json
import logging
import logging.handlers
import sys
from unittest.mock import patch

import pytest

from auditrestore.utils.logging import (
    ConsoleFormatter,
    ContextLogger,
    JSONFormatter,
    configure_from_env,
    setup_logging,
)


def _record(msg="Restored subset 2024-01", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="auditrestore.executor",
        level=level,
        pathname="/src/auditrestore/executor/executor.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestJSONFormatter:
    """Test JSONFormatter"""

    def test_basic_record(self):
        # Arrange
        formatter = JSONFormatter()

        # Act
        data = json.loads(formatter.format(_record()))

        # Assert
        assert data["level"] == "INFO"
        assert data["logger"] == "auditrestore.executor"
        assert data["message"] == "Restored subset 2024-01"
        assert data["app"] == "audit-restore"
        assert data["source"]["line"] == 42
        assert "timestamp" in data
        assert "hostname" in data

    def test_context_fields(self):
        formatter = JSONFormatter(include_timestamp=False, include_hostname=False)

        data = json.loads(formatter.format(_record(host="db1", subset="2024-01")))

        assert data["context"] == {"host": "db1", "subset": "2024-01"}
        assert "timestamp" not in data
        assert "hostname" not in data

    def test_exception_info(self):
        formatter = JSONFormatter()
        try:
            raise RuntimeError("import failed")
        except RuntimeError:
            record = _record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        data = json.loads(formatter.format(record))

        assert data["exception"]["type"] == "RuntimeError"
        assert data["exception"]["message"] == "import failed"


class TestConsoleFormatter:
    """Test ConsoleFormatter"""

    def test_plain_output_with_context(self):
        formatter = ConsoleFormatter(use_colors=False)

        text = formatter.format(_record(table="audit_log"))

        assert "[INFO] auditrestore.executor: Restored subset 2024-01" in text
        assert text.endswith("[table=audit_log]")

    def test_levelname_restored_after_colouring(self):
        formatter = ConsoleFormatter(use_colors=True)
        formatter.use_colors = True
        record = _record(level=logging.WARNING)
        record.levelname = "WARNING"

        text = formatter.format(record)

        assert "\033[33mWARNING\033[0m" in text
        assert record.levelname == "WARNING"


class TestContextLogger:
    """Test ContextLogger"""

    def test_context_attached_to_records(self, caplog):
        log = ContextLogger("auditrestore.test", host="db1", table="audit_log")

        with caplog.at_level(logging.INFO, logger="auditrestore.test"):
            log.info("Starting restore", subset="2024-01")

        record = caplog.records[0]
        assert record.host == "db1"
        assert record.table == "audit_log"
        assert record.subset == "2024-01"

    def test_bind_returns_new_logger(self):
        log = ContextLogger("auditrestore.test", host="db1")

        bound = log.bind(subset="2024-02")

        assert bound.get_context() == {"host": "db1", "subset": "2024-02"}
        assert log.get_context() == {"host": "db1"}


class TestSetupLogging:
    """Test setup_logging and configure_from_env"""

    def test_console_only(self):
        setup_logging(level="DEBUG")

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, ConsoleFormatter)

    def test_file_handler_rotates(self, tmp_path):
        log_file = tmp_path / "logs" / "restore.log"

        setup_logging(level="INFO", log_file=str(log_file), console_output=False, json_format=True)

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.handlers.RotatingFileHandler)
        assert isinstance(handlers[0].formatter, JSONFormatter)
        assert log_file.parent.is_dir()

    def test_repeated_setup_replaces_handlers(self):
        setup_logging(level="INFO")
        setup_logging(level="INFO")

        assert len(logging.getLogger().handlers) == 1

    @patch.dict("os.environ", {"LOG_LEVEL": "WARNING", "LOG_JSON": "true", "LOG_CONSOLE": "yes"})
    def test_configure_from_env(self):
        configure_from_env()

        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
