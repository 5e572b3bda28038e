"""Tests for logging utilities."""

import logging
from logging.handlers import RotatingFileHandler

import colorama
import pytest

import anisync.utils.logging as logging_module
from anisync.utils.logging import CleanFormatter, ColorFormatter, Logger


def _record(msg: object) -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_color_formatter_applies_color_codes():
    """Test that ColorFormatter applies color codes to marked sections."""
    formatter = ColorFormatter("%(levelname)s:%(message)s")
    original_message = "$$'value'$$ $${key: value}$$ message"
    record = _record(original_message)

    formatted = formatter.format(record)

    assert colorama.Fore.GREEN in formatted
    assert colorama.Fore.LIGHTBLUE_EX in formatted
    assert colorama.Style.DIM in formatted
    assert record.msg == original_message
    assert record.levelname == "INFO"


def test_clean_formatter_removes_markers():
    """Test that CleanFormatter removes special markers from the message."""
    formatter = CleanFormatter("%(message)s")
    original_message = "wrapped $$'value'$$ and $${key: 1}$$"
    record = _record(original_message)

    formatted = formatter.format(record)

    assert formatted == "wrapped 'value' and {key: 1}"
    assert record.msg == original_message


def test_clean_formatter_handles_non_string_messages():
    """CleanFormatter should delegate to base formatter for non-str messages."""
    formatter = CleanFormatter("%(message)s")

    assert formatter.format(_record({"value": 1})) == "{'value': 1}"


def test_logger_prefixes_class_name():
    """Test that Logger prefixes messages with the class name."""
    logger = Logger("test")
    logger.setLevel(logging.DEBUG)
    captured = []

    class ListHandler(logging.Handler):
        def emit(self, record):
            captured.append(record.getMessage())

    logger.addHandler(ListHandler())

    class Sample:
        def __init__(self, bound_logger: Logger):
            self.log = bound_logger

        def run(self):
            self.log.info("hello")

    Sample(logger).run()

    assert captured == ["Sample: hello"]


def test_logger_success_level_records_message():
    """Test that Logger logs messages at SUCCESS level."""
    logger = Logger("test-success")
    logger.setLevel(Logger.SUCCESS)
    records: list[logging.LogRecord] = []

    class CaptureHandler(logging.Handler):
        def emit(self, record):
            records.append(record)

    logger.addHandler(CaptureHandler())

    logger.success("operation complete")
    logger.info("filtered out")

    assert len(records) == 1
    assert records[0].levelno == Logger.SUCCESS
    assert records[0].levelname == "SUCCESS"
    assert records[0].getMessage() == "operation complete"


def test_logger_setup_creates_file_and_console_handlers(
    tmp_path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Setup should honor SUCCESS level and configure both handlers."""
    logger = Logger("setup-test")

    monkeypatch.setattr(logging_module, "supports_color", lambda: True)
    monkeypatch.setattr(
        logging_module.colorama, "just_fix_windows_console", lambda: None
    )

    logger.setup("SUCCESS", log_dir=str(tmp_path))

    assert (tmp_path / "setup-test.log").exists()
    assert logger.level == Logger.SUCCESS
    handler_types = {type(handler) for handler in logger.handlers}
    assert RotatingFileHandler in handler_types
    assert logging.StreamHandler in handler_types

    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)


def test_logger_setup_handles_color_detection_errors(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Setup continues with a clean console formatter if color detection fails."""
    logger = Logger("color-test")
    logger.addHandler(logging.NullHandler())

    def _raise_os_error():
        raise OSError("boom")

    monkeypatch.setattr(logging_module, "supports_color", _raise_os_error)

    logger.setup("INFO")

    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0].formatter, CleanFormatter)
    for handler in logger.handlers[:]:
        handler.close()
        logger.removeHandler(handler)
