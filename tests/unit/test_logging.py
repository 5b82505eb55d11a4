"""
Unit tests for logging module.
"""

import logging

import pytest

from notion_native.core.logging import (
    NotionNativeFormatter,
    StructuredLogger,
    get_logger,
    setup_logging,
)


def _record(
    msg: str = "Test message",
    level: int = logging.INFO,
    name: str = "notion_native.core.pipeline",
) -> logging.LogRecord:
    return logging.LogRecord(
        name=name,
        level=level,
        pathname="pipeline.py",
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestNotionNativeFormatter:
    """Test custom formatter."""

    def test_format_basic_log(self):
        """Test the level marker, short logger name and message."""
        formatter = NotionNativeFormatter(use_color=False)
        result = formatter.format(_record())
        assert "ℹ️" in result
        assert "pipeline: Test message" in result

    def test_format_with_extra_data(self):
        formatter = NotionNativeFormatter(use_color=False)
        record = _record()
        record.extra_data = {"page_id": "abc", "blocks": 42}
        result = formatter.format(record)
        assert result.endswith("(page_id=abc, blocks=42)")

    def test_format_with_color(self):
        formatter = NotionNativeFormatter(use_color=True)
        result = formatter.format(_record(level=logging.ERROR))
        assert result.startswith("\033[31m")
        assert result.endswith("\033[0m")

    def test_include_date(self):
        formatter = NotionNativeFormatter(use_color=False, include_date=True)
        record = _record()
        expected = formatter.formatTime(record, "%Y-%m-%d")
        assert formatter.format(record).startswith(f"[{expected} ")


class TestStructuredLogger:
    """Test structured logger."""

    def test_structured_data_reaches_handler(self, caplog):
        """Keyword arguments become extra_data on the record."""
        logger = StructuredLogger("test_structured", level="DEBUG")
        with caplog.at_level(logging.DEBUG, logger="test_structured"):
            logger.info("Migrated page", page_id="abc", blocks=3)

        record = caplog.records[-1]
        assert record.getMessage() == "Migrated page"
        assert record.extra_data == {"page_id": "abc", "blocks": 3}

    def test_bound_context_is_merged(self, caplog):
        logger = StructuredLogger("test_bound").bind(page_id="abc")
        with caplog.at_level(logging.INFO, logger="test_bound"):
            logger.info("Saved blocks", blocks=2)
            logger.bind(page_id="xyz").info("Overridden")

        assert caplog.records[0].extra_data == {"page_id": "abc", "blocks": 2}
        assert caplog.records[1].extra_data == {"page_id": "xyz"}
        assert logger.context == {"page_id": "abc"}

    def test_exception_includes_traceback(self, caplog):
        logger = StructuredLogger("test_exc")
        with caplog.at_level(logging.ERROR, logger="test_exc"):
            try:
                raise RuntimeError("boom")
            except RuntimeError:
                logger.exception("Migration failed", page_id="abc")

        assert caplog.records[-1].exc_info[0] is RuntimeError

    def test_disabled_level_is_skipped(self, caplog):
        logger = StructuredLogger("test_quiet", level="ERROR")
        with caplog.at_level(logging.ERROR, logger="test_quiet"):
            logger.debug("hidden", detail="x")
        assert not caplog.records


@pytest.mark.usefixtures("restore_root_logger")
class TestSetupLogging:
    """Test logging setup function."""

    def test_setup_logging_basic(self):
        setup_logging("debug")
        root_logger = logging.getLogger()
        assert root_logger.level == logging.DEBUG
        assert any(
            isinstance(h.formatter, NotionNativeFormatter) for h in root_logger.handlers
        )

    def test_setup_logging_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "test.log"
        setup_logging("INFO", log_file)

        get_logger("notion_native.cli").info("Test message", pages=2)
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert "cli: Test message (pages=2)" in content
        assert "\033[" not in content

    def test_http_libraries_follow_debug(self):
        setup_logging("INFO")
        assert logging.getLogger("httpx").level == logging.WARNING

        setup_logging("DEBUG")
        assert logging.getLogger("httpx").level == logging.DEBUG


def test_get_logger_returns_structured_logger():
    logger = get_logger("test_module")
    assert isinstance(logger, StructuredLogger)
    assert logger.logger.name == "test_module"
    assert logger.context == {}
