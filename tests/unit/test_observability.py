"""Tests for observability/logger.py"""
import io
import json
import logging
import sys


class TestStructuredFormatter:
    def _get_record(self, msg, level=logging.INFO, exc_info=None, extra_fields=None):
        record = logging.LogRecord(
            name="test",
            level=level,
            pathname="",
            lineno=0,
            msg=msg,
            args=(),
            exc_info=exc_info,
        )
        if extra_fields is not None:
            record.extra_fields = extra_fields
        return record

    def test_basic_format(self):
        from boardnotify.observability.logger import StructuredFormatter

        result = json.loads(StructuredFormatter().format(self._get_record("hello world")))
        assert result["message"] == "hello world"
        assert result["level"] == "INFO"
        assert result["logger"] == "test"
        assert "ts" in result

    def test_extra_fields_merged(self):
        from boardnotify.observability.logger import StructuredFormatter

        record = self._get_record("msg", extra_fields={"card_id": "c7", "child_diffs": 3})
        result = json.loads(StructuredFormatter().format(record))
        assert result["card_id"] == "c7"
        assert result["child_diffs"] == 3

    def test_trace_level_name(self):
        from boardnotify.observability.logger import TRACE, StructuredFormatter

        result = json.loads(StructuredFormatter().format(self._get_record("t", level=TRACE)))
        assert result["level"] == "TRACE"

    def test_exception_info_included(self):
        from boardnotify.observability.logger import StructuredFormatter

        try:
            raise ValueError("test error")
        except ValueError:
            exc_info = sys.exc_info()
        result = json.loads(StructuredFormatter().format(self._get_record("err", exc_info=exc_info)))
        assert "ValueError" in result["exception"]

    def test_non_serialisable_extra_uses_str(self):
        from boardnotify.observability.logger import StructuredFormatter

        record = self._get_record("msg", extra_fields={"obj": object()})
        result = json.loads(StructuredFormatter().format(record))
        assert result["obj"].startswith("<object")


class TestGetLogger:
    def test_returns_logger_with_handler(self):
        from boardnotify.observability.logger import get_logger

        logger = get_logger("test.boardnotify.unique1")
        assert isinstance(logger, logging.Logger)
        assert len(logger.handlers) == 1
        assert logger.propagate is False

    def test_string_level(self):
        from boardnotify.observability.logger import get_logger

        logger = get_logger("test.boardnotify.unique2", level="warning")
        assert logger.level == logging.WARNING

    def test_trace_string_level(self):
        from boardnotify.observability.logger import TRACE, get_logger

        logger = get_logger("test.boardnotify.trace", level="TRACE")
        assert logger.level == TRACE

    def test_idempotent_no_duplicate_handlers(self):
        from boardnotify.observability.logger import get_logger

        name = "test.boardnotify.unique3"
        first = get_logger(name)
        count = len(first.handlers)
        assert get_logger(name) is first
        assert len(first.handlers) == count

    def test_custom_stream(self):
        from boardnotify.observability.logger import get_logger

        stream = io.StringIO()
        logger = get_logger("test.boardnotify.stream", stream=stream)
        logger.info("sent", extra={"extra_fields": {"key": "val"}})
        line = json.loads(stream.getvalue().strip())
        assert line["message"] == "sent"
        assert line["key"] == "val"


class TestNullLogger:
    def test_discards(self, capsys):
        from boardnotify.observability.logger import get_null_logger

        logger = get_null_logger("test.boardnotify.null")
        logger.warning("quiet")
        captured = capsys.readouterr()
        assert captured.err == ""
        assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)

    def test_repeated_calls_single_handler(self):
        from boardnotify.observability.logger import get_null_logger

        get_null_logger("test.boardnotify.null2")
        logger = get_null_logger("test.boardnotify.null2")
        assert len(logger.handlers) == 1
