"""Unit tests for structured logging."""

import json
import logging
import sys

from radio_metadata_monitor.core.logger import (
    JsonFormatter,
    NullLogger,
    format_message,
    get_logger,
)


class TestFormatMessage:
    """Test message formatting with fallbacks."""

    def test_formats_args(self):
        assert format_message("interval %d bytes", (8192,)) == "interval 8192 bytes"

    def test_without_args_leaves_percent_alone(self):
        assert format_message("100% rock", ()) == "100% rock"

    def test_bad_args_fall_back_to_message(self):
        assert format_message("value %d", ("not a number",)) == "value %d"
        assert format_message("two %s %s", ("one",)) == "two %s %s"


class TestStructuredLogger:
    """Test the leveled logger."""

    def test_levels_and_context(self, caplog):
        logger = get_logger('test_levels_and_context')
        with caplog.at_level(logging.DEBUG, logger='test_levels_and_context'):
            logger.debug("debug %s", "one", url='http://x')
            logger.info("info")
            logger.warning("warning")
            logger.error("error")

        assert [r.levelname for r in caplog.records] == ['DEBUG', 'INFO', 'WARNING', 'ERROR']
        assert caplog.records[0].getMessage() == "debug one"
        assert caplog.records[0].url == 'http://x'

    def test_exception_cause_is_attached(self, caplog):
        logger = get_logger('test_exception_cause')
        try:
            raise RuntimeError("boom")
        except RuntimeError as e:
            error = e

        with caplog.at_level(logging.DEBUG, logger='test_exception_cause'):
            logger.warning("failed", exc=error)

        record = caplog.records[0]
        assert record.exc_info[1] is error

    def test_reserved_context_keys_are_renamed(self, caplog):
        logger = get_logger('test_reserved_keys')
        with caplog.at_level(logging.DEBUG, logger='test_reserved_keys'):
            logger.info("hello", name='station', message='text')

        record = caplog.records[0]
        assert record.ctx_name == 'station'
        assert record.ctx_message == 'text'
        assert record.getMessage() == "hello"

    def test_handlers_not_duplicated(self):
        first = get_logger('test_handlers_not_duplicated')
        count = len(first.logger.handlers)
        get_logger('test_handlers_not_duplicated')
        assert len(first.logger.handlers) == count

    def test_level_by_name(self):
        logger = get_logger('test_level_by_name', level='warning')
        assert logger.logger.level == logging.WARNING

    def test_json_log_file(self, tmp_path):
        log_file = tmp_path / 'monitor.log'
        logger = get_logger('test_json_log_file', log_file=str(log_file))
        logger.info("Now playing: %s", "A - B", artist='A')
        for handler in logger.logger.handlers:
            handler.flush()

        entry = json.loads(log_file.read_text().splitlines()[0])
        assert entry['message'] == "Now playing: A - B"
        assert entry['level'] == 'INFO'
        assert entry['artist'] == 'A'
        assert 'timestamp' in entry

    def test_log_file_added_on_later_call(self, tmp_path):
        log_file = tmp_path / 'later.log'
        get_logger('test_log_file_added_on_later_call')
        logger = get_logger('test_log_file_added_on_later_call', log_file=str(log_file))
        count = len(logger.logger.handlers)
        get_logger('test_log_file_added_on_later_call', log_file=str(log_file))
        assert len(logger.logger.handlers) == count

        logger.info("late file")
        for handler in logger.logger.handlers:
            handler.flush()

        lines = log_file.read_text().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])['message'] == "late file"
        file_handlers = [h for h in logger.logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        for handler in file_handlers:
            logger.logger.removeHandler(handler)
            handler.close()


class TestJsonFormatter:
    """Test JSON output."""

    def test_includes_extras_and_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            exc_info = sys.exc_info()

        record = logging.makeLogRecord({
            'msg': 'hi', 'levelname': 'ERROR', 'name': 'x',
            'timestamp': '2026-01-01T00:00:00', 'endpoint': 'http://e',
            'exc_info': exc_info,
        })
        entry = json.loads(JsonFormatter().format(record))

        assert entry['timestamp'] == '2026-01-01T00:00:00'
        assert entry['endpoint'] == 'http://e'
        assert 'ValueError: bad' in entry['exception']

    def test_unserializable_values_are_stringified(self):
        record = logging.makeLogRecord({'msg': 'hi', 'levelname': 'INFO', 'payload': object()})
        entry = json.loads(JsonFormatter().format(record))
        assert entry['payload'].startswith('<object object')


class TestNullLogger:
    """Test the do-nothing logger."""

    def test_accepts_all_calls(self):
        logger = NullLogger()
        logger.debug("a %s", 1, exc=RuntimeError(), url='x')
        logger.info("b")
        logger.warning("c", exc=None)
        logger.error("d %d", "oops")
