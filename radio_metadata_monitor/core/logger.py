"""
Structured logging setup for radio_metadata_monitor
"""

import logging
import os
import json
from datetime import datetime
from typing import Any, Optional

# LogRecord attributes that are never copied into the JSON payload
_RECORD_ATTRS = {
    'timestamp', 'level', 'message', 'args', 'exc_info', 'exc_text', 'msg',
    'created', 'msecs', 'relativeCreated', 'levelname', 'levelno', 'pathname',
    'filename', 'module', 'funcName', 'lineno', 'processName', 'process',
    'threadName', 'thread', 'name', 'stack_info', 'taskName', 'asctime',
}

FRIENDLY_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


def format_message(msg: str, args: tuple) -> str:
    """Apply %-style args to msg, falling back to the bare message"""
    if not args:
        return msg
    try:
        return msg % args
    except (TypeError, ValueError, KeyError):
        return msg


class StructuredLogger:
    """Logger that writes JSON to a log file and friendly lines to the console"""

    def __init__(self, name: str, log_file: Optional[str] = None,
                 friendly_log_file: Optional[str] = None, level: int = logging.DEBUG):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

        # Create formatters
        self.json_formatter = JsonFormatter()
        self.friendly_formatter = logging.Formatter(FRIENDLY_FORMAT)

        # get_logger() may be called again for the same name: add only what is missing
        self.setup_file_handlers(log_file, friendly_log_file)
        if not any(type(h) is logging.StreamHandler for h in self.logger.handlers):
            self.setup_console_handler()

    def _has_file_handler(self, path: str) -> bool:
        path = os.path.abspath(path)
        return any(isinstance(h, logging.FileHandler) and h.baseFilename == path
                   for h in self.logger.handlers)

    def setup_file_handlers(self, log_file: Optional[str], friendly_log_file: Optional[str] = None):
        """Set up file handlers for logging"""
        if log_file and not self._has_file_handler(log_file):
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(self.json_formatter)
            self.logger.addHandler(file_handler)

        if friendly_log_file and not self._has_file_handler(friendly_log_file):
            friendly_handler = logging.FileHandler(friendly_log_file)
            friendly_handler.setFormatter(self.friendly_formatter)
            self.logger.addHandler(friendly_handler)

    def setup_console_handler(self):
        """Set up console handler for logging"""
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(self.friendly_formatter)
        self.logger.addHandler(console_handler)

    def _log(self, level: int, msg: str, args: tuple, exc: Optional[BaseException], **kwargs):
        """Internal logging method"""
        extra = {'timestamp': datetime.now().isoformat()}
        for key, value in kwargs.items():
            # Context keys must not clobber LogRecord attributes
            extra[f'ctx_{key}' if key in _RECORD_ATTRS else key] = value
        exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else None
        self.logger.log(level, format_message(msg, args), exc_info=exc_info, extra=extra)

    def debug(self, msg: str, *args, exc: Optional[BaseException] = None, **kwargs):
        self._log(logging.DEBUG, msg, args, exc, **kwargs)

    def info(self, msg: str, *args, exc: Optional[BaseException] = None, **kwargs):
        self._log(logging.INFO, msg, args, exc, **kwargs)

    def warning(self, msg: str, *args, exc: Optional[BaseException] = None, **kwargs):
        self._log(logging.WARNING, msg, args, exc, **kwargs)

    def error(self, msg: str, *args, exc: Optional[BaseException] = None, **kwargs):
        self._log(logging.ERROR, msg, args, exc, **kwargs)


class NullLogger:
    """Logger with the StructuredLogger interface that discards everything"""

    def debug(self, msg: str, *args, exc: Optional[BaseException] = None, **kwargs):
        pass

    def info(self, msg: str, *args, exc: Optional[BaseException] = None, **kwargs):
        pass

    def warning(self, msg: str, *args, exc: Optional[BaseException] = None, **kwargs):
        pass

    def error(self, msg: str, *args, exc: Optional[BaseException] = None, **kwargs):
        pass


class JsonFormatter(logging.Formatter):
    """Formatter that outputs JSON strings"""

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON"""
        log_obj: dict = {
            'timestamp': getattr(record, 'timestamp', datetime.now().isoformat()),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        # Add any extra fields
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                log_obj[key] = value

        if record.exc_info:
            log_obj['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


def get_logger(name: str, log_file: Optional[str] = None,
               friendly_log_file: Optional[str] = None, level: Any = logging.DEBUG) -> StructuredLogger:
    """Get a configured logger instance"""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    return StructuredLogger(name, log_file, friendly_log_file, level)
