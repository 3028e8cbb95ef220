"""Logging sink used by the request service.

The service only needs ``log(message)`` and ``error(message)``. Callers may
pass any object with those two methods, or a plain ``logging.Logger``.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Protocol, runtime_checkable

DEFAULT_LOGGER_NAME = "http_fetch.service"


@runtime_checkable
class LoggerSink(Protocol):
    """Minimal logging interface consumed by HttpFetchService."""

    def log(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class StdlibLoggerSink:
    """LoggerSink backed by a standard library logger.

    log() writes at INFO, error() at ERROR.
    """

    def __init__(self, logger: logging.Logger | logging.LoggerAdapter | None = None) -> None:
        self._logger = logger or logging.getLogger(DEFAULT_LOGGER_NAME)

    @property
    def logger(self) -> logging.Logger | logging.LoggerAdapter:
        return self._logger

    def log(self, message: str) -> None:
        self._logger.info(message)

    def error(self, message: str) -> None:
        self._logger.error(message)


def resolve_sink(logger: Any) -> LoggerSink:
    """Turn the configured logger into a sink.

    None builds a fresh StdlibLoggerSink, a logging.Logger (or adapter) gets wrapped, and
    anything else is used as-is.
    """
    if logger is None:
        return StdlibLoggerSink()
    if isinstance(logger, (logging.Logger, logging.LoggerAdapter)):
        return StdlibLoggerSink(logger)
    if not isinstance(logger, LoggerSink):
        raise TypeError(
            f"logger must provide log() and error() methods, got {type(logger).__name__}"
        )
    return logger


class _JSONFormatter(logging.Formatter):
    """One JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname.lower(),
            "message": record.getMessage(),
            "logger": record.name,
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def configure_logging(level: str = "INFO", json_format: bool = False) -> None:
    """Install a stderr handler on the root logger."""
    handler = logging.StreamHandler()
    if json_format:
        handler.setFormatter(_JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
        )
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())
