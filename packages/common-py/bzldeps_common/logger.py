"""
bzldeps Structured Logging

Thin wrapper around the standard ``logging`` module that renders one JSON
object per line on stderr. Keyword arguments passed to the log methods become
fields of the JSON object, which keeps resolution diagnostics machine-readable.

Usage:
    from bzldeps_common.logger import get_logger

    logger = get_logger(__name__)
    logger.warning("failed to eval srcs expression", package="app", error=str(e))

    rule_logger = logger.with_context(target="//app:app")
    rule_logger.error("ambiguous import", module="x.y")
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .constants import LOG_LEVEL_ENV_VAR, LOG_LEVELS

_registered: Dict[str, logging.Logger] = {}
_default_level: Optional[str] = None


def _resolve_level(log_level: Optional[str]) -> str:
    level = (log_level or _default_level or os.environ.get(LOG_LEVEL_ENV_VAR) or "INFO").upper()
    if level not in LOG_LEVELS:
        level = "INFO"
    return level


class JSONFormatter(logging.Formatter):
    """Formats records as single-line JSON documents."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "service": record.name,
            "message": record.getMessage(),
        }
        fields = getattr(record, "fields", None)
        if fields:
            payload.update(fields)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class StderrHandler(logging.Handler):
    """Writes to whatever ``sys.stderr`` is at emit time."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            sys.stderr.write(self.format(record) + "\n")
            sys.stderr.flush()
        except Exception:
            self.handleError(record)


class BzlDepsLogger:
    """
    Structured logger bound to a service (module) name and optional context.

    Attributes:
        service_name: Name of the underlying stdlib logger
        context: Fields attached to every record emitted by this logger
    """

    def __init__(
        self,
        service_name: str,
        log_level: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.service_name = service_name
        self.context: Dict[str, Any] = dict(context or {})
        self._logger = logging.getLogger(service_name)

        if not any(isinstance(h, StderrHandler) for h in self._logger.handlers):
            handler = StderrHandler()
            handler.setFormatter(JSONFormatter())
            self._logger.addHandler(handler)
            self._logger.propagate = False

        if log_level or service_name not in _registered:
            self._logger.setLevel(_resolve_level(log_level))
        _registered[service_name] = self._logger

    def with_context(self, **fields: Any) -> "BzlDepsLogger":
        """Return a new logger carrying this logger's context plus ``fields``."""
        child = BzlDepsLogger.__new__(BzlDepsLogger)
        child.service_name = self.service_name
        child.context = {**self.context, **fields}
        child._logger = self._logger
        return child

    def _log(self, level: int, message: str, exc_info: bool = False, **fields: Any) -> None:
        extra = fields.pop("extra", None)
        merged = {**self.context, **(extra or {}), **fields}
        self._logger.log(level, message, exc_info=exc_info, extra={"fields": merged})

    def debug(self, message: str, **fields: Any) -> None:
        self._log(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> None:
        self._log(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> None:
        self._log(logging.WARNING, message, **fields)

    warn = warning

    def error(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, **fields)

    def critical(self, message: str, **fields: Any) -> None:
        self._log(logging.CRITICAL, message, **fields)

    def exception(self, message: str, **fields: Any) -> None:
        self._log(logging.ERROR, message, exc_info=True, **fields)


def get_logger(service_name: str, log_level: Optional[str] = None) -> BzlDepsLogger:
    """
    Create a structured logger.

    Args:
        service_name: Logger name, usually ``__name__``
        log_level: Optional level override (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        BzlDepsLogger writing JSON lines to stderr
    """
    return BzlDepsLogger(service_name, log_level=log_level)


def configure_logging(service_name: str, log_level: str = "INFO") -> BzlDepsLogger:
    """
    Set the level of every bzldeps logger created so far and of those created later.

    Args:
        service_name: Name of the logger to return
        log_level: New level for all loggers

    Returns:
        Logger for ``service_name``
    """
    global _default_level
    _default_level = _resolve_level(log_level)
    for logger in _registered.values():
        logger.setLevel(_default_level)
    return get_logger(service_name, log_level=_default_level)
