"""
Structured logging for jira_rest.

Request/response diagnostics are logged with their context (method, url,
headers, bodies) attached as record attributes rather than baked into the
message, so the JSON formatter can emit them as fields.

Usage:
    setup_logging(level=logging.DEBUG, log_format="json")
    log = get_logger("JiraClient", service="jira")
    log.debug("JiraRestApi request", method="GET", url="/rest/api/2/issuetype")
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from jira_rest.core.ports.config_provider import JiraConfig


# Attributes every LogRecord carries; anything else came in through `extra`.
STANDARD_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
        "asctime",
    }
)

NOISY_LOGGERS = ("urllib3", "requests")


def _record_context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in STANDARD_RECORD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Extra record attributes are grouped under "context".
    """

    def __init__(
        self,
        include_timestamp: bool = True,
        include_level: bool = True,
        include_logger: bool = True,
        include_location: bool = False,
        static_fields: dict[str, Any] | None = None,
    ):
        super().__init__()
        self.include_timestamp = include_timestamp
        self.include_level = include_level
        self.include_logger = include_logger
        self.include_location = include_location
        self.static_fields = dict(static_fields or {})

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {}

        if self.include_timestamp:
            ts = datetime.fromtimestamp(record.created, tz=timezone.utc)
            entry["timestamp"] = ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"
        if self.include_level:
            entry["level"] = record.levelname
        if self.include_logger:
            entry["logger"] = record.name

        entry["message"] = record.getMessage()
        entry.update(self.static_fields)

        context = _record_context(record)
        if context:
            entry["context"] = context

        if self.include_location:
            entry["location"] = {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            }

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": "".join(traceback.format_exception(exc_type, exc_value, exc_tb)),
            }

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter with optional colors and key=value context."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2m",
        logging.INFO: "\033[36m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1m\033[31m",
    }
    RESET = "\033[0m"

    def __init__(self, use_colors: bool = True, include_context: bool = True):
        super().__init__(fmt="%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        self.use_colors = use_colors
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        output = super().format(record)

        if self.include_context:
            context = _record_context(record)
            if context:
                output += " " + " ".join(f"{key}={value!r}" for key, value in context.items())

        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelno, "")
            output = f"{color}{output}{self.RESET}"

        return output


class ContextLogger:
    """
    Logger wrapper that attaches bound context to every record.

    Keyword arguments passed to the level methods are merged on top of the
    bound context for that single call.
    """

    def __init__(self, logger: str | Any, context: dict[str, Any] | None = None):
        """
        Args:
            logger: Logger name, or a ``logging.Logger``-compatible object
                (Logger, LoggerAdapter) to write through as-is
            context: Context bound to every record
        """
        self._logger = logging.getLogger(logger) if isinstance(logger, str) else logger
        self._context = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    def bind(self, **context: Any) -> ContextLogger:
        """Return a new logger with additional bound context."""
        return ContextLogger(self._logger, {**self._context, **context})

    def isEnabledFor(self, level: int) -> bool:
        return self._logger.isEnabledFor(level)

    def log(self, level: int, msg: str, *args: Any, exc_info: Any = None, **context: Any) -> None:
        extra = {}
        for key, value in {**self._context, **context}.items():
            # LogRecord refuses extras that shadow its own attributes
            extra[f"ctx_{key}" if key in STANDARD_RECORD_ATTRS else key] = value
        self._logger.log(level, msg, *args, exc_info=exc_info, extra=extra)

    def debug(self, msg: str, *args: Any, **context: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **context)

    def info(self, msg: str, *args: Any, **context: Any) -> None:
        self.log(logging.INFO, msg, *args, **context)

    def warning(self, msg: str, *args: Any, **context: Any) -> None:
        self.log(logging.WARNING, msg, *args, **context)

    def error(self, msg: str, *args: Any, **context: Any) -> None:
        self.log(logging.ERROR, msg, *args, **context)

    def critical(self, msg: str, *args: Any, **context: Any) -> None:
        self.log(logging.CRITICAL, msg, *args, **context)


def get_logger(name: str, **context: Any) -> ContextLogger:
    """Get a ContextLogger with optional bound context."""
    return ContextLogger(name, context)


def setup_logging(
    level: int = logging.INFO,
    log_format: str = "text",
    log_file: str | None = None,
    static_fields: dict[str, Any] | None = None,
) -> None:
    """
    Configure the root logger.

    Existing root handlers are replaced. Console output goes to stderr; when
    ``log_file`` is given the same records are also written there.
    """
    if log_format == "json":
        formatter: logging.Formatter = JSONFormatter(static_fields=static_fields)
    else:
        formatter = TextFormatter(use_colors=sys.stderr.isatty())

    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    root.setLevel(level)

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        if log_format == "json":
            file_handler.setFormatter(formatter)
        else:
            file_handler.setFormatter(TextFormatter(use_colors=False))
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_logging(config: JiraConfig) -> None:
    """Apply the logging settings of a JiraConfig."""
    setup_logging(
        level=getattr(logging, config.log_level.upper(), logging.WARNING),
        log_format=config.log_format,
        log_file=config.log_file,
    )
