"""
Structured logging configuration.

The numbering and currency engines log with `extra=` fields (counter code,
scope, currency pair, reference date). In production these end up as keys
of a JSON line; in development they are dropped from the console output.

Environment variables:
- LOG_FORMAT: "json" or "console" (default: json unless DEBUG)
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO, DEBUG when DEBUG)
"""
import json
import logging
import os
from datetime import date, datetime, timezone
from decimal import Decimal

SERVICE_NAME = "erpcore"

# Loggers for the project apps; each gets the console handler at LOG_LEVEL.
APP_LOGGERS = ("numbering", "currency", "organization", "ops")

# Attributes every LogRecord carries; anything else came from `extra=`.
STANDARD_ATTRS = frozenset({
    "name", "msg", "args", "levelname", "levelno", "pathname",
    "filename", "module", "lineno", "funcName", "created",
    "msecs", "relativeCreated", "thread", "threadName",
    "processName", "process", "exc_info", "exc_text", "stack_info",
    "message", "taskName",
})

FORMATTERS = {
    "json": {
        "()": "ops.logging_config.JsonFormatter",
    },
    "console": {
        "format": "[{asctime}] {levelname} {name} {message}",
        "style": "{",
    },
}


def _logger(level: str, handler: str = "console") -> dict:
    return {"handlers": [handler], "level": level, "propagate": False}


def get_logging_config(debug: bool = False) -> dict:
    """
    Build the Django LOGGING dict.

    Args:
        debug: Whether running in debug mode

    Returns:
        Django LOGGING dict
    """
    log_level = os.environ.get("LOG_LEVEL", "DEBUG" if debug else "INFO")
    log_format = os.environ.get("LOG_FORMAT", "console" if debug else "json")
    if log_format not in FORMATTERS:
        log_format = "json"

    console = {
        "class": "logging.StreamHandler",
        "formatter": log_format,
    }
    if log_format == "json":
        console["stream"] = "ext://sys.stdout"

    loggers = {
        "": {"handlers": ["console"], "level": log_level},
        "django": _logger(log_level),
        # SQL logging only while debugging; counter allocation is query heavy.
        "django.db.backends": _logger("DEBUG", "console") if debug else _logger("INFO", "null"),
    }
    loggers.update({name: _logger(log_level) for name in APP_LOGGERS})

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {log_format: FORMATTERS[log_format]},
        "handlers": {
            "console": console,
            "null": {"class": "logging.NullHandler"},
        },
        "loggers": loggers,
    }


def _json_default(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class JsonFormatter(logging.Formatter):
    """
    One JSON object per line.

    Fields: timestamp, level, logger, service, message, location,
    exception (if any) and `extra` holding the caller's `extra=` keys.
    Decimals are kept as strings so rates are logged without rounding.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "service": SERVICE_NAME,
            "message": record.getMessage(),
            "location": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        extras = {
            key: value
            for key, value in record.__dict__.items()
            if key not in STANDARD_ATTRS
        }
        if extras:
            log_entry["extra"] = extras

        return json.dumps(log_entry, default=_json_default)
