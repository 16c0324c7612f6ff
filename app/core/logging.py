"""Logging setup for the user directory service.

Everything goes to stdout through a single console handler. The switches are
read from the environment rather than from ``Settings`` because
``configure_logging`` runs while ``app.main`` is still importing.

    LOG_LEVEL           root level, INFO by default
    LOG_JSON            emit JSON lines instead of text
    LOG_REQUESTS        per-request lines from RequestLoggingMiddleware
    LOG_UVICORN_ACCESS  uvicorn's own access log; off while LOG_REQUESTS is on
    SQL_LOG_LEVEL       sqlalchemy.engine level, WARNING by default
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
import sys
from datetime import UTC, datetime
from typing import Any

TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_TRUTHY = frozenset({"1", "true", "t", "yes", "y", "on"})

# Record attributes copied into JSON output when set.
EXTRA_KEYS = (
    "method",
    "path",
    "query",
    "status_code",
    "duration_ms",
    "client_ip",
    "user_agent",
    "error_type",
    "errors",
    "user_id",
)


def env_bool(name: str, *, default: bool) -> bool:
    """Read a yes/no environment switch; unset means ``default``."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def _env_level(name: str, default: str) -> str:
    return os.getenv(name, default).strip().upper() or default


class JsonFormatter(logging.Formatter):
    """Render a record as a single-line JSON object.

    Known extras are included only when the record carries a non-None value
    for them, so request and user lines stay compact.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        entry.update(
            (key, value)
            for key in EXTRA_KEYS
            if (value := getattr(record, key, None)) is not None
        )
        return json.dumps(entry, ensure_ascii=False, default=str)


def _library_loggers(level: str, *, access_log: bool) -> dict[str, dict[str, Any]]:
    return {
        "uvicorn": {"level": level, "propagate": True},
        "uvicorn.error": {"level": level, "propagate": True},
        "uvicorn.access": {
            "level": "INFO" if access_log else "WARNING",
            "propagate": True,
        },
        "sqlalchemy.engine": {
            "level": _env_level("SQL_LOG_LEVEL", "WARNING"),
            "propagate": True,
        },
    }


def configure_logging() -> None:
    """Apply the environment-driven logging config to the root logger."""
    level = _env_level("LOG_LEVEL", "INFO")
    request_lines = env_bool("LOG_REQUESTS", default=True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "text": {"format": TEXT_FORMAT},
                "json": {"()": "app.core.logging.JsonFormatter"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "stream": sys.stdout,
                    "level": level,
                    "formatter": "json" if env_bool("LOG_JSON", default=False) else "text",
                }
            },
            "root": {"handlers": ["console"], "level": level},
            "loggers": _library_loggers(
                level,
                access_log=env_bool("LOG_UVICORN_ACCESS", default=not request_lines),
            ),
        }
    )
