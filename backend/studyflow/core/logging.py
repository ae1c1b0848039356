"""Logging setup: one console handler, every line tagged with request and user."""
from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Dict

from studyflow.core.context import get_request_id, get_user_id

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(request_id)s %(user_id)s] %(name)s: %(message)s"
# SDK request logging is noisy at INFO.
QUIET_LOGGERS = ("httpx", "httpcore", "openai", "apscheduler.executors.default")

_configured = False


class RequestContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - minimal logic
        record.request_id = get_request_id() or "-"
        record.user_id = get_user_id() or "anon"
        return True


def build_logging_config(log_level: str) -> Dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {"context": {"format": LOG_FORMAT}},
        "filters": {"request_context": {"()": RequestContextFilter}},
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "context",
                "filters": ["request_context"],
                "level": log_level,
            }
        },
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {"handlers": ["console"], "level": log_level},
    }


def configure_logging(*, log_level: str = "INFO") -> None:
    """Apply the logging config; repeated calls are ignored."""
    global _configured
    if _configured:
        return
    dictConfig(build_logging_config(log_level.upper()))
    _configured = True
    logging.getLogger(__name__).debug("Logging configured at %s", log_level)
