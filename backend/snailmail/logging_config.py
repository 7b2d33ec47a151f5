"""structlog setup shared by the client and the CLI."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from .settings import settings

NOISY_LOGGERS = ("httpx", "httpcore")


def add_service_fields(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every event with the environment and the distance service it talks to."""
    event_dict.setdefault("service", "snailmail")
    event_dict.setdefault("environment", settings.ENVIRONMENT)
    event_dict.setdefault("api_url", settings.api_base_url)
    return event_dict


def _renderer(json_logs: bool) -> list[Processor]:
    if json_logs:
        return [
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    return [
        structlog.processors.TimeStamper(fmt="%H:%M:%S"),
        structlog.dev.ConsoleRenderer(),
    ]


def configure_structlog(json_logs: bool | None = None, level: int = logging.INFO) -> None:
    """
    Route structlog events through the stdlib root logger on stderr.

    ``json_logs=None`` picks JSON unless DEBUG is set.
    """
    if json_logs is None:
        json_logs = not settings.DEBUG

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_service_fields,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            *_renderer(json_logs),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # stdout belongs to CLI output
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


__all__ = ["add_service_fields", "configure_structlog", "get_logger"]
