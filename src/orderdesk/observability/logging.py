"""
orderdesk.observability.logging

Structured logging configuration for the service.

Responsibilities:
- Configure `structlog` for JSON logs on stdout.
- Mask credential material (tokens, initData, hashes) before rendering.
- Bind the resolved principal into the request's log context.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# Field names whose values are credentials or signed assertions.
SENSITIVE_KEYS = frozenset(
    {"authorization", "bot_token", "hash", "init_data", "initdata", "secret", "token"}
)
REDACTED = "[redacted]"


def configure_logging(*, service_name: str, level: str) -> None:
    """
    One JSON object per line; request context is merged in from contextvars.
    """

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            redact_credentials,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _add_service_name(service_name: str):
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def redact_credentials(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS and event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_principal(*, user_id: str, strategy: str) -> None:
    # Every later log line of the request carries the resolved principal.
    structlog.contextvars.bind_contextvars(user_id=user_id, auth_strategy=strategy)


# --- Module Notes -----------------------------------------------------------
# Redaction is a backstop; call sites still log ids and reasons, never credentials.
