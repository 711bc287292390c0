"""Request-scoped logging helpers."""

from __future__ import annotations

import logging
import uuid
from contextvars import ContextVar, Token
from typing import Optional

logger = logging.getLogger(__name__)

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)


def new_request_id() -> str:
    """Generate a fresh request identifier for correlating logs."""

    return str(uuid.uuid4())


def bind_request_id(value: Optional[str]) -> Token | None:
    """Bind ``value`` for the current context and return the reset token."""

    if value is None:
        return None
    return _request_id_ctx.set(value)


def reset_request_id(token: Optional[Token]) -> None:
    if token is None:
        return
    _request_id_ctx.reset(token)


def current_request_id() -> Optional[str]:
    return _request_id_ctx.get()


def log_event(message: str, **extra: object) -> None:
    """Log an event with the active request id attached."""

    payload = {"request_id": current_request_id(), **extra}
    logger.info(message, extra={"payload": payload})


__all__ = [
    "bind_request_id",
    "current_request_id",
    "log_event",
    "new_request_id",
    "reset_request_id",
]
