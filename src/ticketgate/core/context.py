"""Per-request context held in contextvars (correlation IDs)."""

from __future__ import annotations

import uuid
from contextvars import ContextVar

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def new_correlation_id() -> str:
    """Generate a short correlation ID for requests that arrive without one."""
    return uuid.uuid4().hex[:12]


def set_correlation_id(value: str) -> None:
    """Bind the correlation ID to the current request context."""
    _correlation_id.set(value)


def get_correlation_id() -> str | None:
    """Return the correlation ID bound to the current request context."""
    return _correlation_id.get()
