"""Correlation identifiers tying together the log lines of one request."""

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

import httpx

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def new_correlation_id() -> str:
    return uuid.uuid4().hex


def get_correlation_id() -> str | None:
    """Return the correlation id bound to the current context, if any."""
    return _correlation_id.get()


def bind_correlation_id(value: str | None) -> None:
    _correlation_id.set(value)


@contextmanager
def correlation_scope(value: str | None = None) -> Iterator[str]:
    """Bind a correlation id (generated when omitted) for the enclosed block."""
    correlation_id = value or new_correlation_id()
    token = _correlation_id.set(correlation_id)
    try:
        yield correlation_id
    finally:
        _correlation_id.reset(token)


def resolve_correlation_id(
    request: httpx.Request,
    header: str,
    explicit: str | None = None,
) -> str:
    """
    Pick the correlation id for an outgoing request.

    Precedence: the caller's explicit value, the request header, the ambient
    context value, then a freshly generated id. The request is left untouched.
    """
    if explicit:
        return explicit
    from_header = request.headers.get(header)
    if from_header:
        return from_header
    return _correlation_id.get() or new_correlation_id()
