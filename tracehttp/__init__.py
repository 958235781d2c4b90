"""
Instrumented HTTP client shared across the process.

Callers obtain the client through ``get_client()`` (or ``get_async_client()``)
instead of building their own httpx client, so TLS and timeout configuration
stays in one place. The composition root may install its own instance with
``set_client()`` before anything else asks for one.
"""

import threading

from tracehttp.client import AsyncInstrumentedClient, InstrumentedClient
from tracehttp.correlation import bind_correlation_id, correlation_scope, get_correlation_id
from tracehttp.settings import VERIFY_CERT, ClientSettings

_lock = threading.Lock()
_client: InstrumentedClient | None = None
_async_client: AsyncInstrumentedClient | None = None


def set_client(client: InstrumentedClient | None) -> None:
    global _client
    with _lock:
        _client = client


def get_client() -> InstrumentedClient:
    """Return the shared client, building it from default settings on first use."""
    global _client
    with _lock:
        if _client is None:
            _client = InstrumentedClient.from_settings(ClientSettings())
        return _client


def set_async_client(client: AsyncInstrumentedClient | None) -> None:
    global _async_client
    with _lock:
        _async_client = client


def get_async_client() -> AsyncInstrumentedClient:
    """
    Return the shared async client, building it from default settings on first use.

    The underlying httpx.AsyncClient binds its connection pool to the event loop
    that first uses it. Code running more than one loop should build its own
    client per loop and install it with ``set_async_client()``.
    """
    global _async_client
    with _lock:
        if _async_client is None:
            _async_client = AsyncInstrumentedClient.from_settings(ClientSettings())
        return _async_client


__all__ = [
    "VERIFY_CERT",
    "AsyncInstrumentedClient",
    "ClientSettings",
    "InstrumentedClient",
    "bind_correlation_id",
    "correlation_scope",
    "get_async_client",
    "get_client",
    "get_correlation_id",
    "set_async_client",
    "set_client",
]
