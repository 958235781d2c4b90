"""
Instrumented wrappers around the shared httpx clients.

Every request emits an ``[HTTP-Send]`` record before it goes out and, when a
response comes back, an ``[HTTP-Send-Respond]`` record with the elapsed time,
status line and content length. Failures are re-raised untouched and left to
the caller to report.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any

import httpx

from tracehttp.correlation import resolve_correlation_id
from tracehttp.settings import ClientSettings
from tracehttp.transport import create_async_http_client, create_http_client

logger = logging.getLogger(__name__)

SEND_TAG = "[HTTP-Send]"
RESPOND_TAG = "[HTTP-Send-Respond]"


def _trim(value: float) -> str:
    return f"{value:.3f}".rstrip("0").rstrip(".")


def format_duration(seconds: float) -> str:
    """Render a duration the way operators read it: ``850µs``, ``52.3ms``, ``1m4.5s``.

    Each unit shows at most three decimals, so the value is rounded to that
    precision before the unit is picked and carries move into the next unit.
    """
    ns = round(max(seconds, 0.0) * 1e9)
    if ns == 0:
        return "0s"
    if ns < 1_000:
        return f"{ns}ns"
    if ns < 1_000_000:
        return f"{_trim(ns / 1e3)}µs"
    ns = round(ns / 1_000) * 1_000
    if ns < 1_000_000_000:
        return f"{_trim(ns / 1e6)}ms"
    ms = round(ns / 1_000_000)
    if ms < 60_000:
        return f"{_trim(ms / 1e3)}s"
    minutes, ms = divmod(ms, 60_000)
    hours, minutes = divmod(minutes, 60)
    prefix = f"{hours}h{minutes}m" if hours else f"{minutes}m"
    return f"{prefix}{_trim(ms / 1e3)}s"


def content_length(response: httpx.Response) -> int:
    """
    Declared body length, ``-1`` when the server did not specify one.

    httpx transparently decodes compressed bodies, so a ``Content-Length``
    that describes the encoded payload is reported as unknown.
    """
    encoding = response.headers.get("content-encoding", "").strip().lower()
    if encoding and encoding != "identity":
        return -1
    raw = response.headers.get("content-length")
    if raw is None:
        return -1
    try:
        return int(raw)
    except ValueError:
        return -1


def status_line(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".strip()


def _log_send(correlation_id: str, request: httpx.Request) -> None:
    url = str(request.url)
    logger.info(
        "%s %s %s %s",
        SEND_TAG,
        correlation_id,
        request.method,
        url,
        extra={"correlation_id": correlation_id, "method": request.method, "url": url},
    )


def _log_respond(
    correlation_id: str,
    request: httpx.Request,
    response: httpx.Response,
    elapsed: float,
) -> None:
    url = str(request.url)
    length = content_length(response)
    logger.info(
        "%s %s %s %s %s %s %d",
        RESPOND_TAG,
        correlation_id,
        request.method,
        url,
        format_duration(elapsed),
        status_line(response),
        length,
        extra={
            "correlation_id": correlation_id,
            "method": request.method,
            "url": url,
            "elapsed_ms": round(elapsed * 1000.0, 3),
            "status_code": response.status_code,
            "content_length": length,
        },
    )


@dataclass(slots=True)
class InstrumentedClient:
    """Blocking client that logs each round trip through the shared httpx.Client."""

    _client: httpx.Client
    settings: ClientSettings

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        transport: httpx.BaseTransport | None = None,
    ) -> "InstrumentedClient":
        """Factory that builds the underlying client from ClientSettings."""
        return cls(create_http_client(settings, transport=transport), settings)

    def build_request(self, method: str, url: str, **kwargs: Any) -> httpx.Request:
        """Build a request carrying the client's configured timeouts."""
        return self._client.build_request(method, url, **kwargs)

    def send(
        self,
        request: httpx.Request,
        *,
        correlation_id: str | None = None,
        stream: bool = False,
        auth: Any = httpx.USE_CLIENT_DEFAULT,
        follow_redirects: Any = httpx.USE_CLIENT_DEFAULT,
    ) -> httpx.Response:
        """Send ``request`` unchanged, logging before and after the round trip."""
        start = time.perf_counter()
        cid = resolve_correlation_id(request, self.settings.correlation_header, correlation_id)
        _log_send(cid, request)

        response = self._client.send(
            request,
            stream=stream,
            auth=auth,
            follow_redirects=follow_redirects,
        )

        _log_respond(cid, request, response, time.perf_counter() - start)
        return response

    def request(
        self,
        method: str,
        url: str,
        *,
        correlation_id: str | None = None,
        auth: Any = httpx.USE_CLIENT_DEFAULT,
        follow_redirects: Any = httpx.USE_CLIENT_DEFAULT,
        **kwargs: Any,
    ) -> httpx.Response:
        """Build and send a request; ``auth`` and ``follow_redirects`` apply at send time."""
        return self.send(
            self.build_request(method, url, **kwargs),
            correlation_id=correlation_id,
            auth=auth,
            follow_redirects=follow_redirects,
        )

    def close(self) -> None:
        """Close the underlying HTTP resources."""
        self._client.close()

    def __enter__(self) -> "InstrumentedClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


@dataclass(slots=True)
class AsyncInstrumentedClient:
    """Async counterpart of InstrumentedClient around a shared httpx.AsyncClient."""

    _client: httpx.AsyncClient
    settings: ClientSettings

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "AsyncInstrumentedClient":
        """Factory that builds the underlying client from ClientSettings."""
        return cls(create_async_http_client(settings, transport=transport), settings)

    def build_request(self, method: str, url: str, **kwargs: Any) -> httpx.Request:
        return self._client.build_request(method, url, **kwargs)

    async def send(
        self,
        request: httpx.Request,
        *,
        correlation_id: str | None = None,
        stream: bool = False,
        auth: Any = httpx.USE_CLIENT_DEFAULT,
        follow_redirects: Any = httpx.USE_CLIENT_DEFAULT,
    ) -> httpx.Response:
        """Send ``request`` unchanged, logging before and after the round trip."""
        start = time.perf_counter()
        cid = resolve_correlation_id(request, self.settings.correlation_header, correlation_id)
        _log_send(cid, request)

        response = await self._client.send(
            request,
            stream=stream,
            auth=auth,
            follow_redirects=follow_redirects,
        )

        _log_respond(cid, request, response, time.perf_counter() - start)
        return response

    async def request(
        self,
        method: str,
        url: str,
        *,
        correlation_id: str | None = None,
        auth: Any = httpx.USE_CLIENT_DEFAULT,
        follow_redirects: Any = httpx.USE_CLIENT_DEFAULT,
        **kwargs: Any,
    ) -> httpx.Response:
        return await self.send(
            self.build_request(method, url, **kwargs),
            correlation_id=correlation_id,
            auth=auth,
            follow_redirects=follow_redirects,
        )

    async def aclose(self) -> None:
        """Close the underlying HTTP resources."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncInstrumentedClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
