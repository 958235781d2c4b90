"""Factories for the underlying httpx clients and their TLS configuration."""

import ssl

import httpx

from tracehttp.settings import ClientSettings


def create_ssl_context(settings: ClientSettings) -> ssl.SSLContext:
    """Build the TLS context shared by every connection of the client."""
    context = ssl.create_default_context()
    if not settings.verify_cert:
        # check_hostname must be cleared before verify_mode can drop to CERT_NONE.
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def create_timeout(settings: ClientSettings) -> httpx.Timeout:
    """
    httpx performs the TLS handshake during its connect phase, so the
    handshake timeout bounds ``connect``. Read, write and pool waits stay
    unbounded.
    """
    return httpx.Timeout(None, connect=settings.tls_handshake_timeout)


def create_http_client(
    settings: ClientSettings,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    return httpx.Client(
        verify=create_ssl_context(settings),
        timeout=create_timeout(settings),
        transport=transport,
        follow_redirects=True,
    )


def create_async_http_client(
    settings: ClientSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        verify=create_ssl_context(settings),
        timeout=create_timeout(settings),
        transport=transport,
        follow_redirects=True,
    )
