"""Environment-driven transport configuration for the instrumented client."""

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Certificate verification is off unless an operator opts in.
VERIFY_CERT = False

DEFAULT_TLS_HANDSHAKE_TIMEOUT = 10.0
DEFAULT_CORRELATION_HEADER = "X-Correlation-ID"

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _parse_bool(raw: str, name: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean value (true/false).")


@dataclass(frozen=True, slots=True)
class ClientSettings:
    """Read-only transport options shared by every request in the process."""

    verify_cert: bool = VERIFY_CERT
    tls_handshake_timeout: float = DEFAULT_TLS_HANDSHAKE_TIMEOUT
    correlation_header: str = DEFAULT_CORRELATION_HEADER

    @classmethod
    def load(cls) -> "ClientSettings":
        """
        Load configuration from environment variables.

        Unset variables fall back to the static defaults above, so an empty
        environment yields the same configuration as ``ClientSettings()``.
        """
        load_dotenv()

        verify_raw = os.getenv("HTTP_VERIFY_CERT", "").strip()
        verify_cert = _parse_bool(verify_raw, "HTTP_VERIFY_CERT") if verify_raw else VERIFY_CERT

        timeout_raw = os.getenv("HTTP_TLS_HANDSHAKE_TIMEOUT", "").strip()
        if timeout_raw:
            try:
                tls_handshake_timeout = float(timeout_raw)
            except ValueError as exc:
                raise ValueError("HTTP_TLS_HANDSHAKE_TIMEOUT must be a numeric value.") from exc
        else:
            tls_handshake_timeout = DEFAULT_TLS_HANDSHAKE_TIMEOUT
        if tls_handshake_timeout <= 0:
            raise ValueError("HTTP_TLS_HANDSHAKE_TIMEOUT must be greater than zero.")

        correlation_header = os.getenv("HTTP_CORRELATION_HEADER")
        if correlation_header is None:
            correlation_header = DEFAULT_CORRELATION_HEADER
        correlation_header = correlation_header.strip()
        if not correlation_header:
            raise ValueError("HTTP_CORRELATION_HEADER must be a non-empty string.")

        if not verify_cert:
            logger.warning(
                "TLS certificate verification is disabled; set HTTP_VERIFY_CERT=true to enable it."
            )

        return cls(
            verify_cert=verify_cert,
            tls_handshake_timeout=tls_handshake_timeout,
            correlation_header=correlation_header,
        )
