"""Entry point that sends a single instrumented request and reports the outcome."""

import argparse
import logging
import os
import sys

import httpx

from tracehttp import InstrumentedClient, get_client, set_client
from tracehttp.settings import ClientSettings


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Send one request through the instrumented client.")
    parser.add_argument("url")
    parser.add_argument("--method", default="GET")
    parser.add_argument("--correlation-id", default=None)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Bootstrap the shared client and probe the given URL."""
    args = _parse_args(argv)
    _configure_logging()
    logger = logging.getLogger("tracehttp-probe")

    settings = ClientSettings.load()
    set_client(InstrumentedClient.from_settings(settings))
    client = get_client()

    try:
        response = client.request(
            args.method.upper(),
            args.url,
            correlation_id=args.correlation_id,
        )
    except httpx.HTTPError as exc:
        logger.error("Request to %s failed: %s", args.url, exc, exc_info=True)
        return 1
    finally:
        client.close()
        set_client(None)

    print(f"{response.status_code} {response.reason_phrase}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
