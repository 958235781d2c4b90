import ssl

import pytest

from tracehttp.settings import VERIFY_CERT, ClientSettings
from tracehttp.transport import create_ssl_context, create_timeout

_ENV_VARS = ("HTTP_VERIFY_CERT", "HTTP_TLS_HANDSHAKE_TIMEOUT", "HTTP_CORRELATION_HEADER")


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("tracehttp.settings.load_dotenv", lambda: None)
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_match_static_configuration() -> None:
    settings = ClientSettings()
    assert VERIFY_CERT is False
    assert settings.verify_cert is VERIFY_CERT
    assert settings.tls_handshake_timeout == 10.0
    assert settings.correlation_header == "X-Correlation-ID"


def test_load_without_environment_equals_defaults(caplog: pytest.LogCaptureFixture) -> None:
    assert ClientSettings.load() == ClientSettings()
    assert "verification is disabled" in caplog.text


def test_load_reads_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HTTP_VERIFY_CERT", "true")
    monkeypatch.setenv("HTTP_TLS_HANDSHAKE_TIMEOUT", "2.5")
    monkeypatch.setenv("HTTP_CORRELATION_HEADER", " X-Request-ID ")

    settings = ClientSettings.load()

    assert settings.verify_cert is True
    assert settings.tls_handshake_timeout == 2.5
    assert settings.correlation_header == "X-Request-ID"


@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("HTTP_VERIFY_CERT", "maybe", "boolean"),
        ("HTTP_TLS_HANDSHAKE_TIMEOUT", "soon", "numeric"),
        ("HTTP_TLS_HANDSHAKE_TIMEOUT", "0", "greater than zero"),
        ("HTTP_CORRELATION_HEADER", "   ", "non-empty"),
    ],
)
def test_load_rejects_invalid_values(
    monkeypatch: pytest.MonkeyPatch, name: str, value: str, message: str
) -> None:
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError) as exc:
        ClientSettings.load()
    assert message in str(exc.value)


def test_settings_are_read_only() -> None:
    settings = ClientSettings()
    with pytest.raises(AttributeError):
        settings.verify_cert = True  # type: ignore[misc]


def test_ssl_context_follows_verify_flag() -> None:
    insecure = create_ssl_context(ClientSettings())
    assert insecure.verify_mode == ssl.CERT_NONE
    assert insecure.check_hostname is False

    secure = create_ssl_context(ClientSettings(verify_cert=True))
    assert secure.verify_mode == ssl.CERT_REQUIRED
    assert secure.check_hostname is True


def test_timeout_bounds_only_connect_phase() -> None:
    timeout = create_timeout(ClientSettings(tls_handshake_timeout=4.0))
    assert timeout.connect == 4.0
    assert timeout.read is None
    assert timeout.write is None
    assert timeout.pool is None
