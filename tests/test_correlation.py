import httpx

from tracehttp.correlation import (
    bind_correlation_id,
    correlation_scope,
    get_correlation_id,
    resolve_correlation_id,
)

HEADER = "X-Correlation-ID"


def test_explicit_value_wins_over_header() -> None:
    request = httpx.Request("GET", "http://mock.local/", headers={HEADER: "from-header"})
    assert resolve_correlation_id(request, HEADER, "explicit") == "explicit"
    assert resolve_correlation_id(request, HEADER) == "from-header"


def test_scope_binds_and_restores() -> None:
    request = httpx.Request("GET", "http://mock.local/")
    assert get_correlation_id() is None

    with correlation_scope("outer") as outer:
        assert outer == "outer"
        with correlation_scope() as inner:
            assert inner and inner != "outer"
            assert resolve_correlation_id(request, HEADER) == inner
        assert get_correlation_id() == "outer"

    assert get_correlation_id() is None


def test_generated_when_nothing_is_bound() -> None:
    request = httpx.Request("GET", "http://mock.local/")
    first = resolve_correlation_id(request, HEADER)
    second = resolve_correlation_id(request, HEADER)
    assert first and second and first != second
    assert HEADER not in request.headers


def test_bind_sets_ambient_value() -> None:
    bind_correlation_id("bound")
    try:
        assert get_correlation_id() == "bound"
    finally:
        bind_correlation_id(None)
