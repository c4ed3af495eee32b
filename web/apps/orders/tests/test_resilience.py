"""Retry and circuit breaker behavior of the HTTP catalog adapter."""
import httpx
import pytest

from apps.orders.errors import CatalogUnavailable
from apps.orders.http_adapters import CircuitBreaker, HttpCatalogClient, _catalog_cb


@pytest.fixture(autouse=True)
def closed_circuit():
    _catalog_cb.on_success()
    yield
    _catalog_cb.on_success()


def test_catalog_retries_on_5xx(monkeypatch, settings):
    settings.HTTP_RETRY_MAX = 1
    settings.HTTP_RETRY_BACKOFF_BASE = 0.0
    calls = {"n": 0}

    def fake_get(self, url, params=None, headers=None, **kwargs):
        calls["n"] += 1
        if calls["n"] == 1:
            class R:
                status_code = 500
            return R()

        class R2:
            status_code = 200

            def json(self):
                return {"id": "r1", "name": "Spice Route", "country": "India"}
        assert headers["X-Retry-Count"] == "1"
        return R2()

    monkeypatch.setattr(httpx.Client, "get", fake_get, raising=True)
    monkeypatch.setattr("time.sleep", lambda *a, **k: None, raising=True)

    restaurant = HttpCatalogClient(base_url="http://x").find_restaurant("r1")
    assert restaurant.id == "r1"
    assert calls["n"] == 2


def test_exhausted_retries_count_as_circuit_failure(monkeypatch, settings):
    settings.HTTP_RETRY_MAX = 2

    class R:
        status_code = 503

    monkeypatch.setattr(httpx.Client, "get", lambda self, url, **kw: R())
    with pytest.raises(CatalogUnavailable):
        HttpCatalogClient(base_url="http://x").find_restaurant("r1")
    assert _catalog_cb._failures == 1


def test_open_circuit_short_circuits_calls(monkeypatch):
    breaker = CircuitBreaker("catalog", fail_threshold=1, reset_timeout=60.0)
    monkeypatch.setattr("apps.orders.http_adapters._catalog_cb", breaker)

    def fail_get(self, url, **kw):
        raise httpx.ConnectError("down")

    monkeypatch.setattr(httpx.Client, "get", fail_get)
    client = HttpCatalogClient(base_url="http://x")
    with pytest.raises(CatalogUnavailable):
        client.find_restaurant("r1")
    assert breaker.state == "OPEN"

    with pytest.raises(CatalogUnavailable) as e:
        client.find_restaurant("r1")
    assert e.value.code == "CIRCUIT_OPEN"


def test_half_open_allows_one_probe_and_closes_on_success(monkeypatch):
    breaker = CircuitBreaker("catalog", fail_threshold=1, reset_timeout=0.0)
    breaker.on_failure()
    assert breaker.state == "HALF_OPEN"
    assert breaker.before_call() == "HALF_OPEN"
    with pytest.raises(CatalogUnavailable):
        breaker.before_call()
    breaker.on_success()
    assert breaker.state == "CLOSED"
