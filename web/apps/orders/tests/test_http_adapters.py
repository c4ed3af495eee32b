"""Unit tests for the HTTP catalog adapter.

These tests verify that the catalog client maps responses to domain
objects, treats 404 as "not found or not accessible", and wraps network
errors, by monkeypatching ``httpx.Client.get``.
"""
import httpx
import pytest

from apps.orders.domain import Country
from apps.orders.errors import CatalogUnavailable
from apps.orders.http_adapters import HttpCatalogClient, _catalog_cb


class DummyResp:
    """Minimal httpx-like response stub for adapter tests."""

    def __init__(self, status_code=200, json_data=None):
        self.status_code = status_code
        self._json = json_data

    def json(self):
        return self._json


@pytest.fixture(autouse=True)
def closed_circuit():
    _catalog_cb.on_success()
    yield
    _catalog_cb.on_success()


def test_find_menu_item_ok_sends_country_filter(monkeypatch):
    seen = {}

    def fake_get(self, url, params=None, headers=None, **kw):
        seen["url"], seen["params"] = url, params
        return DummyResp(200, {
            "id": "m1", "restaurant_id": "r1", "name": "Butter Chicken",
            "price_cents": 35000, "country": "India", "description": "",
        })

    monkeypatch.setattr(httpx.Client, "get", fake_get, raising=True)
    item = HttpCatalogClient(base_url="http://catalog:9001").find_menu_item("m1", country=Country.INDIA)
    assert item.price_cents == 35000
    assert item.country == Country.INDIA
    assert seen == {"url": "http://catalog:9001/menu-items/m1", "params": {"country": "India"}}


def test_find_restaurant_404_is_none(monkeypatch):
    monkeypatch.setattr(httpx.Client, "get", lambda self, url, **kw: DummyResp(404, {"detail": "NOT_FOUND"}))
    assert HttpCatalogClient(base_url="http://x").find_restaurant("r3", country=Country.INDIA) is None
    assert _catalog_cb.state == "CLOSED"


def test_find_restaurants_without_filter(monkeypatch):
    seen = {}

    def fake_get(self, url, params=None, headers=None, **kw):
        seen["params"] = params
        return DummyResp(200, [{"id": "r1", "name": "Spice Route", "country": "India", "description": ""}])

    monkeypatch.setattr(httpx.Client, "get", fake_get, raising=True)
    restaurants = HttpCatalogClient(base_url="http://x").find_restaurants()
    assert [r.id for r in restaurants] == ["r1"]
    assert seen["params"] is None


def test_network_error_becomes_catalog_unavailable(monkeypatch, settings):
    settings.HTTP_RETRY_MAX = 1

    def fake_get(self, url, **kw):
        raise httpx.ConnectError("boom")

    monkeypatch.setattr(httpx.Client, "get", fake_get, raising=True)
    with pytest.raises(CatalogUnavailable) as e:
        HttpCatalogClient(base_url="http://x").find_menu_item("m1")
    assert isinstance(e.value.__cause__, httpx.ConnectError)


def test_unexpected_status_is_not_retried(monkeypatch):
    calls = {"n": 0}

    def fake_get(self, url, **kw):
        calls["n"] += 1
        return DummyResp(422, {"detail": "bad country"})

    monkeypatch.setattr(httpx.Client, "get", fake_get, raising=True)
    with pytest.raises(CatalogUnavailable):
        HttpCatalogClient(base_url="http://x").find_menu_items("r1")
    assert calls["n"] == 1
