"""API tests for the create-order endpoint.

These tests exercise the orders HTTP API for the main creation scenarios:
success, cross-country items, payload validation errors and catalog
outages. They rely on the in-process demo catalog from
``apps.orders.adapters`` for deterministic behavior.
"""
import pytest

from apps.orders import providers
from apps.orders.errors import CatalogUnavailable

CREATE_URL = "/api/orders/"


def _post(client, payload, headers):
    return client.post(CREATE_URL, data=payload, content_type="application/json", **headers)


@pytest.mark.django_db
def test_create_order_returns_201_with_captured_prices(client, as_user, member_india):
    payload = {"restaurantId": "r1", "items": [{"menuItemId": "m1", "quantity": 2}, {"menuItemId": "m2", "quantity": 1}]}
    r = _post(client, payload, as_user(member_india))
    assert r.status_code == 201
    body = r.json()
    assert body["id"] == "o1"
    assert body["status"] == "created"
    assert body["country"] == "India"
    assert body["ownerId"] == member_india.id
    assert body["totalCents"] == 2 * 35000 + 28000
    assert body["items"][0] == {"menuItemId": "m1", "quantity": 2, "unitPriceCents": 35000}
    assert body["paymentMethodId"] is None


@pytest.mark.django_db
def test_create_order_accepts_snake_case_keys(client, as_user, member_america):
    payload = {"restaurant_id": "r4", "items": [{"menu_item_id": "m9", "quantity": 1}]}
    r = _post(client, payload, as_user(member_america))
    assert r.status_code == 201
    assert r.json()["totalCents"] == 1800


@pytest.mark.django_db
def test_create_order_with_foreign_menu_item_returns_404(client, as_user, member_india, admin):
    payload = {"restaurantId": "r1", "items": [{"menuItemId": "m9", "quantity": 1}]}
    r = _post(client, payload, as_user(member_india))
    assert r.status_code == 404
    assert r.json()["detail"] == "NOT_FOUND"

    listing = client.get(CREATE_URL, **as_user(admin))
    assert listing.json()["count"] == 0


@pytest.mark.django_db
def test_create_order_with_foreign_restaurant_returns_404(client, as_user, member_india):
    payload = {"restaurantId": "r3", "items": [{"menuItemId": "m6", "quantity": 1}]}
    r = _post(client, payload, as_user(member_india))
    assert r.status_code == 404
    assert "Restaurant not found" in r.json()["message"]


@pytest.mark.django_db
@pytest.mark.parametrize(
    "payload",
    [
        {"restaurantId": "r1", "items": []},
        {"restaurantId": "r1", "items": [{"menuItemId": "m1", "quantity": 0}]},
        {"restaurantId": "r1", "items": [{"menuItemId": "m1", "quantity": "2"}]},
        {"restaurantId": "r1", "items": [{"menuItemId": "m1", "quantity": 1.5}]},
        {"restaurantId": "", "items": [{"menuItemId": "m1", "quantity": 1}]},
        {"items": [{"menuItemId": "m1", "quantity": 1}]},
    ],
)
def test_create_order_validation_error(client, as_user, member_india, payload):
    """Returns 400 when the payload fails DTO validation."""
    r = _post(client, payload, as_user(member_india))
    assert r.status_code == 400
    assert r.json()["detail"] == "INVALID_ARGUMENT"


@pytest.mark.django_db
def test_create_order_catalog_unavailable_returns_503(client, as_user, member_india, monkeypatch):
    class DownCatalog:
        def find_restaurant(self, restaurant_id, country=None):
            raise CatalogUnavailable("catalog unavailable")

    monkeypatch.setattr(providers, "get_catalog", lambda: DownCatalog())
    payload = {"restaurantId": "r1", "items": [{"menuItemId": "m1", "quantity": 1}]}
    r = _post(client, payload, as_user(member_india))
    assert r.status_code == 503
    assert r.json()["detail"] == "UPSTREAM_UNAVAILABLE"


@pytest.mark.django_db
def test_create_order_with_memory_repository(client, as_user, member_india, settings):
    settings.ORDER_REPOSITORY = "memory"
    payload = {"restaurantId": "r2", "items": [{"menuItemId": "m4", "quantity": 4}]}
    r = _post(client, payload, as_user(member_india))
    assert r.status_code == 201
    assert r.json()["totalCents"] == 20000
    assert client.get(f"/api/orders/{r.json()['id']}/", **as_user(member_india)).status_code == 200
