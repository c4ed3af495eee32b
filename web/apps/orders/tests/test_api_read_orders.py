"""API tests for listing and retrieving orders with role/country scoping."""
import pytest

LIST_URL = "/api/orders/"
DETAIL_URL = "/api/orders/{oid}/"


@pytest.fixture
def seeded(client, as_user, member_india, member_india_2, member_america):
    """Create one order each for two Indian members and one American member."""

    def create(identity, restaurant, menu_item):
        payload = {"restaurantId": restaurant, "items": [{"menuItemId": menu_item, "quantity": 1}]}
        r = client.post(LIST_URL, data=payload, content_type="application/json", **as_user(identity))
        assert r.status_code == 201
        return r.json()["id"]

    return {
        "india_1": create(member_india, "r1", "m1"),
        "india_2": create(member_india_2, "r2", "m4"),
        "america": create(member_america, "r3", "m6"),
    }


def _ids(response):
    return [o["id"] for o in response.json()["results"]]


@pytest.mark.django_db
def test_admin_lists_everything(client, as_user, admin, seeded):
    r = client.get(LIST_URL, **as_user(admin))
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 3
    assert _ids(r) == [seeded["india_1"], seeded["india_2"], seeded["america"]]


@pytest.mark.django_db
def test_manager_lists_own_country(client, as_user, manager_india, seeded):
    r = client.get(LIST_URL, **as_user(manager_india))
    assert _ids(r) == [seeded["india_1"], seeded["india_2"]]


@pytest.mark.django_db
def test_member_lists_only_own_orders(client, as_user, member_india, seeded):
    r = client.get(LIST_URL, **as_user(member_india))
    assert _ids(r) == [seeded["india_1"]]


@pytest.mark.django_db
def test_list_pagination(client, as_user, admin, seeded):
    r = client.get(LIST_URL, {"page": 2, "page_size": 2}, **as_user(admin))
    body = r.json()
    assert body["page"] == 2
    assert body["page_size"] == 2
    assert _ids(r) == [seeded["america"]]


@pytest.mark.django_db
def test_list_bad_pagination_returns_400(client, as_user, admin):
    r = client.get(LIST_URL, {"page": "x"}, **as_user(admin))
    assert r.status_code == 400


@pytest.mark.django_db
def test_get_order_by_id_returns_payload(client, as_user, member_india, seeded):
    r = client.get(DETAIL_URL.format(oid=seeded["india_1"]), **as_user(member_india))
    assert r.status_code == 200
    body = r.json()
    assert body["id"] == seeded["india_1"]
    assert body["status"] == "created"
    assert body["totalCents"] == 35000
    assert body["restaurantId"] == "r1"
    assert "createdAt" in body


@pytest.mark.django_db
def test_get_order_not_found_returns_404(client, as_user, admin):
    r = client.get(DETAIL_URL.format(oid="o999"), **as_user(admin))
    assert r.status_code == 404
    assert r.json()["detail"] == "NOT_FOUND"


@pytest.mark.django_db
def test_manager_other_country_gets_403(client, as_user, manager_india, seeded):
    r = client.get(DETAIL_URL.format(oid=seeded["america"]), **as_user(manager_india))
    assert r.status_code == 403
    assert r.json()["detail"] == "FORBIDDEN"


@pytest.mark.django_db
def test_member_other_owner_gets_404(client, as_user, member_india, seeded):
    r = client.get(DETAIL_URL.format(oid=seeded["india_2"]), **as_user(member_india))
    assert r.status_code == 404
