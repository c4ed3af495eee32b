"""Integration tests for the Django ORM order repository.

These tests store domain orders through ``DjangoOrderRepository`` and read
them back, checking id assignment, scoping queries and the conditional
status update.
"""

from datetime import datetime, timezone

import pytest
from django.db import IntegrityError, connection

from apps.orders.domain import Country, Order, OrderItem, OrderScope, OrderStatus
from apps.orders.models import OrderModel, OrderSequence
from apps.orders.repository import DjangoOrderRepository


def _order(owner_id="4", country=Country.INDIA):
    items = (OrderItem("m1", 2, 35000), OrderItem("m4", 3, 5000))
    return Order(
        id=None,
        owner_id=owner_id,
        restaurant_id="r1",
        items=items,
        country=country,
        total_cents=sum(i.subtotal_cents for i in items),
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


@pytest.mark.django_db
def test_insert_assigns_sequential_ids_and_keeps_items_in_order():
    repo = DjangoOrderRepository()
    first = repo.insert(_order())
    second = repo.insert(_order())
    assert (first.id, second.id) == ("o1", "o2")
    assert [i.menu_item_id for i in first.items] == ["m1", "m4"]
    assert first.total_cents == 85000
    assert first.status == OrderStatus.CREATED
    assert first.country == Country.INDIA


@pytest.mark.django_db
def test_insert_persists_rows():
    """Assert stored values with low-level DB access, not through the ORM."""
    order = DjangoOrderRepository().insert(_order())
    with connection.cursor() as cur:
        cur.execute("select status, total_cents, country from orders where id = %s", [order.id])
        row = cur.fetchone()
        cur.execute("select count(*) from order_items where order_id = %s", [order.id])
        (item_count,) = cur.fetchone()
    assert row == ("created", 85000, "India")
    assert item_count == 2


@pytest.mark.django_db
def test_find_by_id_missing_returns_none():
    assert DjangoOrderRepository().find_by_id("o999") is None


@pytest.mark.django_db
def test_find_all_matching_with_scope_and_plain_predicate():
    repo = DjangoOrderRepository()
    a = repo.insert(_order(owner_id="4"))
    b = repo.insert(_order(owner_id="6"))
    c = repo.insert(_order(owner_id="5", country=Country.AMERICA))

    assert [o.id for o in repo.find_all()] == [a.id, b.id, c.id]
    assert [o.id for o in repo.find_all_matching(OrderScope(country=Country.INDIA))] == [a.id, b.id]
    assert [o.id for o in repo.find_all_matching(OrderScope(owner_id="5"))] == [c.id]
    assert [o.id for o in repo.find_all_matching(lambda o: o.owner_id == "6")] == [b.id]


@pytest.mark.django_db
def test_compare_and_set_status_applies_once():
    repo = DjangoOrderRepository()
    order = repo.insert(_order())

    placed = repo.compare_and_set_status(order.id, OrderStatus.CREATED, OrderStatus.PLACED, payment_method_id="pm1")
    assert placed.status == OrderStatus.PLACED
    assert placed.payment_method_id == "pm1"

    assert repo.compare_and_set_status(order.id, OrderStatus.CREATED, OrderStatus.CANCELLED) is None
    assert repo.find_by_id(order.id).status == OrderStatus.PLACED


@pytest.mark.django_db
def test_cancel_does_not_touch_payment_method():
    repo = DjangoOrderRepository()
    order = repo.insert(_order())
    cancelled = repo.compare_and_set_status(order.id, OrderStatus.CREATED, OrderStatus.CANCELLED, payment_method_id="pm9")
    assert cancelled.status == OrderStatus.CANCELLED
    assert cancelled.payment_method_id is None


@pytest.mark.django_db
def test_compare_and_set_status_unknown_order_returns_none():
    assert DjangoOrderRepository().compare_and_set_status("o1", OrderStatus.CREATED, OrderStatus.PLACED) is None


@pytest.mark.django_db
def test_ids_come_from_the_locked_counter_not_the_last_row():
    repo = DjangoOrderRepository()
    repo.insert(_order())
    second = repo.insert(_order())
    OrderModel.objects.filter(id=second.id).delete()

    third = repo.insert(_order())
    assert third.id == "o3"
    assert OrderSequence.objects.get(name="orders").value == 3


@pytest.mark.django_db
def test_stale_counter_never_overwrites_an_existing_order():
    """A counter behind the stored rows must fail the insert, not update o2."""
    repo = DjangoOrderRepository()
    repo.insert(_order(owner_id="4"))
    second = repo.insert(_order(owner_id="6"))
    OrderSequence.objects.filter(name="orders").update(value=1)

    with pytest.raises(IntegrityError):
        repo.insert(_order(owner_id="5", country=Country.AMERICA))

    kept = repo.find_by_id(second.id)
    assert kept.owner_id == "6"
    assert kept.country == Country.INDIA
    assert [i.menu_item_id for i in kept.items] == ["m1", "m4"]
    assert [o.id for o in repo.find_all()] == ["o1", "o2"]


@pytest.mark.django_db
def test_counter_row_is_created_on_demand():
    OrderSequence.objects.all().delete()
    assert DjangoOrderRepository().insert(_order()).id == "o1"
