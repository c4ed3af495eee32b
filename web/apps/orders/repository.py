"""Repository layer for persisting orders.

This module implements the ``OrderRepository`` port on top of the Django
ORM. It maps between the ``OrderModel``/``OrderItemModel`` rows and the
domain ``Order`` dataclass so the domain layer is not coupled to Django
ORM details.
"""

from typing import Callable, List, Optional

from django.db import transaction

from .domain import Country, Order, OrderItem, OrderRepository, OrderScope, OrderStatus
from .models import OrderItemModel, OrderModel


class DjangoOrderRepository(OrderRepository):
    """Repository that persists Order domain objects using Django ORM.

    Status changes are done with a single conditional ``UPDATE`` so two
    concurrent requests can never both move the same order out of a given
    status.
    """

    def insert(self, order: Order) -> Order:
        """Persist a new order record with its items.

        Args:
            order: Domain ``Order`` without an id.

        Returns:
            The stored order, carrying the newly assigned ``o<n>`` id.
        """
        with transaction.atomic():
            obj = OrderModel(
                owner_id=order.owner_id,
                restaurant_id=order.restaurant_id,
                status=_value(order.status),
                country=_value(order.country),
                total_cents=order.total_cents,
                payment_method_id=order.payment_method_id,
                created_at=order.created_at,
            )
            obj.save()
            OrderItemModel.objects.bulk_create(
                [
                    OrderItemModel(
                        order=obj,
                        position=pos,
                        menu_item_id=item.menu_item_id,
                        quantity=item.quantity,
                        unit_price_cents=item.unit_price_cents,
                    )
                    for pos, item in enumerate(order.items)
                ]
            )
        return self.find_by_id(obj.id)

    def find_by_id(self, order_id: str) -> Optional[Order]:
        obj = OrderModel.objects.prefetch_related("items").filter(id=order_id).first()
        return _to_domain(obj) if obj else None

    def find_all(self) -> List[Order]:
        return [_to_domain(o) for o in OrderModel.objects.prefetch_related("items").order_by("internal_id")]

    def find_all_matching(self, predicate: Callable[[Order], bool]) -> List[Order]:
        """Return matching orders.

        ``OrderScope`` predicates are pushed down into the query; any other
        callable is evaluated in Python over every order.
        """
        if not isinstance(predicate, OrderScope):
            return [o for o in self.find_all() if predicate(o)]

        qs = OrderModel.objects.prefetch_related("items").order_by("internal_id")
        if predicate.country is not None:
            qs = qs.filter(country=_value(predicate.country))
        if predicate.owner_id is not None:
            qs = qs.filter(owner_id=predicate.owner_id)
        return [_to_domain(o) for o in qs]

    def compare_and_set_status(
        self,
        order_id: str,
        expected: OrderStatus,
        new: OrderStatus,
        payment_method_id: Optional[str] = None,
    ) -> Optional[Order]:
        changes = {"status": _value(new)}
        if new == OrderStatus.PLACED:
            changes["payment_method_id"] = payment_method_id
        with transaction.atomic():
            updated = OrderModel.objects.filter(id=order_id, status=_value(expected)).update(**changes)
        if not updated:
            return None
        return self.find_by_id(order_id)


def _to_domain(obj: OrderModel) -> Order:
    return Order(
        id=obj.id,
        owner_id=obj.owner_id,
        restaurant_id=obj.restaurant_id,
        items=tuple(
            OrderItem(
                menu_item_id=i.menu_item_id,
                quantity=i.quantity,
                unit_price_cents=i.unit_price_cents,
            )
            for i in obj.items.all()
        ),
        country=Country(obj.country),
        status=OrderStatus(obj.status),
        total_cents=obj.total_cents,
        payment_method_id=obj.payment_method_id,
        created_at=obj.created_at,
    )


def _value(v):
    return v.value if hasattr(v, "value") else v
