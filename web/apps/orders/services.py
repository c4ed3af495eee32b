"""Domain service for the order lifecycle.

``OrderService`` creates orders (validating their contents against the
catalog and capturing prices), scopes what each caller may read, and
gates the two status changes (place, cancel) by role and by the state
machine. It does not handle HTTP or persistence details: both the catalog
and the order store are injected ports.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from . import authorization, state_machine
from .domain import (
    CatalogLookup,
    Identity,
    Order,
    OrderItem,
    OrderItemRequest,
    OrderRepository,
    OrderScope,
    OrderStatus,
    Role,
)
from .errors import AccessDenied, InvalidArgument, InvalidStateTransition, NotFound

logger = logging.getLogger(__name__)


class OrderService:
    """Domain service responsible for creating, reading and finalizing orders.

    Visibility rules:
        - Admin: every order.
        - Manager: orders of their own country. Direct access to another
          country's order is Forbidden.
        - Member: only orders they own. Anything else is reported as not
          found so members never learn which order ids exist.
    """

    def __init__(self, catalog: CatalogLookup, orders: OrderRepository):
        """Initialize the service with required dependencies.

        Args:
            catalog: CatalogLookup used to resolve restaurants and menu items.
            orders: OrderRepository holding the order collection.
        """
        self.catalog = catalog
        self.orders = orders

    def create(self, items: Sequence[OrderItemRequest], restaurant_id: str, owner: Identity) -> Order:
        """Create a draft order for ``owner``.

        Restaurant and menu items are always resolved within the owner's
        country, whatever the owner's role. All items are resolved before
        anything is stored, so a failure leaves no order behind.

        Args:
            items: Requested lines; at least one.
            restaurant_id: Restaurant to order from.
            owner: Identity of the creator.

        Returns:
            The stored Order in CREATED status.

        Raises:
            InvalidArgument: Empty item list, missing ids or a quantity
                that is not a positive integer.
            NotFound: The restaurant or any menu item does not exist in the
                owner's country.
        """
        _validate_create(items, restaurant_id)

        restaurant = self.catalog.find_restaurant(restaurant_id, country=owner.country)
        if restaurant is None:
            raise NotFound("Restaurant not found or not accessible in your country")

        order_items = self._resolve_items(items, owner)
        total_cents = sum(item.subtotal_cents for item in order_items)

        order = Order(
            id=None,
            owner_id=owner.id,
            restaurant_id=restaurant.id,
            items=tuple(order_items),
            country=owner.country,
            status=OrderStatus.CREATED,
            total_cents=total_cents,
            created_at=datetime.now(timezone.utc),
        )
        stored = self.orders.insert(order)
        logger.info(
            "order created",
            extra={"order_id": stored.id, "owner_id": owner.id, "total_cents": total_cents},
        )
        return stored

    def find_all(self, caller: Identity) -> List[Order]:
        """Return every order ``caller`` may see. An empty list is valid."""
        if caller.role == Role.ADMIN:
            return self.orders.find_all()
        if caller.role == Role.MANAGER:
            return self.orders.find_all_matching(OrderScope(country=caller.country))
        if caller.role == Role.MEMBER:
            return self.orders.find_all_matching(OrderScope(owner_id=caller.id))
        raise AccessDenied(f"Access denied: unknown role {caller.role!r}")

    def find_one(self, order_id: str, caller: Identity) -> Order:
        """Return a single order, applying role and country scoping.

        Raises:
            NotFound: The order does not exist, or the caller is a member
                who does not own it.
            AccessDenied: The caller is a manager and the order belongs to
                another country.
        """
        order = self.orders.find_by_id(order_id)
        if order is None:
            raise NotFound("Order not found")

        if caller.role == Role.ADMIN:
            return order
        if caller.role == Role.MANAGER:
            authorization.enforce_country_access(caller.role, caller.country, order.country, "Order")
            return order
        if caller.role == Role.MEMBER:
            if order.owner_id != caller.id:
                raise NotFound("Order not found")
            return order
        raise AccessDenied(f"Access denied: unknown role {caller.role!r}")

    def place_order(self, order_id: str, caller: Identity, payment_method_id: Optional[str] = None) -> Order:
        """Finalize a draft order: CREATED -> PLACED.

        Raises:
            AccessDenied: The caller is not an admin or manager, or (for
                managers) the order is in another country.
            NotFound: The order does not exist.
            InvalidStateTransition: The order is no longer a draft.
        """
        authorization.enforce_role_access(caller.role, authorization.ORDER_MANAGERS, "place orders")
        order = self.find_one(order_id, caller)
        state_machine.validate_can_place(order.status)
        placed = self._transition(order, OrderStatus.PLACED, payment_method_id=payment_method_id)
        logger.info(
            "order placed",
            extra={"order_id": placed.id, "by": caller.id, "payment_method_id": payment_method_id},
        )
        return placed

    def cancel_order(self, order_id: str, caller: Identity) -> Order:
        """Cancel a draft order: CREATED -> CANCELLED.

        Raises the same errors as ``place_order``.
        """
        authorization.enforce_role_access(caller.role, authorization.ORDER_MANAGERS, "cancel orders")
        order = self.find_one(order_id, caller)
        state_machine.validate_can_cancel(order.status)
        cancelled = self._transition(order, OrderStatus.CANCELLED)
        logger.info("order cancelled", extra={"order_id": cancelled.id, "by": caller.id})
        return cancelled

    def _transition(self, order: Order, new: OrderStatus, payment_method_id: Optional[str] = None) -> Order:
        state_machine.enforce_transition(order.status, new)
        updated = self.orders.compare_and_set_status(
            order.id, order.status, new, payment_method_id=payment_method_id
        )
        if updated is None:
            # Another request changed the status between our read and write.
            logger.warning("order status race lost", extra={"order_id": order.id, "target": new.value})
            raise InvalidStateTransition(
                f"Invalid state transition: order '{order.id}' is no longer in "
                f"'{order.status.value}' status"
            )
        return updated

    def _resolve_items(self, items: Sequence[OrderItemRequest], owner: Identity) -> List[OrderItem]:
        resolved = []
        for item in items:
            menu_item = self.catalog.find_menu_item(item.menu_item_id, country=owner.country)
            if menu_item is None:
                raise NotFound(f"Menu item '{item.menu_item_id}' not found or not accessible")
            resolved.append(
                OrderItem(
                    menu_item_id=menu_item.id,
                    quantity=item.quantity,
                    unit_price_cents=menu_item.price_cents,
                )
            )
        return resolved


def _validate_create(items: Sequence[OrderItemRequest], restaurant_id: str) -> None:
    if not restaurant_id:
        raise InvalidArgument("Restaurant ID is required")
    if not items:
        raise InvalidArgument("Order must contain at least one item")
    for item in items:
        if not item.menu_item_id:
            raise InvalidArgument("Menu item ID is required")
        qty = item.quantity
        if isinstance(qty, bool) or not isinstance(qty, int):
            raise InvalidArgument("Quantity must be an integer")
        if qty <= 0:
            raise InvalidArgument("Quantity must be greater than 0")
