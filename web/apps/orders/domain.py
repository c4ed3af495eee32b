"""Domain models and ports for orders.

This module contains the enums and dataclasses used as DTOs across the
orders core (identity, catalog entries, orders), plus the protocol
definitions (ports) for the external collaborators the core depends on:
the catalog lookup and the order repository.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional, Protocol, Tuple


# ---- Enums ----
class Role(str, Enum):
    """Roles an authenticated caller can hold.

    The role decides both what the caller can see (visibility scope) and
    which order mutations it may perform.
    """

    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"

    @classmethod
    def parse(cls, raw: str) -> "Role":
        """Parse a role by value or name, case-insensitively.

        Raises:
            ValueError: If ``raw`` does not name a known role.
        """
        return _parse_enum(cls, raw)


class Country(str, Enum):
    """Countries the platform operates in. Every restaurant, menu item and
    order belongs to exactly one of them."""

    INDIA = "India"
    AMERICA = "America"

    @classmethod
    def parse(cls, raw: str) -> "Country":
        """Parse a country by value or name, case-insensitively.

        Raises:
            ValueError: If ``raw`` does not name a known country.
        """
        return _parse_enum(cls, raw)


class OrderStatus(str, Enum):
    """Enumeration of the possible order statuses.

    ``CREATED`` is the draft state every order starts in; ``PLACED`` and
    ``CANCELLED`` are terminal.
    """

    CREATED = "created"
    PLACED = "placed"
    CANCELLED = "cancelled"


def _parse_enum(enum_cls, raw):
    text = (raw or "").strip().lower()
    for member in enum_cls:
        if text in (member.value.lower(), member.name.lower()):
            return member
    raise ValueError(f"Unknown {enum_cls.__name__.lower()}: {raw!r}")


# ---- Entities / DTOs ----
@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as supplied by the gateway.

    Attributes:
        id: User identifier.
        role: Caller's role.
        country: Caller's country at the time of the request.
    """

    id: str
    role: Role
    country: Country


@dataclass(frozen=True)
class Restaurant:
    id: str
    name: str
    country: Country
    description: str = ""


@dataclass(frozen=True)
class MenuItem:
    """A dish offered by a restaurant.

    Attributes:
        price_cents: Unit price in integer minor units.
    """

    id: str
    restaurant_id: str
    name: str
    price_cents: int
    country: Country
    description: str = ""


@dataclass(frozen=True)
class OrderItemRequest:
    """A line requested by the caller, before prices are resolved."""

    menu_item_id: str
    quantity: int


@dataclass(frozen=True)
class OrderItem:
    """A single line item in an order.

    Attributes:
        menu_item_id: Identifier of the ordered menu item.
        quantity: Number of units, always a positive integer.
        unit_price_cents: Menu price captured when the order was created.
            Later catalog price changes never affect it.

    The dataclass is frozen because items are immutable once created in
    the context of an order.
    """

    menu_item_id: str
    quantity: int
    unit_price_cents: int

    @property
    def subtotal_cents(self) -> int:
        return self.quantity * self.unit_price_cents


@dataclass
class Order:
    """Container for order data.

    Attributes:
        id: Identifier (``o<n>``) assigned by the repository, or None if
            not yet saved.
        owner_id: Identity id of the creator.
        restaurant_id: Restaurant the order was placed with.
        items: Ordered, non-empty tuple of OrderItem.
        country: Creator's country at creation time. All visibility checks
            use this value, never the creator's current profile.
        status: Current OrderStatus.
        total_cents: Sum of quantity x unit price, computed at creation.
        payment_method_id: Set only when the order is placed.
        created_at: Creation timestamp (UTC).
    """

    id: Optional[str]
    owner_id: str
    restaurant_id: str
    items: Tuple[OrderItem, ...]
    country: Country
    status: OrderStatus = OrderStatus.CREATED
    total_cents: int = 0
    payment_method_id: Optional[str] = None
    created_at: Optional[datetime] = field(default=None)


@dataclass(frozen=True)
class OrderScope:
    """Predicate selecting the orders a caller may list.

    Unset attributes match everything. Instances are plain callables so any
    repository can evaluate them; ORM-backed repositories may translate
    the attributes into a query instead.
    """

    country: Optional[Country] = None
    owner_id: Optional[str] = None

    def __call__(self, order: Order) -> bool:
        if self.country is not None and order.country != self.country:
            return False
        if self.owner_id is not None and order.owner_id != self.owner_id:
            return False
        return True


# ---- Ports (DIP) ----
class CatalogLookup(Protocol):
    """Port describing catalog queries used by the domain.

    Every lookup accepts an optional ``country``. When given, entries from
    other countries are reported exactly like missing ones (``None`` or
    excluded), so callers cannot tell the two cases apart.
    """

    def find_restaurant(self, restaurant_id: str, country: Optional[Country] = None) -> Optional[Restaurant]:
        raise NotImplementedError()

    def find_menu_item(self, menu_item_id: str, country: Optional[Country] = None) -> Optional[MenuItem]:
        raise NotImplementedError()

    def find_restaurants(self, country: Optional[Country] = None) -> List[Restaurant]:
        raise NotImplementedError()

    def find_menu_items(self, restaurant_id: str, country: Optional[Country] = None) -> List[MenuItem]:
        raise NotImplementedError()


class OrderRepository(Protocol):
    """Port describing order storage.

    Implementations return detached copies: mutating a returned Order does
    not change what is stored. Status changes go exclusively through
    ``compare_and_set_status``.
    """

    def insert(self, order: Order) -> Order:
        """Persist a new order and return it with its freshly assigned id."""
        raise NotImplementedError()

    def find_by_id(self, order_id: str) -> Optional[Order]:
        raise NotImplementedError()

    def find_all(self) -> List[Order]:
        """Return every order in creation order."""
        raise NotImplementedError()

    def find_all_matching(self, predicate: Callable[[Order], bool]) -> List[Order]:
        """Return the orders for which ``predicate`` is true, in creation order."""
        raise NotImplementedError()

    def compare_and_set_status(
        self,
        order_id: str,
        expected: OrderStatus,
        new: OrderStatus,
        payment_method_id: Optional[str] = None,
    ) -> Optional[Order]:
        """Atomically move an order from ``expected`` to ``new``.

        ``payment_method_id`` is written together with the status when the
        new status is PLACED.

        Returns:
            The updated order, or None when the stored status was no longer
            ``expected`` (or the order vanished).
        """
        raise NotImplementedError()
