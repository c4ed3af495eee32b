"""In-process adapters for the orders domain ports.

These adapters implement ``CatalogLookup`` and ``OrderRepository`` without
any network or database calls. They are intended for unit tests and local
development where deterministic behavior is useful and external services
are not required.
"""

import itertools
import threading
from dataclasses import replace
from typing import Callable, Dict, Iterable, List, Optional

from .domain import (
    CatalogLookup,
    Country,
    MenuItem,
    Order,
    OrderRepository,
    OrderStatus,
    Restaurant,
)


DEMO_RESTAURANTS = (
    Restaurant("r1", "Spice Route", Country.INDIA, "North Indian, Curries"),
    Restaurant("r2", "Taj Mahal", Country.INDIA, "Breads, Lentils"),
    Restaurant("r3", "American Diner", Country.AMERICA, "Breakfast, Sandwiches"),
    Restaurant("r4", "Burger Palace", Country.AMERICA, "Burgers, Fast Food"),
)

DEMO_MENU_ITEMS = (
    MenuItem("m1", "r1", "Butter Chicken", 35000, Country.INDIA, "Creamy tomato curry"),
    MenuItem("m2", "r1", "Paneer Tikka", 28000, Country.INDIA, "Grilled cottage cheese"),
    MenuItem("m3", "r1", "Biryani", 32000, Country.INDIA, "Aromatic rice dish"),
    MenuItem("m4", "r2", "Naan", 5000, Country.INDIA, "Indian bread"),
    MenuItem("m5", "r2", "Dal Makhani", 25000, Country.INDIA, "Black lentil curry"),
    MenuItem("m6", "r3", "Pancakes", 1200, Country.AMERICA, "Fluffy breakfast pancakes"),
    MenuItem("m7", "r3", "Club Sandwich", 1500, Country.AMERICA, "Triple-decker sandwich"),
    MenuItem("m8", "r3", "Caesar Salad", 1000, Country.AMERICA, "Fresh romaine lettuce"),
    MenuItem("m9", "r4", "Cheeseburger", 1800, Country.AMERICA, "Classic beef burger"),
    MenuItem("m10", "r4", "French Fries", 600, Country.AMERICA, "Crispy fries"),
)


class InMemoryCatalog(CatalogLookup):
    """Catalog backed by plain dictionaries.

    Defaults to the demo restaurants and menu items. A country filter hides
    entries from other countries exactly as if they did not exist.
    """

    def __init__(
        self,
        restaurants: Optional[Iterable[Restaurant]] = None,
        menu_items: Optional[Iterable[MenuItem]] = None,
    ):
        self._restaurants: Dict[str, Restaurant] = {
            r.id: r for r in (DEMO_RESTAURANTS if restaurants is None else restaurants)
        }
        self._menu_items: Dict[str, MenuItem] = {
            m.id: m for m in (DEMO_MENU_ITEMS if menu_items is None else menu_items)
        }

    def find_restaurant(self, restaurant_id: str, country: Optional[Country] = None) -> Optional[Restaurant]:
        restaurant = self._restaurants.get(restaurant_id)
        if restaurant is None or (country and restaurant.country != country):
            return None
        return restaurant

    def find_menu_item(self, menu_item_id: str, country: Optional[Country] = None) -> Optional[MenuItem]:
        item = self._menu_items.get(menu_item_id)
        if item is None or (country and item.country != country):
            return None
        return item

    def find_restaurants(self, country: Optional[Country] = None) -> List[Restaurant]:
        return [r for r in self._restaurants.values() if not country or r.country == country]

    def find_menu_items(self, restaurant_id: str, country: Optional[Country] = None) -> List[MenuItem]:
        return [
            m
            for m in self._menu_items.values()
            if m.restaurant_id == restaurant_id and (not country or m.country == country)
        ]


class InMemoryOrderRepository(OrderRepository):
    """Process-local order store.

    Ids are ``o1``, ``o2``, ... from a counter that never goes back, so ids
    are never reused. A single lock serializes id assignment and every
    compare-and-set, which gives per-order read-modify-write atomicity.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counter = itertools.count(1)
        self._orders: Dict[str, Order] = {}

    def insert(self, order: Order) -> Order:
        with self._lock:
            stored = replace(order, id=f"o{next(self._counter)}", items=tuple(order.items))
            self._orders[stored.id] = stored
            return replace(stored)

    def find_by_id(self, order_id: str) -> Optional[Order]:
        with self._lock:
            order = self._orders.get(order_id)
            return replace(order) if order else None

    def find_all(self) -> List[Order]:
        with self._lock:
            return [replace(o) for o in self._orders.values()]

    def find_all_matching(self, predicate: Callable[[Order], bool]) -> List[Order]:
        return [o for o in self.find_all() if predicate(o)]

    def compare_and_set_status(
        self,
        order_id: str,
        expected: OrderStatus,
        new: OrderStatus,
        payment_method_id: Optional[str] = None,
    ) -> Optional[Order]:
        with self._lock:
            current = self._orders.get(order_id)
            if current is None or current.status != expected:
                return None
            changes = {"status": new}
            if new == OrderStatus.PLACED:
                changes["payment_method_id"] = payment_method_id
            updated = replace(current, **changes)
            self._orders[order_id] = updated
            return replace(updated)
