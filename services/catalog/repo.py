"""SQLAlchemy repository for the restaurant catalog.

This module provides read access to restaurants and their menu items using
SQLAlchemy and PostgreSQL. Every lookup takes an optional country filter:
an entry from another country is reported exactly like a missing one, so
callers cannot tell "absent" from "not accessible".

The schema consists of a 'restaurants' table and a 'menu_items' table
referencing it. Connection parameters come from ``CATALOG_DATABASE_URL`` or,
when unset, from the ``DB_*`` env vars.
"""

import os
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, create_engine, select
from sqlalchemy.orm import DeclarativeBase, Session, mapped_column

DB_HOST = os.getenv("DB_HOST", "catalog-db")
DB_PORT = os.getenv("DB_PORT", "5432")
DB_NAME = os.getenv("DB_NAME", "catalog")
DB_USER = os.getenv("DB_USER", "catalog_user")
DB_PASSWORD = os.getenv("DB_PASSWORD", "catalog-pass")

DATABASE_URL = os.getenv(
    "CATALOG_DATABASE_URL",
    f"postgresql+psycopg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}",
)
engine = create_engine(DATABASE_URL, pool_pre_ping=True)


class Base(DeclarativeBase):
    pass


class Restaurant(Base):
    """A restaurant operating in exactly one country.

    Attributes:
        id: Public identifier (e.g. ``r1``).
        position: Listing order.
        name: Display name.
        country: ``India`` or ``America``.
        description: Free text, may be empty.
    """
    __tablename__ = "restaurants"
    id = mapped_column(String(32), primary_key=True)
    position = mapped_column(Integer, nullable=False, default=0)
    name = mapped_column(String(200), nullable=False)
    country = mapped_column(String(16), nullable=False, index=True)
    description = mapped_column(String(500), nullable=False, default="")


class MenuItem(Base):
    """A priced dish; its country always equals its restaurant's country."""
    __tablename__ = "menu_items"
    id = mapped_column(String(32), primary_key=True)
    position = mapped_column(Integer, nullable=False, default=0)
    restaurant_id = mapped_column(String(32), ForeignKey("restaurants.id"), nullable=False, index=True)
    name = mapped_column(String(200), nullable=False)
    price_cents = mapped_column(Integer, nullable=False)
    country = mapped_column(String(16), nullable=False, index=True)
    description = mapped_column(String(500), nullable=False, default="")


SEED_RESTAURANTS = [
    ("r1", "Spice Route", "India", "North Indian, Curries"),
    ("r2", "Taj Mahal", "India", "Breads, Lentils"),
    ("r3", "American Diner", "America", "Breakfast, Sandwiches"),
    ("r4", "Burger Palace", "America", "Burgers, Fast Food"),
]

SEED_MENU_ITEMS = [
    ("m1", "r1", "Butter Chicken", 35000, "Creamy tomato curry"),
    ("m2", "r1", "Paneer Tikka", 28000, "Grilled cottage cheese"),
    ("m3", "r1", "Biryani", 32000, "Aromatic rice dish"),
    ("m4", "r2", "Naan", 5000, "Indian bread"),
    ("m5", "r2", "Dal Makhani", 25000, "Black lentil curry"),
    ("m6", "r3", "Pancakes", 1200, "Fluffy breakfast pancakes"),
    ("m7", "r3", "Club Sandwich", 1500, "Triple-decker sandwich"),
    ("m8", "r3", "Caesar Salad", 1000, "Fresh romaine lettuce"),
    ("m9", "r4", "Cheeseburger", 1800, "Classic beef burger"),
    ("m10", "r4", "French Fries", 600, "Crispy fries"),
]


@contextmanager
def get_session():
    """Context manager that yields a SQLAlchemy session.

    The session is automatically closed when exiting the context.
    """
    with Session(engine) as s:
        yield s


def init_db() -> None:
    """Create the tables and load the demo catalog into an empty database."""
    Base.metadata.create_all(engine)
    with get_session() as s:
        if s.scalar(select(Restaurant.id).limit(1)) is not None:
            return
        countries = {}
        for pos, (rid, name, country, description) in enumerate(SEED_RESTAURANTS):
            countries[rid] = country
            s.add(Restaurant(id=rid, position=pos, name=name, country=country, description=description))
        s.flush()
        for pos, (mid, rid, name, price, description) in enumerate(SEED_MENU_ITEMS):
            s.add(MenuItem(
                id=mid,
                position=pos,
                restaurant_id=rid,
                name=name,
                price_cents=price,
                country=countries[rid],
                description=description,
            ))
        s.commit()


def _restaurant_dict(r: Restaurant) -> dict:
    return {"id": r.id, "name": r.name, "country": r.country, "description": r.description}


def _menu_item_dict(m: MenuItem) -> dict:
    return {
        "id": m.id,
        "restaurant_id": m.restaurant_id,
        "name": m.name,
        "price_cents": m.price_cents,
        "country": m.country,
        "description": m.description,
    }


class CatalogRepo:
    """Read-only repository for restaurants and menu items.

    Results are plain dicts so nothing escapes the session.
    """

    def find_restaurant(self, restaurant_id: str, country: Optional[str] = None) -> Optional[dict]:
        with get_session() as s:
            obj = s.get(Restaurant, restaurant_id)
            if obj is None or (country and obj.country != country):
                return None
            return _restaurant_dict(obj)

    def find_restaurants(self, country: Optional[str] = None) -> list[dict]:
        stmt = select(Restaurant).order_by(Restaurant.position, Restaurant.id)
        if country:
            stmt = stmt.where(Restaurant.country == country)
        with get_session() as s:
            return [_restaurant_dict(r) for r in s.scalars(stmt)]

    def find_menu_item(self, menu_item_id: str, country: Optional[str] = None) -> Optional[dict]:
        with get_session() as s:
            obj = s.get(MenuItem, menu_item_id)
            if obj is None or (country and obj.country != country):
                return None
            return _menu_item_dict(obj)

    def find_menu_items(self, restaurant_id: str, country: Optional[str] = None) -> list[dict]:
        stmt = (
            select(MenuItem)
            .where(MenuItem.restaurant_id == restaurant_id)
            .order_by(MenuItem.position, MenuItem.id)
        )
        if country:
            stmt = stmt.where(MenuItem.country == country)
        with get_session() as s:
            return [_menu_item_dict(m) for m in s.scalars(stmt)]
