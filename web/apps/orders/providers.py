"""Service provider helpers for wiring OrderService with ports.

This module exposes small factory functions returning the configured
catalog, order repository and ``OrderService``. When
``settings.USE_HTTP_ADAPTERS`` is truthy the catalog is the HTTP client to
the catalog service; otherwise the in-process demo catalog is used, which
suits tests and local development. ``settings.ORDER_REPOSITORY`` selects
the Django ORM store (default) or a process-local in-memory store.
"""

from django.conf import settings

from .adapters import InMemoryCatalog, InMemoryOrderRepository
from .domain import CatalogLookup, OrderRepository
from .http_adapters import HttpCatalogClient
from .repository import DjangoOrderRepository
from .services import OrderService

_memory_orders = InMemoryOrderRepository()
_memory_catalog = InMemoryCatalog()


def get_catalog() -> CatalogLookup:
    """Return the catalog adapter selected by settings."""
    if getattr(settings, "USE_HTTP_ADAPTERS", True):
        return HttpCatalogClient()
    return _memory_catalog


def get_order_repository() -> OrderRepository:
    """Return the order store selected by ``settings.ORDER_REPOSITORY``."""
    if getattr(settings, "ORDER_REPOSITORY", "django") == "memory":
        return _memory_orders
    return DjangoOrderRepository()


def get_order_service() -> OrderService:
    """Return a configured OrderService instance."""
    return OrderService(catalog=get_catalog(), orders=get_order_repository())
