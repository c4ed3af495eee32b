# Makes the Django project under web/ importable before collection
import sys
from pathlib import Path

import pytest
from django.core.cache import cache

BASE_DIR = Path(__file__).resolve().parent  # .../web
p = str(BASE_DIR)
if p not in sys.path:
    sys.path.insert(0, p)

from apps.orders.domain import Country, Identity, Role  # noqa: E402


@pytest.fixture(autouse=True)
def use_stubs_for_tests(settings):
    settings.USE_HTTP_ADAPTERS = False
    settings.ORDER_REPOSITORY = "django"


@pytest.fixture(autouse=True)
def reset_throttles():
    cache.clear()


@pytest.fixture(autouse=True)
def fresh_memory_orders(monkeypatch):
    from apps.orders import providers
    from apps.orders.adapters import InMemoryOrderRepository

    monkeypatch.setattr(providers, "_memory_orders", InMemoryOrderRepository())


@pytest.fixture
def as_user():
    """Return a builder of Django test client kwargs carrying the gateway identity headers."""

    def build(identity: Identity) -> dict:
        return {
            "HTTP_X_USER_ID": identity.id,
            "HTTP_X_USER_ROLE": identity.role.value,
            "HTTP_X_USER_COUNTRY": identity.country.value,
        }

    return build


@pytest.fixture
def admin():
    return Identity(id="1", role=Role.ADMIN, country=Country.INDIA)


@pytest.fixture
def manager_india():
    return Identity(id="2", role=Role.MANAGER, country=Country.INDIA)


@pytest.fixture
def manager_america():
    return Identity(id="3", role=Role.MANAGER, country=Country.AMERICA)


@pytest.fixture
def member_india():
    return Identity(id="4", role=Role.MEMBER, country=Country.INDIA)


@pytest.fixture
def member_india_2():
    return Identity(id="6", role=Role.MEMBER, country=Country.INDIA)


@pytest.fixture
def member_america():
    return Identity(id="5", role=Role.MEMBER, country=Country.AMERICA)
