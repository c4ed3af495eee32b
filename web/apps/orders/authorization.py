"""Role and country access rules.

All access decisions in the project go through these functions so that
every resource type applies the same country/role logic. The module is
stateless: each function only looks at its arguments.
"""

import logging
from typing import Iterable, Optional

from .domain import Country, Role
from .errors import AccessDenied

logger = logging.getLogger(__name__)

ORDER_MANAGERS = frozenset({Role.ADMIN, Role.MANAGER})


def can_access_country(role: Role, caller_country: Country, resource_country: Country) -> bool:
    """Return True if a caller may see a resource from ``resource_country``.

    Admins see every country; managers and members only their own.
    """
    if role == Role.ADMIN:
        return True
    return caller_country == resource_country


def enforce_country_access(
    role: Role,
    caller_country: Country,
    resource_country: Country,
    resource_type: str = "resource",
) -> None:
    """Raise AccessDenied when ``can_access_country`` is False.

    Raises:
        AccessDenied: If the resource lives in another country and the
            caller is not an admin.
    """
    if not can_access_country(role, caller_country, resource_country):
        logger.warning(
            "country access denied",
            extra={"role": _label(role), "caller_country": _label(caller_country), "resource": resource_type},
        )
        raise AccessDenied(f"Access denied: {resource_type} is not accessible from your country")


def has_role(role: Role, allowed_roles: Iterable[Role]) -> bool:
    return role in set(allowed_roles)


def enforce_role_access(role: Role, allowed_roles: Iterable[Role], action: str = "perform this action") -> None:
    """Raise AccessDenied unless ``role`` is one of ``allowed_roles``.

    Args:
        role: Caller's role.
        allowed_roles: Roles permitted to perform ``action``.
        action: Short description used in the error message, e.g.
            "place orders".

    Raises:
        AccessDenied: If the role is not allowed.
    """
    allowed = [r for r in Role if r in set(allowed_roles)]
    if not has_role(role, allowed):
        logger.warning("role access denied", extra={"role": _label(role), "action": action})
        names = ", ".join(r.value for r in allowed)
        raise AccessDenied(f"Access denied: Only {names} can {action}")


def can_manage_order(role: Role) -> bool:
    """Only admins and managers may finalize (place or cancel) orders."""
    return has_role(role, ORDER_MANAGERS)


def catalog_country_filter(role: Role, country: Country) -> Optional[Country]:
    """Country to filter catalog lookups by: None (unfiltered) for admins."""
    if role == Role.ADMIN:
        return None
    return country


def _label(value) -> str:
    return getattr(value, "value", str(value))
