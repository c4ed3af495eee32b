"""Operation -> allowed roles table for the HTTP layer.

Views declare which operation each HTTP method performs; ``HasOperationRole``
looks the operation up in ``OPERATION_ROLES`` and asks the authorization
policy whether the caller's role is in the set. The domain service still
enforces its own role gates, so this table only short-circuits requests
that could never succeed.
"""

from rest_framework.permissions import BasePermission

from .authorization import ORDER_MANAGERS, has_role
from .domain import Role

ALL_ROLES = frozenset(Role)

OPERATION_ROLES = {
    "orders.list": ALL_ROLES,
    "orders.create": ALL_ROLES,
    "orders.retrieve": ALL_ROLES,
    "orders.place": ORDER_MANAGERS,
    "orders.cancel": ORDER_MANAGERS,
    "catalog.restaurants": ALL_ROLES,
    "catalog.restaurant": ALL_ROLES,
    "catalog.menu": ALL_ROLES,
    "catalog.menu_item": ALL_ROLES,
}


class HasOperationRole(BasePermission):
    """Allow the request when the caller's role may run the view's operation.

    The view maps HTTP methods to operation names through an ``operations``
    dict, e.g. ``{"GET": "orders.list", "POST": "orders.create"}``.
    Requests without a resolved identity are rejected.
    """

    message = "FORBIDDEN"

    def has_permission(self, request, view) -> bool:
        identity = getattr(request, "identity", None)
        if identity is None:
            return False
        operation = getattr(view, "operations", {}).get(request.method)
        if operation is None:
            return False
        return has_role(identity.role, OPERATION_ROLES.get(operation, frozenset()))
