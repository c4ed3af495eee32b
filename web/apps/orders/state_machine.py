"""Order status transitions.

``CREATED`` is the only state with outgoing transitions. ``PLACED`` and
``CANCELLED`` are terminal: once there, no role can change the status.
"""

from typing import Dict, FrozenSet

from .domain import OrderStatus
from .errors import InvalidStateTransition


VALID_TRANSITIONS: Dict[OrderStatus, FrozenSet[OrderStatus]] = {
    OrderStatus.CREATED: frozenset({OrderStatus.PLACED, OrderStatus.CANCELLED}),
    OrderStatus.PLACED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    """Return True if ``current -> new`` is in the transition table.

    An unknown ``current`` status has no allowed transitions.
    """
    return new in VALID_TRANSITIONS.get(current, frozenset())


def enforce_transition(current: OrderStatus, new: OrderStatus) -> None:
    """Raise InvalidStateTransition if ``current -> new`` is not allowed."""
    if not can_transition(current, new):
        raise InvalidStateTransition(
            f"Invalid state transition: Cannot change order from '{_label(current)}' to '{_label(new)}'"
        )


def validate_can_place(current: OrderStatus) -> None:
    """Raise InvalidStateTransition unless the order is still a draft."""
    if current != OrderStatus.CREATED:
        raise InvalidStateTransition(
            f"Cannot place order: Order must be in 'created' status (current: {_label(current)})"
        )


def validate_can_cancel(current: OrderStatus) -> None:
    """Raise InvalidStateTransition unless the order is still a draft."""
    if current != OrderStatus.CREATED:
        raise InvalidStateTransition(
            f"Cannot cancel order: Only orders in 'created' status can be cancelled (current: {_label(current)})"
        )


def is_terminal(status: OrderStatus) -> bool:
    return status in VALID_TRANSITIONS and not VALID_TRANSITIONS[status]


def _label(status) -> str:
    return getattr(status, "value", str(status))
