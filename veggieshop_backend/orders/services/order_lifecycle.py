"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed status transitions
for Order entities.

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Single source of truth
"""

from common.exceptions import BadRequestError, OrderStatusTransitionError
from orders.models import Order

# ============================================================
# STATE DEFINITIONS
# ============================================================

ALL_STATUSES = {value for value, _label in Order.STATUS_CHOICES}

TERMINAL_STATES = {
    Order.STATUS_DELIVERED,
    Order.STATUS_CANCELLED,
}

ALLOWED_TRANSITIONS = {
    Order.STATUS_PENDING: {
        Order.STATUS_PAID,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_PAID: {
        Order.STATUS_SHIPPED,
        Order.STATUS_CANCELLED,
    },
    Order.STATUS_SHIPPED: {
        Order.STATUS_DELIVERED,
    },
}


# ============================================================
# DOMAIN RULES
# ============================================================


def parse_status(raw) -> str:
    status = (raw or "").strip().upper()
    if status not in ALL_STATUSES:
        raise BadRequestError(
            f"Invalid order status '{raw}'.",
            field_errors={"status": f"Must be one of: {', '.join(sorted(ALL_STATUSES))}"},
        )
    return status


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order: Order, target_status: str):
    if not can_transition(
        from_status=order.status,
        to_status=target_status,
    ):
        raise OrderStatusTransitionError(
            f"Order {order.id} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )
