"""
ORDER LIFECYCLE DOMAIN RULES

This module defines the ONLY allowed lifecycle transitions
for Order entities.

Two independent axes:
- Fulfillment: PENDING -> PREPARING -> DELIVERING -> COMPLETED
  (forward only, skipping ahead allowed), CANCELLED from any non-terminal
  state. Re-applying the current status is an idempotent no-op.
- Payment: PENDING <-> PAID, manual override in either direction.

DESIGN PRINCIPLES:
- No database writes
- No side effects
- Single source of truth
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sales.choices import OrderStatus, PaymentMethod, PaymentStatus

# ============================================================
# DOMAIN ERRORS
# ============================================================


class OrderLifecycleError(Exception):
    pass


class InvalidStatusTransitionError(OrderLifecycleError):
    pass


class InvalidPaymentAmendmentError(OrderLifecycleError):
    pass


class UnknownStatusError(OrderLifecycleError):
    """A status value outside the known choices (a validation failure)."""


# ============================================================
# STATE DEFINITIONS
# ============================================================

FULFILLMENT_SEQUENCE = (
    OrderStatus.PENDING,
    OrderStatus.PREPARING,
    OrderStatus.DELIVERING,
    OrderStatus.COMPLETED,
)

TERMINAL_STATES = {
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED,
}

ALLOWED_TRANSITIONS = {
    status: set(FULFILLMENT_SEQUENCE[idx + 1:]) | {OrderStatus.CANCELLED}
    for idx, status in enumerate(FULFILLMENT_SEQUENCE)
    if status not in TERMINAL_STATES
}


# ============================================================
# DOMAIN RULES
# ============================================================


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status == to_status:
        return True

    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, order, target_status: str):
    if target_status not in OrderStatus.values:
        raise UnknownStatusError(f"Unknown order status '{target_status}'")

    if not can_transition(from_status=order.status, to_status=target_status):
        raise InvalidStatusTransitionError(
            f"Order {order.id} cannot transition from "
            f"'{order.status}' to '{target_status}'"
        )


def validate_payment_status(status: str):
    if status not in PaymentStatus.values:
        raise UnknownStatusError(f"Unknown payment status '{status}'")


def validate_payment_amendment(*, order):
    """
    Switching to transfer with a new slip is allowed while payment is still
    pending (cash-pending, or transfer-pending replacing its slip) and the
    order has not been cancelled.
    """
    if order.payment_status == PaymentStatus.PAID:
        raise InvalidPaymentAmendmentError(f"Order {order.id} is already paid")
    if order.status == OrderStatus.CANCELLED:
        raise InvalidPaymentAmendmentError(f"Order {order.id} is cancelled")


def initial_payment_status(*, payment_method: str, point_of_sale: bool = False) -> str:
    """
    Cash at the counter is a trusted in-person transaction -> PAID.
    Everything else starts PENDING until staff confirm it.
    """
    if point_of_sale and payment_method == PaymentMethod.CASH:
        return PaymentStatus.PAID
    return PaymentStatus.PENDING


def new_order_id(now: datetime | None = None) -> str:
    now = now or datetime.now()
    return f"ORD-{now:%Y%m%d}-{uuid.uuid4().hex[:12].upper()}"
