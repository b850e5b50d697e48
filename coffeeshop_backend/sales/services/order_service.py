# sales/services/order_service.py

"""
ORDER SERVICE (APPLICATION SERVICE)

Purpose:
- Create orders from checkout / POS payloads
- Apply fulfillment status, payment status and payment-method amendments

Hard rules:
- Orders are addressed by their immutable id; an unknown id mutates nothing
- totalAmount is recomputed from the item snapshots (server authoritative)
- The payment amendment writes method + status + slip in ONE row update

Locking, cache invalidation and notifications belong to the caller.
"""

from __future__ import annotations

import logging
import time

from django.db import transaction

from backend.encoding import dump_json
from sales.choices import PaymentMethod, PaymentStatus
from sales.models import Order
from sales.serializers import OrderCreateSerializer, OrderSerializer
from sales.services.order_lifecycle import (
    validate_payment_amendment,
    validate_payment_status,
    validate_transition,
)
from sales.services.totals import order_total

logger = logging.getLogger(__name__)


class OrderServiceError(Exception):
    """Base order service exception"""


class OrderNotFoundError(OrderServiceError):
    pass


class DuplicateOrderError(OrderServiceError):
    pass


def _now_ms() -> int:
    return int(time.time() * 1000)


def _locked_order(order_id) -> Order:
    order = Order.objects.select_for_update().filter(pk=str(order_id)).first()
    if order is None:
        raise OrderNotFoundError(f"Order {order_id} not found")
    return order


def list_orders() -> list[dict]:
    return list(OrderSerializer(Order.objects.all(), many=True).data)


def get_order(order_id) -> Order:
    order = Order.objects.filter(pk=str(order_id)).first()
    if order is None:
        raise OrderNotFoundError(f"Order {order_id} not found")
    return order


def check_new_order(data: dict) -> dict:
    """Validate a create payload and refuse a taken id, without writing."""
    s = OrderCreateSerializer(data=data)
    s.is_valid(raise_exception=True)
    v = s.validated_data

    if Order.objects.filter(pk=v["id"]).exists():
        raise DuplicateOrderError(f"Order {v['id']} already exists")
    return v


@transaction.atomic
def create_order(data: dict, *, slip_url: str = "") -> Order:
    v = check_new_order(data)

    items = v["items"]
    total = order_total(items)

    client_total = v.get("totalAmount")
    if client_total is not None and client_total != total:
        logger.warning(
            "Client total disagrees with item snapshots; using computed total",
            extra={"order_id": v["id"], "client_total": str(client_total), "total": str(total)},
        )

    return Order.objects.create(
        id=v["id"],
        customer_name=v["customerName"].strip(),
        user_type=v["userType"],
        items=dump_json(items),
        total_amount=total,
        payment_method=v["paymentMethod"],
        payment_status=v["paymentStatus"],
        delivery_location=v["deliveryLocation"].strip(),
        status=v["status"],
        slip_url=slip_url or "",
        timestamp=v.get("timestamp") or _now_ms(),
    )


@transaction.atomic
def update_order_status(order_id, status: str) -> tuple[Order, bool]:
    """
    Returns (order, changed). Re-applying the current status is a no-op.
    """
    order = _locked_order(order_id)
    validate_transition(order=order, target_status=status)

    if order.status == status:
        return order, False

    order.status = status
    order.save(update_fields=["status"])
    return order, True


@transaction.atomic
def update_payment_status(order_id, status: str) -> tuple[Order, bool]:
    validate_payment_status(status)
    order = _locked_order(order_id)

    if order.payment_status == status:
        return order, False

    order.payment_status = status
    order.save(update_fields=["payment_status"])
    return order, True


@transaction.atomic
def update_order_payment(order_id, slip_url: str) -> Order:
    """
    Cash-pending -> transfer-pending with a proof-of-payment slip.
    """
    order = _locked_order(order_id)
    validate_payment_amendment(order=order)

    order.payment_method = PaymentMethod.TRANSFER
    order.payment_status = PaymentStatus.PENDING
    order.slip_url = slip_url
    order.save(update_fields=["payment_method", "payment_status", "slip_url"])
    return order
