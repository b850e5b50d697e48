# storefront/checkout.py

"""
CHECKOUT / POS ORDER BUILDERS

Turn a cart into an order payload for createOrder. Prices are frozen here:
the order carries item snapshots, not product references.

Storefront rules:
- pending fulfillment, pending payment (staff confirm)
- a transfer order needs a payment slip; refused before anything is sent

Point-of-sale rules:
- walk-in customer served at the counter, fulfillment already completed
- cash is paid on the spot; transfer stays pending (staff check the
  transfer in person, so no slip is needed)
"""

from __future__ import annotations

import base64
import time
from datetime import datetime

from backend.encoding import json_number
from sales.choices import (
    COUNTER_LOCATION,
    WALK_IN_CUSTOMER_NAME,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
)
from sales.services.order_lifecycle import initial_payment_status, new_order_id
from storefront.cart import Cart
from storefront.exceptions import CheckoutValidationError


def inline_asset(content: bytes, content_type: str = "image/jpeg") -> dict:
    """Tagged inline asset payload for slips and product images."""
    return {
        "kind": "inline",
        "contentType": content_type,
        "data": base64.b64encode(content).decode("ascii"),
    }


def _now_ms(now: datetime | None) -> int:
    if now is not None:
        return int(now.timestamp() * 1000)
    return int(time.time() * 1000)


def _order(cart: Cart, *, now: datetime | None, **fields) -> dict:
    return {
        "id": new_order_id(now),
        "items": cart.snapshot(),
        "totalAmount": json_number(cart.total()),
        "timestamp": _now_ms(now),
        "slipUrl": "",
        **fields,
    }


def build_storefront_order(
    cart: Cart,
    *,
    customer_name: str,
    delivery_location: str,
    payment_method: str,
    slip=None,
    now: datetime | None = None,
) -> dict:
    if cart.is_empty:
        raise CheckoutValidationError("Cart is empty")
    if payment_method not in PaymentMethod.values:
        raise CheckoutValidationError(f"Unknown payment method {payment_method!r}")
    if not (customer_name or "").strip():
        raise CheckoutValidationError("Customer name is required")
    if not (delivery_location or "").strip():
        raise CheckoutValidationError("Delivery location is required")
    if payment_method == PaymentMethod.TRANSFER and not slip:
        raise CheckoutValidationError("A transfer order needs a payment slip")

    return _order(
        cart,
        now=now,
        customerName=customer_name.strip(),
        userType=cart.representative_customer_class(),
        paymentMethod=payment_method,
        paymentStatus=PaymentStatus.PENDING,
        deliveryLocation=delivery_location.strip(),
        status=OrderStatus.PENDING,
    )


def build_pos_order(
    cart: Cart, *, payment_method: str, now: datetime | None = None
) -> dict:
    if cart.is_empty:
        raise CheckoutValidationError("Cart is empty")
    if payment_method not in PaymentMethod.values:
        raise CheckoutValidationError(f"Unknown payment method {payment_method!r}")

    return _order(
        cart,
        now=now,
        customerName=WALK_IN_CUSTOMER_NAME,
        userType=cart.customer_class,
        paymentMethod=payment_method,
        paymentStatus=initial_payment_status(
            payment_method=payment_method, point_of_sale=True
        ),
        deliveryLocation=COUNTER_LOCATION,
        status=OrderStatus.COMPLETED,
    )


def place_storefront_order(service, cart: Cart, *, slip=None, **order_fields) -> dict:
    """
    Validate, submit, and clear the cart once the backend confirms.
    A refused checkout raises before any network call.
    """
    order = build_storefront_order(cart, slip=slip, **order_fields)
    service.create_order(order, slip=slip)
    cart.clear()
    return order


def place_pos_order(service, cart: Cart, *, payment_method: str) -> dict:
    order = build_pos_order(cart, payment_method=payment_method)
    service.create_order(order)
    cart.clear()
    return order
