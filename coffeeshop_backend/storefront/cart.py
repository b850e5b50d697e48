# storefront/cart.py

"""
CART AGGREGATE

Lines are snapshots of a product (minus its price map) plus the chosen
serving type, customer class, sweetness and the resolved unit price.

Invariants:
- quantity >= 1 on every line (decrementing floors at 1, never removes)
- total() is always the sum of appliedPrice x quantity
- switching customer class re-prices every line from its own serving type
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Iterable, Mapping

from backend.encoding import json_number
from products.choices import (
    DEFAULT_SWEETNESS,
    NO_SWEETNESS,
    SWEETNESS_LEVELS,
    CustomerClass,
    ProductType,
)
from products.services.pricing import VariantNotPricedError, resolve_price


@dataclass
class CartLine:
    cart_id: str
    product: dict
    prices: dict
    selected_serving_type: str
    selected_user_type: str
    applied_price: Decimal
    sweetness: str = NO_SWEETNESS
    quantity: int = 1

    @property
    def product_id(self) -> str:
        return str(self.product.get("id", ""))

    @property
    def subtotal(self) -> Decimal:
        return self.applied_price * self.quantity

    def snapshot(self) -> dict:
        return {
            **self.product,
            "cartId": self.cart_id,
            "quantity": self.quantity,
            "sweetness": self.sweetness,
            "appliedPrice": json_number(self.applied_price),
            "selectedUserType": self.selected_user_type,
            "selectedServingType": self.selected_serving_type,
        }


@dataclass
class Cart:
    customer_class: str = CustomerClass.GENERAL
    lines: list[CartLine] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def _new_cart_id(self, product_id: str, serving_type: str) -> str:
        taken = {line.cart_id for line in self.lines}
        stamp = time.time_ns() // 1000
        while True:
            cart_id = f"{product_id}-{serving_type}-{stamp}"
            if cart_id not in taken:
                return cart_id
            stamp += 1

    def add(
        self,
        product: Mapping,
        serving_type: str,
        *,
        sweetness: str | None = None,
        quantity: int = 1,
    ) -> CartLine:
        """
        Raises VariantNotPricedError when the product has no price for
        `serving_type` (the combination must not be offered).
        """
        applied = resolve_price(product, serving_type, self.customer_class)

        if product.get("productType", ProductType.DRINK) == ProductType.DRINK:
            sweetness = sweetness or DEFAULT_SWEETNESS
            if sweetness not in SWEETNESS_LEVELS:
                raise ValueError(f"Unknown sweetness level {sweetness!r}")
        else:
            sweetness = NO_SWEETNESS

        snapshot = {k: v for k, v in product.items() if k != "prices"}
        line = CartLine(
            cart_id=self._new_cart_id(str(product.get("id", "")), serving_type),
            product=snapshot,
            prices=dict(product.get("prices") or {}),
            selected_serving_type=serving_type,
            selected_user_type=self.customer_class,
            applied_price=applied,
            sweetness=sweetness,
            quantity=max(1, int(quantity)),
        )
        self.lines.append(line)
        return line

    def remove(self, cart_id: str) -> None:
        self.lines = [line for line in self.lines if line.cart_id != cart_id]

    def set_quantity(self, cart_id: str, delta: int) -> None:
        for line in self.lines:
            if line.cart_id == cart_id:
                line.quantity = max(1, line.quantity + int(delta))

    def clear(self) -> None:
        self.lines = []

    def total(self) -> Decimal:
        return sum((line.subtotal for line in self.lines), Decimal("0"))

    def reprice(self, customer_class: str, products: Iterable[Mapping] | None = None) -> None:
        """
        Switch the active customer class and re-price every line.

        `products` (fresh catalog rows) wins over the price map captured at
        add time. A line whose serving type is no longer priced keeps its
        current price.
        """
        if customer_class not in CustomerClass.values:
            raise ValueError(f"Unknown customer class {customer_class!r}")
        self.customer_class = customer_class

        fresh = {str(p.get("id")): p for p in (products or [])}
        for line in self.lines:
            source = fresh.get(line.product_id) or {"prices": line.prices}
            try:
                line.applied_price = resolve_price(
                    source, line.selected_serving_type, customer_class
                )
            except VariantNotPricedError:
                continue
            line.selected_user_type = customer_class
            if line.product_id in fresh:
                line.prices = dict(source.get("prices") or {})

    def representative_customer_class(self) -> str:
        """Customer class of the first line (what an order is recorded under)."""
        if self.lines:
            return self.lines[0].selected_user_type
        return CustomerClass.GENERAL

    def snapshot(self) -> list[dict]:
        return [line.snapshot() for line in self.lines]


def change_due(cash_received, total) -> Decimal:
    """POS change: max(0, received - total); unreadable input counts as 0."""
    try:
        received = Decimal(str(cash_received or 0))
    except (InvalidOperation, ValueError):
        received = Decimal("0")
    if not received.is_finite():
        received = Decimal("0")
    return max(Decimal("0"), received - Decimal(str(total)))
