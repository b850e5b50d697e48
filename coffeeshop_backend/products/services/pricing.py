# products/services/pricing.py

"""
PRICING RESOLVER

Maps (product, serving type, customer class) -> unit price.

DESIGN PRINCIPLES:
- Pure functions: no database access, no rounding
- Works on a Product model (price_map) or a wire dict ("prices")
- An unpriced variant is rejected, never priced as 0
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from products.choices import CustomerClass, ServingType

PRICE_TIERS = (CustomerClass.GENERAL, CustomerClass.TEACHER, CustomerClass.STUDENT)


class PricingError(Exception):
    """Base exception for pricing failures."""


class VariantNotPricedError(PricingError):
    """The product has no price structure for the requested serving type."""


class UnknownCustomerClassError(PricingError):
    pass


def _price_map(product: Any) -> Mapping:
    prices = getattr(product, "price_map", None)
    if prices is None and isinstance(product, Mapping):
        prices = product.get("prices")
    return prices if isinstance(prices, Mapping) else {}


def _amount(value: Any) -> Decimal:
    if isinstance(value, bool):
        raise InvalidOperation("boolean is not an amount")
    return Decimal(str(value))


def priced_variants(product: Any) -> list[str]:
    """Serving types that carry a price structure, in menu order."""
    prices = _price_map(product)
    return [s.value for s in ServingType if isinstance(prices.get(s.value), Mapping)]


def resolve_price(product: Any, serving_type: str, customer_class: str) -> Decimal:
    """
    Unit price for one serving of `product` sold to `customer_class`.

    Raises:
        VariantNotPricedError if `serving_type` has no price structure.
        UnknownCustomerClassError if `customer_class` is not a pricing tier.
    """
    if customer_class not in CustomerClass.values:
        raise UnknownCustomerClassError(f"Unknown customer class: {customer_class!r}")

    structure = _price_map(product).get(str(serving_type))
    if not isinstance(structure, Mapping):
        raise VariantNotPricedError(
            f"Serving type {serving_type!r} is not priced for this product"
        )

    try:
        return _amount(structure.get(str(customer_class)))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise VariantNotPricedError(
            f"Serving type {serving_type!r} has no {customer_class!r} price"
        ) from exc


def get_starting_price(product: Any) -> Decimal:
    """
    Cheapest student price across priced variants ("starting at ฿X").
    Display only; 0 when nothing is priced.
    """
    candidates = []
    for serving in priced_variants(product):
        try:
            candidates.append(resolve_price(product, serving, CustomerClass.STUDENT))
        except PricingError:
            continue
    return min(candidates) if candidates else Decimal("0")
