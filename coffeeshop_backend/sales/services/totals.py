# sales/services/totals.py

"""
Line and order totals over item snapshots (appliedPrice x quantity).
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping


def _decimal(value: Any) -> Decimal:
    if value is None or value == "" or isinstance(value, bool):
        return Decimal("0")
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal("0")


def line_subtotal(item: Mapping) -> Decimal:
    quantity = int(item.get("quantity") or 0)
    return _decimal(item.get("appliedPrice")) * quantity


def order_total(items: Iterable[Mapping]) -> Decimal:
    return sum((line_subtotal(i) for i in items), Decimal("0"))
