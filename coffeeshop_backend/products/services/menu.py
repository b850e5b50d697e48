# products/services/menu.py

"""
Menu browsing filter shared by the storefront and the POS.

Works on wire-shaped product dicts; no database access.
"""

from __future__ import annotations

from typing import Iterable

ALL_CATEGORIES = "all"


def filter_products(
    products: Iterable[dict], *, category: str = ALL_CATEGORIES, query: str = ""
) -> list[dict]:
    """
    - category "all" matches everything, otherwise exact category-name match
    - query is a case-insensitive substring of the product name
    """
    needle = (query or "").strip().lower()
    out = []
    for p in products:
        if category != ALL_CATEGORIES and p.get("category") != category:
            continue
        if needle and needle not in str(p.get("name", "")).lower():
            continue
        out.append(p)
    return out
