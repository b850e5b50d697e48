# public/services/listing_cache.py

"""
LISTING CACHE

Product and category listings are served from the Django cache for a
short window. Any successful write to one of them drops its entry before
the write returns, so the next read is fresh.

Entries are stored under a generation number ("products_json:<gen>").
A write bumps the generation, so a reader that loaded rows before the
write can only park them under the old generation, which nobody reads.
"""

from __future__ import annotations

import enum
import time
from typing import Callable

from django.conf import settings
from django.core.cache import cache


class Listing(str, enum.Enum):
    PRODUCTS = "products_json"
    CATEGORIES = "categories_json"

    @property
    def generation_key(self) -> str:
        return f"{self.value}:generation"


def listing_timeout() -> int:
    gw = getattr(settings, "GATEWAY", {}) or {}
    return int(gw.get("LISTING_CACHE_TIMEOUT_SECONDS", 600))


def _generation(listing: Listing) -> int:
    # seeded from the clock so an evicted counter never revisits an old entry
    cache.add(listing.generation_key, time.time_ns(), None)
    gen = cache.get(listing.generation_key)
    if gen is None:
        gen = time.time_ns()
        cache.set(listing.generation_key, gen, None)
    return gen


def cached_listing(listing: Listing, loader: Callable[[], list]) -> list:
    key = f"{listing.value}:{_generation(listing)}"
    data = cache.get(key)
    if data is None:
        data = loader()
        cache.set(key, data, listing_timeout())
    return data


def invalidate_listing(listing: Listing) -> None:
    cache.add(listing.generation_key, time.time_ns(), None)
    try:
        cache.incr(listing.generation_key)
    except ValueError:
        # counter evicted between add and incr
        cache.set(listing.generation_key, time.time_ns(), None)
