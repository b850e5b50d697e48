# storefront/mirror.py

"""
LOCAL MIRROR

Durable client-side copy of products, categories and orders, stored as one
JSON file keyed by fixed cache ids. It is the fallback of record whenever a
live fetch fails.

- writes are atomic (temp file + rename); a crash never leaves half a file
- an unreadable file is cleared and logged, never raised to the caller
- a key holding anything but a list is dropped on load
"""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path

logger = logging.getLogger(__name__)

PRODUCTS_KEY = "products_cache"
ORDERS_KEY = "orders_cache"
CATEGORIES_KEY = "categories_cache"

MIRROR_KEYS = (PRODUCTS_KEY, ORDERS_KEY, CATEGORIES_KEY)


class LocalMirror:
    def __init__(self, path):
        self.path = Path(path)
        self._lock = threading.Lock()
        self._data = self._load()

    def _load(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.error("Local mirror unreadable, clearing it", extra={"path": str(self.path)})
            self.path.unlink(missing_ok=True)
            return {}

        if not isinstance(raw, dict):
            logger.error("Local mirror has the wrong shape, clearing it", extra={"path": str(self.path)})
            self.path.unlink(missing_ok=True)
            return {}

        data = {}
        for key in MIRROR_KEYS:
            rows = raw.get(key)
            if rows is None:
                continue
            if isinstance(rows, list):
                data[key] = rows
            else:
                logger.error("Dropping corrupt mirror entry", extra={"key": key})
        return data

    def get(self, key: str) -> list:
        with self._lock:
            return copy.deepcopy(self._data.get(key, []))

    def put(self, key: str, rows: list) -> None:
        if key not in MIRROR_KEYS:
            raise KeyError(key)
        with self._lock:
            self._data[key] = copy.deepcopy(list(rows))
            self._flush()

    def clear(self, key: str | None = None) -> None:
        with self._lock:
            if key is None:
                self._data = {}
            else:
                self._data.pop(key, None)
            self._flush()

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=".mirror-", dir=str(self.path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, ensure_ascii=False, default=str)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
