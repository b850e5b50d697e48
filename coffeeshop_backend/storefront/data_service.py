# storefront/data_service.py

"""
STOREFRONT DATA SERVICE

Reads: live fetch, mirrored locally; on any failure the mirror is returned.
Writes: applied to the mirror first (optimistic), then sent to the backend.

Consistency:
- last writer wins, no versioning; the mirror may be stale until the next
  successful read
- a retryable refusal (server busy) is retried with exponential backoff,
  a bounded number of times
- a write the backend does not confirm is logged at error level and raised
  as SyncFailedError; the optimistic value stays in the mirror
- one submission per (action, target) at a time: a second one while the
  first is in flight raises DuplicateSubmissionError and changes nothing
"""

from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Any

from backend.encoding import safe_json_parse
from sales.choices import PaymentMethod, PaymentStatus
from storefront.exceptions import (
    BackendError,
    DuplicateSubmissionError,
    StorefrontError,
    SyncFailedError,
)
from storefront.mirror import CATEGORIES_KEY, ORDERS_KEY, PRODUCTS_KEY, LocalMirror
from storefront.transport import GatewayClient

logger = logging.getLogger(__name__)


def _normalize_product(p: dict) -> dict:
    p = dict(p)
    p["prices"] = safe_json_parse(p.get("prices"), {})
    p["additionalImages"] = safe_json_parse(p.get("additionalImages"), [])
    return p


def _normalize_order(o: dict) -> dict:
    o = dict(o)
    o["paymentStatus"] = o.get("paymentStatus") or PaymentStatus.PENDING
    o["items"] = safe_json_parse(o.get("items"), [])
    try:
        o["timestamp"] = int(o.get("timestamp") or 0)
    except (TypeError, ValueError):
        o["timestamp"] = 0
    return o


def _upsert(rows: list[dict], row: dict) -> list[dict]:
    for idx, existing in enumerate(rows):
        if str(existing.get("id")) == str(row.get("id")):
            rows[idx] = row
            return rows
    rows.append(row)
    return rows


def _without(rows: list[dict], row_id) -> list[dict]:
    return [r for r in rows if str(r.get("id")) != str(row_id)]


class DataService:
    def __init__(
        self,
        client: GatewayClient,
        mirror: LocalMirror,
        *,
        retries: int = 3,
        backoff: float = 0.5,
        sleep=time.sleep,
    ):
        self.client = client
        self.mirror = mirror
        self.retries = retries
        self.backoff = backoff
        self._sleep = sleep
        self._guard = threading.Lock()
        self._in_flight: set[str] = set()

    # -------------------------
    # READS
    # -------------------------
    def _fetch(self, action: str, key: str, normalize=None) -> list[dict]:
        try:
            result = self.client.get(action)
        except StorefrontError as exc:
            logger.warning(
                "Live fetch failed, using local mirror",
                extra={"action": action, "error": str(exc)},
            )
            return self.mirror.get(key)

        if not isinstance(result, list):
            logger.warning(
                "Live fetch returned no listing, using local mirror",
                extra={"action": action},
            )
            return self.mirror.get(key)

        rows = [normalize(r) if normalize else r for r in result if isinstance(r, dict)]
        self.mirror.put(key, rows)
        return rows

    def get_products(self) -> list[dict]:
        return self._fetch("getProducts", PRODUCTS_KEY, _normalize_product)

    def get_categories(self) -> list[dict]:
        return self._fetch("getCategories", CATEGORIES_KEY)

    def get_orders(self) -> list[dict]:
        rows = self._fetch("getOrders", ORDERS_KEY, _normalize_order)
        return sorted(rows, key=lambda o: o.get("timestamp") or 0, reverse=True)

    def get_sales_summary(self, period: str = "day") -> dict:
        return self.client.get("getSalesSummary", period=period)

    # -------------------------
    # WRITE PLUMBING
    # -------------------------
    @contextmanager
    def _submission(self, key: str):
        with self._guard:
            if key in self._in_flight:
                raise DuplicateSubmissionError(f"{key} is already being submitted")
            self._in_flight.add(key)
        try:
            yield
        finally:
            with self._guard:
                self._in_flight.discard(key)

    def _post(self, payload: dict) -> Any:
        delay = self.backoff
        for attempt in range(1, self.retries + 1):
            try:
                return self.client.post(payload)
            except BackendError as exc:
                if not exc.retryable:
                    raise
                logger.warning(
                    "Backend busy, retrying",
                    extra={"action": payload.get("action"), "attempt": attempt, "delay": delay},
                )
            self._sleep(delay)
            delay *= 2
        return self.client.post(payload)

    def _sync(self, payload: dict) -> Any:
        action = payload.get("action")
        try:
            return self._post(payload)
        except StorefrontError as exc:
            logger.error(
                "Backend did not confirm local change",
                extra={"action": action, "target": payload.get("id"), "error": str(exc)},
            )
            raise SyncFailedError(f"{action} failed: {exc}") from exc

    def _patch_order(self, order_id, **fields) -> None:
        rows = self.mirror.get(ORDERS_KEY)
        for row in rows:
            if str(row.get("id")) == str(order_id):
                row.update(fields)
        self.mirror.put(ORDERS_KEY, rows)

    # -------------------------
    # CATALOG WRITES
    # -------------------------
    def save_product(self, product: dict) -> Any:
        with self._submission(f"saveProduct:{product.get('id')}"):
            self.mirror.put(PRODUCTS_KEY, _upsert(self.mirror.get(PRODUCTS_KEY), dict(product)))
            return self._sync({"action": "saveProduct", "data": product})

    def delete_product(self, product_id: str) -> Any:
        with self._submission(f"deleteProduct:{product_id}"):
            self.mirror.put(PRODUCTS_KEY, _without(self.mirror.get(PRODUCTS_KEY), product_id))
            return self._sync({"action": "deleteProduct", "id": product_id})

    def save_category(self, category: dict) -> Any:
        with self._submission(f"saveCategory:{category.get('id')}"):
            self.mirror.put(
                CATEGORIES_KEY, _upsert(self.mirror.get(CATEGORIES_KEY), dict(category))
            )
            return self._sync({"action": "saveCategory", "data": category})

    def delete_category(self, category_id: str) -> Any:
        with self._submission(f"deleteCategory:{category_id}"):
            self.mirror.put(
                CATEGORIES_KEY, _without(self.mirror.get(CATEGORIES_KEY), category_id)
            )
            return self._sync({"action": "deleteCategory", "id": category_id})

    # -------------------------
    # ORDER WRITES
    # -------------------------
    def create_order(self, order: dict, slip=None) -> Any:
        with self._submission(f"createOrder:{order.get('id')}"):
            rows = self.mirror.get(ORDERS_KEY)
            rows.insert(0, dict(order))
            self.mirror.put(ORDERS_KEY, rows)

            payload = {"action": "createOrder", "data": order}
            if slip:
                payload["slipImage"] = slip
            result = self._sync(payload)

        self._apply_confirmed(order.get("id"), result, "slipUrl", "totalAmount")
        return result

    def update_order_status(self, order_id: str, status: str) -> Any:
        with self._submission(f"updateOrderStatus:{order_id}"):
            self._patch_order(order_id, status=status)
            return self._sync({"action": "updateOrderStatus", "id": order_id, "status": status})

    def update_payment_status(self, order_id: str, status: str) -> Any:
        with self._submission(f"updatePaymentStatus:{order_id}"):
            self._patch_order(order_id, paymentStatus=status)
            return self._sync(
                {"action": "updatePaymentStatus", "id": order_id, "status": status}
            )

    def update_order_payment(self, order_id: str, slip) -> Any:
        with self._submission(f"updateOrderPayment:{order_id}"):
            self._patch_order(
                order_id,
                paymentMethod=PaymentMethod.TRANSFER.value,
                paymentStatus=PaymentStatus.PENDING.value,
            )
            result = self._sync(
                {"action": "updateOrderPayment", "id": order_id, "slipImage": slip}
            )

        self._apply_confirmed(order_id, result, "slipUrl")
        return result

    def _apply_confirmed(self, order_id, result, *fields) -> None:
        if not isinstance(result, dict):
            return
        confirmed = {f: result[f] for f in fields if f in result}
        if confirmed:
            self._patch_order(order_id, **confirmed)
