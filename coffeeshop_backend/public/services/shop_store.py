# public/services/shop_store.py

"""
SHOP STORE (gateway application service)

Built once when the public app loads and owned by its AppConfig:
- one MutationLock: every write runs inside lock -> DB transaction
- a failed write deletes any asset it uploaded; order payloads are checked
  before their slip is uploaded
- listing cache: product/category writes drop their cached listing
- asset store: inline images are uploaded, only URLs reach a row
- chat notifier: fired after commit for new orders and slip uploads

Reads take no lock.
"""

from __future__ import annotations

from contextlib import contextmanager

from django.apps import apps
from django.conf import settings
from django.db import transaction

from backend.encoding import safe_json_parse
from products.serializers import CategorySerializer, ProductSerializer
from products.services import catalog
from public.services.assets import AssetStore
from public.services.exceptions import PayloadValidationError
from public.services.listing_cache import Listing, cached_listing, invalidate_listing
from public.services.mutation_lock import MutationLock
from public.services.notifications import (
    ChatNotifier,
    new_order_message,
    payment_updated_message,
)
from sales.serializers import OrderSerializer
from sales.services import order_service
from sales.services.order_lifecycle import validate_payment_amendment
from sales.services.summary import summarize_orders


def get_shop_store() -> "ShopStore":
    return apps.get_app_config("public").store


class ShopStore:
    def __init__(
        self,
        *,
        lock: MutationLock,
        assets: AssetStore,
        notifier: ChatNotifier,
    ):
        self.lock = lock
        self.assets = assets
        self.notifier = notifier

    @classmethod
    def from_settings(cls) -> "ShopStore":
        gw = getattr(settings, "GATEWAY", {}) or {}
        return cls(
            lock=MutationLock(timeout=gw.get("LOCK_TIMEOUT_SECONDS", 15)),
            assets=AssetStore.from_settings(),
            notifier=ChatNotifier.from_settings(),
        )

    @contextmanager
    def mutation(self, *invalidates: Listing):
        with self.lock.hold(), self.assets.discard_on_error():
            with transaction.atomic():
                yield
            for listing in invalidates:
                invalidate_listing(listing)

    # -------------------------
    # READS
    # -------------------------
    def products(self) -> list[dict]:
        return cached_listing(Listing.PRODUCTS, catalog.list_products)

    def categories(self) -> list[dict]:
        return cached_listing(Listing.CATEGORIES, catalog.list_categories)

    def orders(self) -> list[dict]:
        return order_service.list_orders()

    def sales_summary(self, period: str = "day") -> dict:
        return summarize_orders(period=period)

    # -------------------------
    # CATALOG WRITES
    # -------------------------
    def save_product(self, data: dict) -> dict:
        with self.mutation(Listing.PRODUCTS):
            product = catalog.save_product(self._with_uploaded_images(data))
        return ProductSerializer(product).data

    def delete_product(self, product_id) -> None:
        with self.mutation(Listing.PRODUCTS):
            catalog.delete_product(product_id)

    def save_category(self, data: dict) -> dict:
        with self.mutation(Listing.CATEGORIES):
            category = catalog.save_category(data)
        return CategorySerializer(category).data

    def delete_category(self, category_id) -> None:
        with self.mutation(Listing.CATEGORIES):
            catalog.delete_category(category_id)

    def _with_uploaded_images(self, data: dict) -> dict:
        data = dict(data)
        pid = str(data.get("id") or "").strip()

        data["image"] = self.assets.store(data.get("image"), name_prefix=f"PROD_{pid}")

        extra = data.get("additionalImages")
        if extra is not None:
            if isinstance(extra, str):
                extra = safe_json_parse(extra, [])
            if not isinstance(extra, list):
                raise PayloadValidationError("additionalImages must be a list")
            data["additionalImages"] = self.assets.store_many(
                extra, name_prefix=f"PROD_EXT_{pid}"
            )
        return data

    # -------------------------
    # ORDER WRITES
    # -------------------------
    def create_order(self, data: dict, slip=None) -> dict:
        order_id = str(data.get("id") or "").strip()
        with self.mutation():
            order_service.check_new_order(data)
            slip_url = self.assets.store(slip, name_prefix=f"SLIP_{order_id}")
            order = order_service.create_order(data, slip_url=slip_url)

        self.notifier.fire(new_order_message(order))
        return {
            "id": order.id,
            "slipUrl": order.slip_url,
            "totalAmount": order.total_amount,
        }

    def update_order_status(self, order_id, status: str) -> dict:
        with self.mutation():
            order, changed = order_service.update_order_status(order_id, status)
        return {"id": order.id, "orderStatus": order.status, "changed": changed}

    def update_payment_status(self, order_id, status: str) -> dict:
        with self.mutation():
            order, changed = order_service.update_payment_status(order_id, status)
        return {"id": order.id, "paymentStatus": order.payment_status, "changed": changed}

    def update_order_payment(self, order_id, slip) -> dict:
        if slip is None or slip == "":
            raise PayloadValidationError("slipImage is required")

        with self.mutation():
            # an unknown or non-amendable order uploads nothing
            validate_payment_amendment(order=order_service.get_order(order_id))
            slip_url = self.assets.store(slip, name_prefix=f"SLIP_UPDATE_{order_id}")
            order = order_service.update_order_payment(order_id, slip_url)

        self.notifier.fire(payment_updated_message(order))
        data = OrderSerializer(order).data
        return {
            "id": order.id,
            "slipUrl": data["slipUrl"],
            "paymentMethod": data["paymentMethod"],
            "paymentStatus": data["paymentStatus"],
        }
