# public/tests/test_gateway.py

import base64
import json
import os
import shutil
import tempfile
import threading
from unittest import mock

from django.core.cache import cache
from django.core.files.storage import FileSystemStorage
from django.test import TestCase
from rest_framework.test import APIClient

from products.models import Product
from public.services.assets import AssetStore
from public.services.shop_store import get_shop_store
from sales.models import Order

URL = "/api/public/gateway/"

PNG_URI = "data:image/png;base64," + base64.b64encode(b"\x89PNG fake").decode("ascii")

PRODUCT = {
    "id": "p-latte",
    "name": "Latte",
    "category": "กาแฟ",
    "productType": "drink",
    "prices": {"iced": {"general": 45, "teacher": 40, "student": 35}},
}


def _order(order_id="ORD-1", **overrides):
    data = {
        "id": order_id,
        "customerName": "สมชาย",
        "userType": "student",
        "items": [
            {"id": "p-latte", "appliedPrice": 50, "quantity": 2},
            {"id": "p-tea", "appliedPrice": 30, "quantity": 1},
        ],
        "totalAmount": 130,
        "paymentMethod": "cash",
        "deliveryLocation": "อาคาร 1",
    }
    data.update(overrides)
    return data


class GatewayTestCase(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.store = get_shop_store()

        self.media_root = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.media_root, True)
        original_assets = self.store.assets
        self.store.assets = AssetStore(
            folder="assets",
            public_base_url="https://files.example",
            storage=FileSystemStorage(location=self.media_root),
        )
        self.addCleanup(setattr, self.store, "assets", original_assets)

        patcher = mock.patch.object(self.store.notifier, "fire")
        self.fire = patcher.start()
        self.addCleanup(patcher.stop)

    def stored_files(self):
        return [f for _, _, files in os.walk(self.media_root) for f in files]

    def read(self, action, **params):
        return self.client.get(URL, {"action": action, **params})

    def write(self, payload):
        return self.client.post(
            URL, data=json.dumps(payload), content_type="text/plain;charset=utf-8"
        )


class GatewayReadTests(GatewayTestCase):
    def test_empty_listings(self):
        for action in ("getProducts", "getCategories", "getOrders"):
            res = self.read(action)
            self.assertEqual(res.status_code, 200)
            self.assertEqual(res.json(), [])

    def test_listing_is_cached_until_a_write(self):
        self.assertEqual(self.read("getProducts").json(), [])

        # direct row write bypasses the gateway; cached listing is served
        Product.objects.create(id="p-direct", name="Direct", prices="{}")
        self.assertEqual(self.read("getProducts").json(), [])

        self.write({"action": "saveProduct", "data": PRODUCT})
        ids = sorted(p["id"] for p in self.read("getProducts").json())
        self.assertEqual(ids, ["p-direct", "p-latte"])

    def test_category_write_refreshes_category_listing(self):
        self.assertEqual(self.read("getCategories").json(), [])
        self.write({"action": "saveCategory", "data": {"id": "c1", "name": "ชา"}})

        self.assertEqual(self.read("getCategories").json(), [{"id": "c1", "name": "ชา"}])

    def test_unknown_action_is_named(self):
        res = self.read("getEverything")

        self.assertEqual(res.status_code, 400)
        body = res.json()
        self.assertEqual(body["status"], "error")
        self.assertEqual(body["code"], "unknown_action")
        self.assertIn("getEverything", body["message"])

    def test_write_action_over_get_is_refused(self):
        res = self.read("deleteProduct", id="p-latte")
        self.assertEqual(res.json()["code"], "unknown_action")

    def test_sales_summary(self):
        self.write({"action": "createOrder", "data": _order()})

        res = self.read("getSalesSummary", period="all")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["totalCount"], 1)
        self.assertEqual(res.json()["totalRevenue"], 130)

    def test_bad_summary_period(self):
        res = self.read("getSalesSummary", period="decade")
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["code"], "validation_error")

    def test_unexpected_failure_becomes_internal_error_envelope(self):
        with mock.patch.object(self.store, "products", side_effect=RuntimeError("boom")):
            with self.assertLogs("public.services.gateway", level="ERROR"):
                res = self.read("getProducts")

        self.assertEqual(res.status_code, 500)
        self.assertEqual(res.json()["code"], "internal_error")


class GatewayCatalogWriteTests(GatewayTestCase):
    def test_save_product_returns_success_envelope(self):
        res = self.write({"action": "saveProduct", "data": PRODUCT})

        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["status"], "success")
        self.assertEqual(body["product"]["prices"], PRODUCT["prices"])

    def test_inline_images_are_uploaded_not_stored(self):
        self.write(
            {
                "action": "saveProduct",
                "data": {**PRODUCT, "image": PNG_URI, "additionalImages": [PNG_URI, "https://x/y.jpg"]},
            }
        )

        product = Product.objects.get(pk="p-latte")
        self.assertTrue(product.image.startswith("https://files.example/assets/PROD_p-latte_"))
        self.assertNotIn("base64", product.additional_images)
        self.assertEqual(product.additional_image_list[1], "https://x/y.jpg")

    def test_validation_error_carries_details(self):
        res = self.write(
            {"action": "saveProduct", "data": {**PRODUCT, "prices": {"snack": {}}}}
        )

        self.assertEqual(res.status_code, 400)
        body = res.json()
        self.assertEqual(body["code"], "validation_error")
        self.assertIn("prices", body["errorDetails"])

    def test_data_must_be_an_object(self):
        res = self.write({"action": "saveProduct", "data": "nope"})
        self.assertEqual(res.status_code, 400)

    def test_delete_unknown_product_is_not_found(self):
        res = self.write({"action": "deleteProduct", "id": "ghost"})

        self.assertEqual(res.status_code, 404)
        self.assertEqual(res.json()["code"], "not_found")

    def test_malformed_body(self):
        res = self.client.post(URL, data="{not json", content_type="text/plain")

        self.assertEqual(res.status_code, 400)
        body = res.json()
        self.assertEqual(body["code"], "malformed_request")
        self.assertIn("errorDetails", body)

    def test_body_must_be_an_object(self):
        res = self.client.post(URL, data="[1, 2]", content_type="application/json")
        self.assertEqual(res.json()["code"], "malformed_request")


class GatewayOrderTests(GatewayTestCase):
    def test_create_order_with_slip(self):
        res = self.write({"action": "createOrder", "data": _order(paymentMethod="transfer"), "slipImage": PNG_URI})

        self.assertEqual(res.status_code, 200)
        body = res.json()
        self.assertEqual(body["status"], "success")
        self.assertTrue(body["slipUrl"].startswith("https://files.example/assets/SLIP_ORD-1_"))
        self.assertEqual(body["totalAmount"], 130)

        order = Order.objects.get(pk="ORD-1")
        self.assertEqual(order.slip_url, body["slipUrl"])
        self.fire.assert_called_once()

    def test_two_orders_are_two_rows(self):
        self.write({"action": "createOrder", "data": _order("ORD-1")})
        self.write({"action": "createOrder", "data": _order("ORD-2")})

        self.assertEqual(Order.objects.count(), 2)
        self.assertEqual(len(self.read("getOrders").json()), 2)

    def test_duplicate_order_id_conflicts(self):
        self.write({"action": "createOrder", "data": _order()})
        res = self.write({"action": "createOrder", "data": _order()})

        self.assertEqual(res.status_code, 409)
        self.assertEqual(Order.objects.count(), 1)

    def test_rejected_order_leaves_no_slip_behind(self):
        self.write({"action": "createOrder", "data": _order()})

        dup = self.write({"action": "createOrder", "data": _order(), "slipImage": PNG_URI})
        bad = self.write(
            {"action": "createOrder", "data": _order("ORD-2", items=[]), "slipImage": PNG_URI}
        )

        self.assertEqual((dup.status_code, bad.status_code), (409, 400))
        self.assertEqual(self.stored_files(), [])

    def test_failed_write_discards_its_upload(self):
        with mock.patch(
            "sales.services.order_service.create_order", side_effect=RuntimeError("disk full")
        ):
            with self.assertLogs("public.services.gateway", level="ERROR"):
                res = self.write(
                    {"action": "createOrder", "data": _order(), "slipImage": PNG_URI}
                )

        self.assertEqual(res.status_code, 500)
        self.assertEqual(self.stored_files(), [])
        self.assertFalse(Order.objects.exists())

    def test_status_update_is_idempotent(self):
        self.write({"action": "createOrder", "data": _order()})

        first = self.write({"action": "updateOrderStatus", "id": "ORD-1", "status": "preparing"})
        second = self.write({"action": "updateOrderStatus", "id": "ORD-1", "status": "preparing"})

        self.assertTrue(first.json()["changed"])
        self.assertFalse(second.json()["changed"])
        self.assertEqual(second.json()["orderStatus"], "preparing")

    def test_backward_status_conflicts(self):
        self.write({"action": "createOrder", "data": _order()})
        self.write({"action": "updateOrderStatus", "id": "ORD-1", "status": "completed"})

        res = self.write({"action": "updateOrderStatus", "id": "ORD-1", "status": "pending"})
        self.assertEqual(res.status_code, 409)

    def test_unknown_status_values_are_validation_errors(self):
        self.write({"action": "createOrder", "data": _order()})

        for action in ("updateOrderStatus", "updatePaymentStatus"):
            res = self.write({"action": action, "id": "ORD-1", "status": "lost"})
            self.assertEqual(res.status_code, 400)
            self.assertEqual(res.json()["code"], "validation_error")

        order = Order.objects.get(pk="ORD-1")
        self.assertEqual((order.status, order.payment_status), ("pending", "pending"))

    def test_unknown_order_is_not_found(self):
        res = self.write({"action": "updateOrderStatus", "id": "ORD-404", "status": "preparing"})

        self.assertEqual(res.status_code, 404)
        self.assertFalse(Order.objects.exists())

    def test_payment_status_update(self):
        self.write({"action": "createOrder", "data": _order()})
        res = self.write({"action": "updatePaymentStatus", "id": "ORD-1", "status": "paid"})

        self.assertEqual(res.json()["paymentStatus"], "paid")
        self.assertEqual(Order.objects.get(pk="ORD-1").payment_status, "paid")

    def test_order_payment_amendment(self):
        self.write({"action": "createOrder", "data": _order()})
        self.fire.reset_mock()

        res = self.write({"action": "updateOrderPayment", "id": "ORD-1", "slipImage": PNG_URI})

        self.assertEqual(res.status_code, 200)
        order = Order.objects.get(pk="ORD-1")
        self.assertEqual(
            (order.payment_method, order.payment_status, order.slip_url),
            ("transfer", "pending", res.json()["slipUrl"]),
        )
        self.fire.assert_called_once()

    def test_refused_amendment_uploads_nothing(self):
        self.write({"action": "createOrder", "data": _order()})
        self.write({"action": "updatePaymentStatus", "id": "ORD-1", "status": "paid"})

        res = self.write({"action": "updateOrderPayment", "id": "ORD-1", "slipImage": PNG_URI})

        self.assertEqual(res.status_code, 409)
        self.assertEqual(self.stored_files(), [])

    def test_order_payment_needs_slip(self):
        self.write({"action": "createOrder", "data": _order()})
        res = self.write({"action": "updateOrderPayment", "id": "ORD-1"})

        self.assertEqual(res.status_code, 400)
        self.assertEqual(Order.objects.get(pk="ORD-1").payment_method, "cash")


class GatewayLockTests(GatewayTestCase):
    def test_busy_when_lock_is_held(self):
        lock = self.store.lock
        with mock.patch.object(lock, "timeout", 0.05):
            lock.acquire()
            try:
                res = self.write({"action": "createOrder", "data": _order()})
            finally:
                lock.release()

        self.assertEqual(res.status_code, 503)
        body = res.json()
        self.assertEqual(body["code"], "busy")
        self.assertTrue(body["retryable"])
        self.assertFalse(Order.objects.exists())

    def test_write_proceeds_once_lock_is_released(self):
        lock = self.store.lock
        with mock.patch.object(lock, "timeout", 2):
            lock.acquire()
            threading.Timer(0.1, lock.release).start()
            res = self.write({"action": "createOrder", "data": _order()})

        self.assertEqual(res.status_code, 200)
        self.assertTrue(Order.objects.filter(pk="ORD-1").exists())

    def test_reads_do_not_take_the_lock(self):
        lock = self.store.lock
        with mock.patch.object(lock, "timeout", 0.05):
            lock.acquire()
            try:
                res = self.read("getOrders")
            finally:
                lock.release()

        self.assertEqual(res.status_code, 200)


class HealthTests(TestCase):
    def test_health(self):
        res = APIClient().get("/api/health/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json(), {"status": "ok", "db": "ok"})
