# sales/tests/test_admin.py

from unittest import mock

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from public.services.shop_store import get_shop_store
from sales.choices import OrderStatus, PaymentStatus
from sales.models import Order
from sales.services.order_service import create_order

CHANGELIST = "admin:sales_order_changelist"


def _payload(**overrides):
    data = {
        "id": "ORD-1",
        "customerName": "สมชาย",
        "userType": "student",
        "items": [{"id": "p-latte", "name": "Latte", "appliedPrice": 50, "quantity": 2}],
        "paymentMethod": "cash",
        "deliveryLocation": "อาคาร 1",
        "timestamp": 1760000000000,
    }
    data.update(overrides)
    return data


class OrderAdminTestCase(TestCase):
    def setUp(self):
        staff = get_user_model().objects.create_superuser(
            "staff", "staff@example.com", "not-a-real-password"
        )
        self.client.force_login(staff)
        self.store = get_shop_store()

        patcher = mock.patch.object(self.store.notifier, "fire")
        patcher.start()
        self.addCleanup(patcher.stop)

        create_order(_payload())

    def complete_and_pay(self):
        Order.objects.filter(pk="ORD-1").update(
            status=OrderStatus.COMPLETED, payment_status=PaymentStatus.PAID
        )

    def change(self, **fields):
        data = {
            "customer_name": "สมชาย",
            "user_type": "student",
            "delivery_location": "อาคาร 1",
        }
        data.update(fields)
        return self.client.post(reverse("admin:sales_order_change", args=["ORD-1"]), data)

    def run_action(self, action, *ids):
        return self.client.post(
            reverse(CHANGELIST),
            {"action": action, "_selected_action": list(ids or ["ORD-1"])},
        )


class OrderChangeFormTests(OrderAdminTestCase):
    def test_lifecycle_fields_cannot_be_edited_on_the_form(self):
        self.complete_and_pay()

        res = self.change(
            customer_name="สมหญิง",
            status="pending",
            payment_status="pending",
            payment_method="transfer",
            slip_url="https://elsewhere/slip.jpg",
        )

        self.assertEqual(res.status_code, 302)
        order = Order.objects.get(pk="ORD-1")
        self.assertEqual(order.customer_name, "สมหญิง")
        self.assertEqual(
            (order.status, order.payment_status, order.payment_method, order.slip_url),
            ("completed", "paid", "cash", ""),
        )

    def test_edit_waits_for_the_mutation_lock(self):
        lock = self.store.lock
        with mock.patch.object(lock, "timeout", 0.05):
            lock.acquire()
            try:
                with self.assertLogs("public.services.mutation_lock", level="WARNING"):
                    res = self.change(customer_name="สมหญิง")
            finally:
                lock.release()

        self.assertEqual(res.status_code, 302)
        self.assertEqual(Order.objects.get(pk="ORD-1").customer_name, "สมชาย")

    def test_orders_cannot_be_added_or_deleted(self):
        self.assertEqual(self.client.get(reverse("admin:sales_order_add")).status_code, 403)
        res = self.client.post(reverse("admin:sales_order_delete", args=["ORD-1"]), {"post": "yes"})
        self.assertEqual(res.status_code, 403)
        self.assertTrue(Order.objects.filter(pk="ORD-1").exists())


class OrderActionTests(OrderAdminTestCase):
    def test_status_action_moves_forward(self):
        res = self.run_action("mark_preparing")

        self.assertEqual(res.status_code, 302)
        self.assertEqual(Order.objects.get(pk="ORD-1").status, OrderStatus.PREPARING)

    def test_completed_order_cannot_go_back(self):
        self.complete_and_pay()

        self.run_action("mark_preparing")
        self.run_action("mark_cancelled")

        order = Order.objects.get(pk="ORD-1")
        self.assertEqual(order.status, OrderStatus.COMPLETED)

    def test_payment_actions_are_free(self):
        self.run_action("mark_paid")
        self.assertEqual(Order.objects.get(pk="ORD-1").payment_status, PaymentStatus.PAID)

        self.run_action("mark_payment_pending")
        self.assertEqual(Order.objects.get(pk="ORD-1").payment_status, PaymentStatus.PENDING)

    def test_actions_go_through_the_store(self):
        with mock.patch.object(
            self.store, "update_order_status", return_value={"changed": True}
        ) as update:
            self.run_action("mark_delivering")

        update.assert_called_once_with("ORD-1", OrderStatus.DELIVERING)

    def test_busy_lock_changes_nothing(self):
        lock = self.store.lock
        with mock.patch.object(lock, "timeout", 0.05):
            lock.acquire()
            try:
                with self.assertLogs("public.services.mutation_lock", level="WARNING"):
                    res = self.run_action("mark_completed")
            finally:
                lock.release()

        self.assertEqual(res.status_code, 302)
        self.assertEqual(Order.objects.get(pk="ORD-1").status, OrderStatus.PENDING)
