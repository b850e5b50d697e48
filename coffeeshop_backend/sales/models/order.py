# sales/models/order.py

from django.db import models

from backend.encoding import safe_json_parse
from products.choices import CustomerClass
from sales.choices import OrderStatus, PaymentMethod, PaymentStatus


class Order(models.Model):
    """
    Storefront / point-of-sale order.

    Key rules:
    - `items` is JSON text: immutable snapshots of the cart lines at order time
    - `status` (fulfillment) and `payment_status` move independently
    - Only the lifecycle services mutate an order; orders are never deleted
    - `timestamp` is the creation instant in epoch milliseconds (newest first)
    """

    id = models.CharField(primary_key=True, max_length=64)

    customer_name = models.CharField(max_length=200, blank=True, default="")
    user_type = models.CharField(
        max_length=16,
        choices=CustomerClass.choices,
        default=CustomerClass.GENERAL,
        help_text="Representative customer class at order time",
    )

    items = models.TextField(default="[]")

    total_amount = models.DecimalField(max_digits=12, decimal_places=2)

    payment_method = models.CharField(
        max_length=16, choices=PaymentMethod.choices, default=PaymentMethod.CASH
    )
    payment_status = models.CharField(
        max_length=16, choices=PaymentStatus.choices, default=PaymentStatus.PENDING
    )

    delivery_location = models.CharField(max_length=255, blank=True, default="")

    status = models.CharField(
        max_length=16, choices=OrderStatus.choices, default=OrderStatus.PENDING
    )

    slip_url = models.TextField(blank=True, default="")

    timestamp = models.BigIntegerField(db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-timestamp", "-created_at"]
        indexes = [
            models.Index(fields=["status"], name="order_status_idx"),
            models.Index(fields=["payment_status"], name="order_payment_status_idx"),
        ]

    @property
    def item_list(self) -> list:
        return safe_json_parse(self.items, [])

    def __str__(self):
        return f"{self.id} | {self.total_amount} | {self.status}/{self.payment_status}"
