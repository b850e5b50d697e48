# sales/choices.py

"""
ORDER VOCABULARY

Fulfillment status and payment status are independent axes.
"""

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "pending", "รอดำเนินการ"
    PREPARING = "preparing", "กำลังทำ"
    DELIVERING = "delivering", "กำลังส่ง"
    COMPLETED = "completed", "ส่งแล้ว"
    CANCELLED = "cancelled", "ยกเลิก"


class PaymentStatus(models.TextChoices):
    PENDING = "pending", "รอชำระ"
    PAID = "paid", "ชำระแล้ว"


class PaymentMethod(models.TextChoices):
    CASH = "cash", "เงินสด"
    TRANSFER = "transfer", "โอนชำระ"


# Point-of-sale defaults (walk-in customer served at the counter)
WALK_IN_CUSTOMER_NAME = "ลูกค้าหน้าร้าน"
COUNTER_LOCATION = "หน้าร้าน"
