# products/choices.py

"""
MENU VOCABULARY

Wire values are short English codes; labels are what the shop displays.
Kept outside products.models so the storefront client can import them
without an app registry.
"""

from django.db import models


class ProductType(models.TextChoices):
    DRINK = "drink", "เครื่องดื่ม"
    SNACK = "snack", "ขนม"


class ServingType(models.TextChoices):
    HOT = "hot", "ร้อน"
    ICED = "iced", "เย็น"
    FRAPPE = "frappe", "ปั่น"
    SNACK = "snack", "ขนม"


class CustomerClass(models.TextChoices):
    GENERAL = "general", "ทั่วไป"
    TEACHER = "teacher", "ครู"
    STUDENT = "student", "นักเรียน"


DRINK_SERVING_TYPES = (ServingType.HOT, ServingType.ICED, ServingType.FRAPPE)

SWEETNESS_LEVELS = ("0%", "25%", "50%", "100%", "125%")
DEFAULT_SWEETNESS = "100%"
NO_SWEETNESS = "-"
