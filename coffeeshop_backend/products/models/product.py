# products/models/product.py

from django.db import models

from backend.encoding import safe_json_parse
from products.choices import ProductType


class Product(models.Model):
    """
    A sellable menu item.

    PRICE MODEL (IMPORTANT):
    - `prices` is JSON text: {serving_type: {general, teacher, student}}
    - Variants may be omitted; an omitted variant is not orderable
    - Drinks expose at least one of hot/iced/frappe, snacks exactly `snack`

    Cart and order lines copy product state by value, so edits here never
    reach orders that were already placed.
    """

    id = models.CharField(primary_key=True, max_length=64)
    name = models.CharField(max_length=255, db_index=True)

    # Foreign key by name (free-form label)
    category = models.CharField(max_length=120, blank=True, default="")

    product_type = models.CharField(
        max_length=16,
        choices=ProductType.choices,
        default=ProductType.DRINK,
    )

    prices = models.TextField(blank=True, default="{}")

    description = models.TextField(blank=True, default="")
    image = models.TextField(blank=True, default="")
    additional_images = models.TextField(blank=True, default="[]")
    video = models.TextField(blank=True, default="")

    is_popular = models.BooleanField(default=False)
    is_recommended = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(fields=["category"], name="product_category_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.id})"

    @property
    def price_map(self) -> dict:
        return safe_json_parse(self.prices, {})

    @property
    def additional_image_list(self) -> list:
        return safe_json_parse(self.additional_images, [])
