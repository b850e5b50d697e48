# products/models/category.py

from django.db import models


class Category(models.Model):
    """
    Menu category.

    Products point at a category by NAME, not by id. Deleting a category
    leaves those names on products untouched; they simply stop matching
    any active category filter.
    """

    id = models.CharField(primary_key=True, max_length=64)
    name = models.CharField(max_length=120)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
        verbose_name_plural = "categories"

    def __str__(self):
        return self.name
