# products/services/catalog.py

"""
CATALOG SERVICE

Row-level operations for products and categories.

Rules:
- Identity is the client-supplied string id
- save = upsert that overwrites the whole row (insertion position kept)
- delete of an unknown id is a NotFound failure, never a silent success
- Category deletes never touch products (name-based link)

Callers (the gateway) own locking and cache invalidation.
"""

from __future__ import annotations

from django.db import transaction

from products.models import Category, Product
from products.serializers import CategorySerializer, ProductSerializer


class CatalogError(Exception):
    """Base catalog exception."""


class ProductNotFoundError(CatalogError):
    pass


class CategoryNotFoundError(CatalogError):
    pass


def list_products() -> list[dict]:
    return list(ProductSerializer(Product.objects.all(), many=True).data)


def list_categories() -> list[dict]:
    return list(CategorySerializer(Category.objects.all(), many=True).data)


@transaction.atomic
def save_product(data: dict) -> Product:
    product_id = str((data or {}).get("id") or "").strip()
    existing = Product.objects.select_for_update().filter(pk=product_id).first()

    s = ProductSerializer(instance=existing, data=data)
    s.is_valid(raise_exception=True)
    return s.save()


@transaction.atomic
def delete_product(product_id) -> None:
    deleted, _ = Product.objects.filter(pk=str(product_id)).delete()
    if not deleted:
        raise ProductNotFoundError(f"Product {product_id} not found")


@transaction.atomic
def save_category(data: dict) -> Category:
    category_id = str((data or {}).get("id") or "").strip()
    existing = Category.objects.select_for_update().filter(pk=category_id).first()

    s = CategorySerializer(instance=existing, data=data)
    s.is_valid(raise_exception=True)
    return s.save()


@transaction.atomic
def delete_category(category_id) -> None:
    deleted, _ = Category.objects.filter(pk=str(category_id)).delete()
    if not deleted:
        raise CategoryNotFoundError(f"Category {category_id} not found")
