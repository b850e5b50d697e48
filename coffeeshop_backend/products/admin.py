# products/admin.py

"""
Staff console for the menu.

Saves and deletes run under the shop store's mutation lock and drop the
cached listing afterwards (see public.admin). Prices and image lists are
validated by the gateway serializers, so the admin cannot store a row the
gateway would refuse.
"""

from django.contrib import admin

from products.models import Category, Product
from products.serializers import CategorySerializer, ProductSerializer
from public.admin import StoreWriteAdmin, WireValidatedForm
from public.services.listing_cache import Listing


class CategoryAdminForm(WireValidatedForm):
    serializer_class = CategorySerializer
    wire_fields = {"id": "id", "name": "name"}

    class Meta:
        model = Category
        fields = ["id", "name"]


class ProductAdminForm(WireValidatedForm):
    serializer_class = ProductSerializer
    wire_fields = {
        "id": "id",
        "name": "name",
        "category": "category",
        "product_type": "productType",
        "prices": "prices",
        "description": "description",
        "image": "image",
        "additional_images": "additionalImages",
        "video": "video",
        "is_popular": "isPopular",
        "is_recommended": "isRecommended",
    }

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "category",
            "product_type",
            "prices",
            "description",
            "image",
            "additional_images",
            "video",
            "is_popular",
            "is_recommended",
        ]


@admin.register(Category)
class CategoryAdmin(StoreWriteAdmin):
    form = CategoryAdminForm
    listing = Listing.CATEGORIES
    list_display = ("id", "name", "created_at")
    search_fields = ("id", "name")


@admin.register(Product)
class ProductAdmin(StoreWriteAdmin):
    form = ProductAdminForm
    listing = Listing.PRODUCTS
    list_display = (
        "id",
        "name",
        "category",
        "product_type",
        "is_popular",
        "is_recommended",
        "updated_at",
    )
    list_filter = ("product_type", "category", "is_popular", "is_recommended")
    search_fields = ("id", "name")
