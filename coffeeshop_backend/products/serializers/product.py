# products/serializers/product.py

"""
PRODUCT SERIALIZER

Purpose:
- Wire shape for the storefront, the POS and the staff console (camelCase keys)
- `prices` / `additionalImages` are JSON text columns, decoded on read
- Every optional field has a default so a save overwrites the whole row

Price rules:
- Each priced variant must carry general/teacher/student amounts (>= 0)
- drink: at least one of hot/iced/frappe, never snack
- snack: exactly the snack variant
"""

from decimal import Decimal, InvalidOperation

from rest_framework import serializers

from backend.encoding import json_number, safe_json_parse, dump_json
from products.choices import DRINK_SERVING_TYPES, ProductType, ServingType
from products.models import Product
from products.serializers.fields import EncodedJSONField, TextFlagField
from products.services.pricing import PRICE_TIERS


def _normalize_amount(value, *, where: str):
    if isinstance(value, bool) or value is None or value == "":
        raise serializers.ValidationError(f"{where} must be a number")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise serializers.ValidationError(f"{where} must be a number")
    if not amount.is_finite() or amount < Decimal("0"):
        raise serializers.ValidationError(f"{where} must be >= 0")
    return json_number(amount)


def normalize_price_map(product_type: str, prices: dict) -> dict:
    known = set(ServingType.values)
    unknown = sorted(set(prices) - known)
    if unknown:
        raise serializers.ValidationError(
            {"prices": [f"Unknown serving type(s): {', '.join(unknown)}"]}
        )

    if product_type == ProductType.SNACK:
        if set(prices) != {ServingType.SNACK.value}:
            raise serializers.ValidationError(
                {"prices": ["A snack is priced with exactly the 'snack' variant."]}
            )
    else:
        drink_variants = {s.value for s in DRINK_SERVING_TYPES}
        if ServingType.SNACK.value in prices:
            raise serializers.ValidationError(
                {"prices": ["A drink cannot use the 'snack' variant."]}
            )
        if not drink_variants & set(prices):
            raise serializers.ValidationError(
                {"prices": ["A drink needs at least one priced serving type."]}
            )

    out = {}
    for serving, structure in prices.items():
        if not isinstance(structure, dict):
            raise serializers.ValidationError(
                {"prices": [f"{serving}: expected general/teacher/student prices"]}
            )
        out[serving] = {
            tier.value: _normalize_amount(
                structure.get(tier.value), where=f"prices.{serving}.{tier.value}"
            )
            for tier in PRICE_TIERS
        }
    return out


class ProductSerializer(serializers.ModelSerializer):
    id = serializers.CharField(max_length=64)
    name = serializers.CharField(max_length=255)
    category = serializers.CharField(
        max_length=120, required=False, allow_blank=True, default=""
    )
    productType = serializers.ChoiceField(
        source="product_type",
        choices=ProductType.choices,
        required=False,
        default=ProductType.DRINK,
    )
    prices = EncodedJSONField(shape=dict)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    image = serializers.CharField(required=False, allow_blank=True, default="")
    additionalImages = EncodedJSONField(
        source="additional_images", shape=list, required=False, default=list
    )
    video = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=""
    )
    isPopular = TextFlagField(source="is_popular", required=False, default=False)
    isRecommended = TextFlagField(
        source="is_recommended", required=False, default=False
    )

    class Meta:
        model = Product
        fields = [
            "id",
            "name",
            "category",
            "productType",
            "prices",
            "description",
            "image",
            "additionalImages",
            "video",
            "isPopular",
            "isRecommended",
        ]

    def validate_id(self, value):
        v = str(value or "").strip()
        if not v:
            raise serializers.ValidationError("id cannot be blank")
        return v

    def validate_video(self, value):
        return value or ""

    def validate(self, attrs):
        product_type = attrs.get("product_type") or ProductType.DRINK
        prices = safe_json_parse(attrs.get("prices"), {})
        attrs["prices"] = dump_json(normalize_price_map(product_type, prices))

        images = safe_json_parse(attrs.get("additional_images"), [])
        if not all(isinstance(i, str) for i in images):
            raise serializers.ValidationError(
                {"additionalImages": ["Each image must be a URL string."]}
            )
        attrs["additional_images"] = dump_json(images)
        return attrs
