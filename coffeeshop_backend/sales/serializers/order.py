# sales/serializers/order.py

"""
ORDER SERIALIZERS

- OrderSerializer: wire shape (camelCase), items decoded from JSON text
- OrderCreateSerializer: validates a new order coming from checkout / POS

Item snapshots are stored as sent (they are copies of product state at
order time); only the fields that drive money are validated and normalized.
"""

from decimal import Decimal

from rest_framework import serializers

from backend.encoding import json_number
from products.choices import CustomerClass, ServingType
from products.serializers.fields import EncodedJSONField
from sales.choices import OrderStatus, PaymentMethod, PaymentStatus
from sales.models import Order


class OrderLineSerializer(serializers.Serializer):
    """Money-relevant part of a cart line snapshot."""

    cartId = serializers.CharField(required=False, allow_blank=True)
    id = serializers.CharField(required=False, allow_blank=True)
    name = serializers.CharField(required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1)
    appliedPrice = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal("0")
    )
    selectedServingType = serializers.ChoiceField(
        choices=ServingType.choices, required=False
    )
    selectedUserType = serializers.ChoiceField(
        choices=CustomerClass.choices, required=False
    )
    sweetness = serializers.CharField(required=False, allow_blank=True)


class OrderSerializer(serializers.ModelSerializer):
    customerName = serializers.CharField(source="customer_name")
    userType = serializers.CharField(source="user_type")
    items = EncodedJSONField(shape=list)
    totalAmount = serializers.DecimalField(
        source="total_amount", max_digits=12, decimal_places=2, coerce_to_string=False
    )
    paymentMethod = serializers.CharField(source="payment_method")
    paymentStatus = serializers.CharField(source="payment_status")
    deliveryLocation = serializers.CharField(source="delivery_location")
    slipUrl = serializers.CharField(source="slip_url")

    class Meta:
        model = Order
        fields = [
            "id",
            "customerName",
            "userType",
            "items",
            "totalAmount",
            "paymentMethod",
            "paymentStatus",
            "deliveryLocation",
            "status",
            "slipUrl",
            "timestamp",
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=64)
    customerName = serializers.CharField(
        max_length=200, required=False, allow_blank=True, default=""
    )
    userType = serializers.ChoiceField(
        choices=CustomerClass.choices, required=False, default=CustomerClass.GENERAL
    )
    items = serializers.ListField(child=serializers.DictField(), allow_empty=False)
    totalAmount = serializers.DecimalField(
        max_digits=12, decimal_places=2, required=False, allow_null=True
    )
    paymentMethod = serializers.ChoiceField(choices=PaymentMethod.choices)
    paymentStatus = serializers.ChoiceField(
        choices=PaymentStatus.choices, required=False, default=PaymentStatus.PENDING
    )
    deliveryLocation = serializers.CharField(
        max_length=255, required=False, allow_blank=True, default=""
    )
    status = serializers.ChoiceField(
        choices=OrderStatus.choices, required=False, default=OrderStatus.PENDING
    )
    timestamp = serializers.IntegerField(min_value=0, required=False, allow_null=True)

    def validate_id(self, value):
        v = str(value or "").strip()
        if not v:
            raise serializers.ValidationError("id cannot be blank")
        return v

    def validate_items(self, items):
        out = []
        for idx, raw in enumerate(items):
            line = OrderLineSerializer(data=raw)
            if not line.is_valid():
                raise serializers.ValidationError({idx: line.errors})

            snapshot = dict(raw)
            snapshot["quantity"] = line.validated_data["quantity"]
            snapshot["appliedPrice"] = json_number(line.validated_data["appliedPrice"])
            out.append(snapshot)
        return out
