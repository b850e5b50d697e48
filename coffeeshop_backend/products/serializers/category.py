# products/serializers/category.py

from rest_framework import serializers

from products.models import Category


class CategorySerializer(serializers.ModelSerializer):
    """
    Category serializer.

    Rules:
    - id is client-supplied (string identity) and required on write
    - name cannot be blank
    """

    id = serializers.CharField(max_length=64)
    name = serializers.CharField(required=True, allow_blank=False, max_length=120)

    class Meta:
        model = Category
        fields = ["id", "name"]

    def validate_id(self, value: str):
        v = str(value or "").strip()
        if not v:
            raise serializers.ValidationError("id cannot be blank")
        return v

    def validate_name(self, value: str):
        v = (value or "").strip()
        if not v:
            raise serializers.ValidationError("name cannot be blank")
        return v
