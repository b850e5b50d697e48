# sales/serializers/__init__.py

from .order import OrderCreateSerializer, OrderSerializer

__all__ = [
    "OrderCreateSerializer",
    "OrderSerializer",
]
