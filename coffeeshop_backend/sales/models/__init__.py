# sales/models/__init__.py

"""
SALES MODELS PACKAGE EXPORTS
"""

from .order import Order

__all__ = [
    "Order",
]
