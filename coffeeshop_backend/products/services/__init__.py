from .pricing import get_starting_price, resolve_price

__all__ = [
    "get_starting_price",
    "resolve_price",
]
