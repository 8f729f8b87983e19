"""Order entities."""

from .order import Order, OrderStatus, utc_now

__all__ = ["Order", "OrderStatus", "utc_now"]
