"""
Orders Subdomain

Order entity, its status lifecycle and the repository contract.

Exports:
    - Order: Core entity
    - OrderStatus: Lifecycle enum (RECEIVED, PROCESSED, FAILED)
    - OrderRepositoryProtocol: Persistence interface
"""

from .entities import Order, OrderStatus, utc_now
from .repositories import OrderRepositoryProtocol

__all__ = ["Order", "OrderStatus", "OrderRepositoryProtocol", "utc_now"]
