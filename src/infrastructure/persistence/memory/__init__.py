"""
In-Memory Persistence Module

Exports:
    - InMemoryOrderRepository: Dict-based, thread-safe order storage
"""

from .order_repository import InMemoryOrderRepository

__all__ = [
    "InMemoryOrderRepository",
]
