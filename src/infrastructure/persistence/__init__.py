"""
Persistence Infrastructure Module

Order repository implementations.

Exports:
    From memory:
        - InMemoryOrderRepository

    From redis:
        - RedisOrderRepository
"""

from .memory import InMemoryOrderRepository
from .redis import RedisOrderRepository

__all__ = [
    "InMemoryOrderRepository",
    "RedisOrderRepository",
]
