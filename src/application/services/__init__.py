"""
Application Services

Responsibility:
    Orchestration of the order pipeline.

Contains:
    - OrderService: submission, update, lookup and stats
    - OrderProcessor: simulated processing of one order

Does NOT contain:
    - Domain business logic (use Domain entities)
    - Direct infrastructure calls (use dependency injection)
"""

from .order_processor import OrderProcessor, RandomSource
from .order_service import OrderService

__all__ = ["OrderProcessor", "OrderService", "RandomSource"]
