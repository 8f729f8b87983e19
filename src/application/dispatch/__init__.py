"""
Dispatch

Bounded worker pool and the dispatcher that feeds it order ids.
"""

from .dispatcher import OrderDispatcher
from .worker_pool import BoundedWorkerPool, PoolSnapshot

__all__ = ["BoundedWorkerPool", "OrderDispatcher", "PoolSnapshot"]
