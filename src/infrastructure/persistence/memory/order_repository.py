"""
In-Memory Order Repository

Concrete implementation of OrderRepositoryProtocol backed by a dict.
Default backend for development, tests and the simulation script.

Responsibility:
    - Assign sequential integer ids starting at 1
    - Store detached copies so callers only ever mutate local copies
    - Serialize concurrent create/read/update with one lock

Architecture Notes:
    - Infrastructure Layer (implements Domain interface)
    - Thread-safe: used from request handlers and worker threads at once
    - Data lives for the lifetime of the process only
"""

import itertools
import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from src.domain.orders.entities.order import Order, OrderStatus, utc_now
from src.domain.shared.exceptions import OrderNotFoundError

# Configure logger for this module
logger = logging.getLogger(__name__)


class InMemoryOrderRepository:
    """
    Dict-based, lock-protected implementation of OrderRepositoryProtocol.

    Examples:
        >>> repo = InMemoryOrderRepository()
        >>> order = repo.create("widget", 9.99)
        >>> order.id
        1
        >>> repo.get_by_id(1).status
        <OrderStatus.RECEIVED: 'RECEIVED'>
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None) -> None:
        """
        Args:
            clock: Time source for created_at (defaults to UTC now)
        """
        self.clock = clock or utc_now
        self._orders: dict[int, Order] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create(self, item: str, amount: float) -> Order:
        item, amount = Order.validate_fields(item, amount)

        with self._lock:
            order = Order(
                id=next(self._ids),
                item=item,
                amount=amount,
                status=OrderStatus.RECEIVED,
                created_at=self.clock(),
            )
            self._orders[order.id] = order.copy()

        logger.debug(f"Stored new order id={order.id}")
        return order

    def get_by_id(self, order_id: int) -> Optional[Order]:
        with self._lock:
            stored = self._orders.get(order_id)
            return stored.copy() if stored is not None else None

    def update(self, order: Order) -> Order:
        with self._lock:
            if order.id not in self._orders:
                raise OrderNotFoundError(order.id)
            self._orders[order.id] = order.copy()
        return order.copy()

    def count(self) -> int:
        with self._lock:
            return len(self._orders)
