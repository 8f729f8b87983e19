"""
OrderRepository Interface

Repository pattern interface for Order persistence.
Defines the contract the application layer relies on for storing and
retrieving orders.

Responsibility:
    - Define data access contract (interface)
    - Enable Dependency Inversion (Domain defines, Infrastructure implements)
    - Support testing (easy to mock or swap for the in-memory store)

Architecture Notes:
    - Protocol-based interface (structural typing)
    - Synchronous methods: called from request handlers and worker threads
    - Implementations must be safe for concurrent create/read/update calls
    - No cross-call transactions: a read followed by an update is NOT atomic
"""

from typing import Optional, Protocol

from ..entities.order import Order


class OrderRepositoryProtocol(Protocol):
    """
    Protocol defining the contract for Order persistence.

    Implementations:
        - InMemoryOrderRepository (src.infrastructure.persistence.memory)
        - RedisOrderRepository (src.infrastructure.persistence.redis)

    Consistency:
        update() is last-writer-wins at the granularity of a full record.
        An explicit update and a concurrent processor write for the same order
        are not ordered relative to each other.
    """

    def create(self, item: str, amount: float) -> Order:
        """
        Create and persist a new order.

        Assigns the id, sets status=RECEIVED and created_at=now. The record is
        fully stored before it is returned, so the id is never visible to a
        concurrent reader before the record exists.

        Args:
            item: Non-empty item description
            amount: Positive amount

        Returns:
            Detached copy of the stored order

        Raises:
            InvalidOrderError: If item or amount is invalid
        """
        ...

    def get_by_id(self, order_id: int) -> Optional[Order]:
        """
        Retrieve an order by id.

        Returns:
            Detached copy of the stored order, or None if absent
        """
        ...

    def update(self, order: Order) -> Order:
        """
        Overwrite the stored record with the given order's field values.

        No optimistic-concurrency check. The write is all-or-nothing.

        Returns:
            Detached copy of the stored order

        Raises:
            OrderNotFoundError: If no record exists with order.id
        """
        ...
