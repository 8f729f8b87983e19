"""
Order Service - Application Orchestration

Responsibility:
    Single entry point external callers (API Layer, scripts) use for orders.
    Orchestrates submission (persist + count + enqueue), explicit updates,
    lookups and the stats query.

Architecture Notes:
    - Part of Application Layer (Services/Use Cases)
    - Constructor injection of repository, metrics sink and dispatcher
    - Holds no long-lived Order references: fetch, mutate a copy, write back
    - Submission is fire-and-forget: the caller never waits for processing

Contains:
    - OrderService: Main orchestration class

Does NOT contain:
    - HTTP handling (API Layer)
    - Processing logic (OrderProcessor)
    - Request validation beyond domain rules (API schemas)
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional

from src.application.models import ORDERS_RECEIVED, OrderStats
from src.application.ports.metrics_sink import MetricsSinkProtocol
from src.domain.orders.entities.order import Order, utc_now
from src.domain.orders.repositories.order_repository import OrderRepositoryProtocol
from src.domain.shared.exceptions import OrderNotFoundError

if TYPE_CHECKING:
    from src.application.dispatch.dispatcher import OrderDispatcher

# Configure logger for this module
logger = logging.getLogger(__name__)


class OrderService:
    """
    Orchestrates order submission, update and lookup.

    Flow (submit):
        API Layer -> OrderService.submit -> repository.create
                  -> metrics orders_received -> dispatcher.enqueue(id)
        [worker thread] -> OrderProcessor.run(id) -> repository.update

    Concurrency Note:
        update_order() and an in-flight processor run for the same order both
        read-modify-write the full record. Whichever write lands last wins.

    Example:
        >>> service = OrderService(repository, metrics, dispatcher)
        >>> order = service.submit("widget", 9.99)
        >>> order.status
        <OrderStatus.RECEIVED: 'RECEIVED'>
    """

    def __init__(
        self,
        repository: OrderRepositoryProtocol,
        metrics: MetricsSinkProtocol,
        dispatcher: "OrderDispatcher",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Initialize service with dependencies.

        Args:
            repository: Order persistence
            metrics: Metrics sink shared with the processor
            dispatcher: Started dispatcher that runs processing jobs
            clock: Time source for stats timestamps (defaults to UTC now)
        """
        self.repository = repository
        self.metrics = metrics
        self.dispatcher = dispatcher
        self.clock = clock or utc_now

    def submit(self, item: str, amount: float) -> Order:
        """
        Persist a new order and hand it to the dispatcher.

        Args:
            item: Non-empty item description
            amount: Positive amount

        Returns:
            Freshly created order with status RECEIVED

        Raises:
            InvalidOrderError: If item or amount violates domain rules
        """
        order = self.repository.create(item, amount)
        self.metrics.increment_counter(ORDERS_RECEIVED)
        logger.info(f"Order received and persisted with id={order.id}")

        # Rejection is swallowed by the dispatcher; the order stays RECEIVED
        self.dispatcher.enqueue(order.id)
        return order

    def update_order(self, order_id: int, item: str, amount: float) -> Order:
        """
        Overwrite item and amount of an existing order.

        Status and created_at are preserved. Races with an in-flight
        processor write (last writer wins).

        Returns:
            Persisted order

        Raises:
            OrderNotFoundError: If order_id does not exist (nothing is created)
            InvalidOrderError: If the new values are invalid
        """
        order = self.repository.get_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)

        order.revise(item, amount)
        saved = self.repository.update(order)
        logger.info(f"Order updated with id={saved.id}")
        return saved

    def find_by_id(self, order_id: int) -> Optional[Order]:
        return self.repository.get_by_id(order_id)

    def get_order(self, order_id: int) -> Order:
        """
        Like find_by_id() but raises instead of returning None.

        Raises:
            OrderNotFoundError: If order_id does not exist
        """
        order = self.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def stats(self) -> OrderStats:
        """Read the orders_received counter together with the current time."""
        total = self.metrics.read_counter(ORDERS_RECEIVED)
        logger.info(f"Stats requested: totalRequests={total}")
        return OrderStats(total_received=total, timestamp=self.clock())
