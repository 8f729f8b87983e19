"""
Order Processor - Simulated Processing Step

Performs one unit of simulated work for a single order: delay, outcome
determination, status mutation, persistence and metric recording.

Responsibility:
    - Fetch the order and skip missing or already-terminal orders
    - Wait a uniformly drawn delay that can be interrupted
    - Decide PROCESSED/FAILED with a configurable failure probability
    - Persist the full record and count the outcome
    - Record elapsed time in a finally block, whatever happened

Architecture Notes:
    - Part of Application Layer (Services)
    - Randomness is injected (RandomSource) so tests can pin both branches
    - Runs on worker threads owned by the dispatcher's pool
    - One read, one write per run; no cross-call transaction (see DESIGN.md)

Interruption:
    If cancel_event is set during the delay the run is abandoned: no status
    change, no write, no outcome counter. orders_interrupted is incremented
    and the duration sample is still recorded.
"""

import logging
import random
import threading
import time
from typing import Optional, Protocol

from src.application.config import ProcessingConfig
from src.application.exceptions import ProcessingFault
from src.application.models import (
    ORDER_PROCESSING_DURATION,
    ORDERS_FAILED,
    ORDERS_INTERRUPTED,
    ORDERS_SUCCESS,
)
from src.application.ports.metrics_sink import MetricsSinkProtocol
from src.domain.orders.entities.order import Order
from src.domain.orders.repositories.order_repository import OrderRepositoryProtocol

# Configure logger for this module
logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Subset of random.Random used by the processor."""

    def uniform(self, a: float, b: float) -> float:
        ...

    def random(self) -> float:
        ...


class OrderProcessor:
    """
    Runs the simulated processing step for one order id.

    Dependencies:
        - repository: OrderRepositoryProtocol (read + full-record write)
        - metrics: MetricsSinkProtocol (outcome counters, duration samples)
        - config: ProcessingConfig (delay window, failure probability)
        - rng: RandomSource (defaults to a private random.Random)

    Examples:
        >>> processor = OrderProcessor(repo, metrics, ProcessingConfig())
        >>> saved = processor.run(1)
        >>> saved.status in (OrderStatus.PROCESSED, OrderStatus.FAILED)
        True
    """

    def __init__(
        self,
        repository: OrderRepositoryProtocol,
        metrics: MetricsSinkProtocol,
        config: ProcessingConfig,
        rng: Optional[RandomSource] = None,
    ) -> None:
        self.repository = repository
        self.metrics = metrics
        self.config = config
        self.rng: RandomSource = rng if rng is not None else random.Random()

    def run(
        self, order_id: int, cancel_event: Optional[threading.Event] = None
    ) -> Optional[Order]:
        """
        Process one order.

        Process Flow:
            1. Fetch order; absent or terminal -> no-op (returns None)
            2. Wait uniform(min_delay, max_delay) seconds on cancel_event
               - interrupted -> log, count orders_interrupted, return None
            3. failed = rng.random() < failure_probability
            4. Set FAILED/PROCESSED and persist via repository.update()
            5. Increment orders_success or orders_failed
            finally: record elapsed seconds into order_processing_duration

        Args:
            order_id: Id of the order to process
            cancel_event: Event that interrupts the delay when set

        Returns:
            Persisted order, or None when nothing was written

        Raises:
            ProcessingFault: If the order store read or write fails. Metrics sink
                errors propagate unchanged to the dispatcher job boundary
        """
        try:
            order = self.repository.get_by_id(order_id)
        except Exception as e:
            raise ProcessingFault(order_id, e) from e

        if order is None:
            logger.warning(f"Order id={order_id} not found, skipping processing")
            return None
        if order.is_terminal:
            logger.info(
                f"Order id={order_id} already {order.status.value}, skipping processing"
            )
            return None

        logger.info(
            f"Starting processing order id={order.id} item={order.item} amount={order.amount}"
        )
        cancel = cancel_event if cancel_event is not None else threading.Event()
        started = time.perf_counter()
        try:
            delay = self.rng.uniform(
                self.config.min_delay_seconds, self.config.max_delay_seconds
            )
            if cancel.wait(delay):
                logger.info(f"Order processing interrupted for id={order_id}")
                self.metrics.increment_counter(ORDERS_INTERRUPTED)
                return None

            failed = self.rng.random() < self.config.failure_probability
            order.complete(failed)

            try:
                saved = self.repository.update(order)
            except Exception as e:
                raise ProcessingFault(order_id, e) from e

            self.metrics.increment_counter(ORDERS_FAILED if failed else ORDERS_SUCCESS)
            logger.info(
                f"Order processing resulted in {saved.status.value} status for id={order_id}"
            )
            return saved
        finally:
            elapsed = time.perf_counter() - started
            self.metrics.record_duration(ORDER_PROCESSING_DURATION, elapsed)
            logger.debug(f"Recorded processing time {elapsed:.3f}s for order id={order_id}")
