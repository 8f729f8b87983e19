"""
Order Dispatcher

Decouples order submission from processing. Owns the bounded worker pool and
hands each order id to OrderProcessor on a worker thread.

Responsibility:
    - Pool lifecycle (start/stop) driven by the application
    - Fire-and-forget enqueue: rejection is logged and counted, never raised
    - Job boundary: faults inside a processor run are logged with the order
      id, counted as orders_faulted and never reach other jobs

Architecture Notes:
    - Part of Application Layer (orchestration)
    - Explicitly constructed with its pool, processor and metrics sink
    - Cancellation-agnostic: once enqueued, a job is only stopped by
      stop(cancel_running=True)
"""

import logging
from typing import Optional

from src.application.dispatch.worker_pool import BoundedWorkerPool, PoolSnapshot
from src.application.exceptions import DispatchRejectedError
from src.application.models import ORDERS_FAULTED, ORDERS_REJECTED
from src.application.ports.metrics_sink import MetricsSinkProtocol
from src.application.services.order_processor import OrderProcessor

# Configure logger for this module
logger = logging.getLogger(__name__)


class OrderDispatcher:
    """
    Submits processing jobs for order ids to a BoundedWorkerPool.

    Examples:
        >>> dispatcher = OrderDispatcher(processor, pool, metrics)
        >>> dispatcher.start()
        >>> dispatcher.enqueue(1)
        True
        >>> dispatcher.stop()
    """

    def __init__(
        self,
        processor: OrderProcessor,
        pool: BoundedWorkerPool,
        metrics: MetricsSinkProtocol,
    ) -> None:
        self.processor = processor
        self.pool = pool
        self.metrics = metrics

    def start(self) -> None:
        self.pool.start()
        logger.info("Order dispatcher started")

    def stop(
        self,
        wait: bool = True,
        cancel_running: bool = False,
        timeout: Optional[float] = None,
    ) -> int:
        """
        Stop the pool.

        Args:
            wait: Join worker threads
            cancel_running: Interrupt in-flight delays and drop the backlog
            timeout: Per-thread join timeout

        Returns:
            Number of backlog jobs dropped
        """
        dropped = self.pool.shutdown(wait=wait, cancel_running=cancel_running, timeout=timeout)
        if dropped:
            logger.warning(f"Order dispatcher stopped, {dropped} queued orders left unprocessed")
        else:
            logger.info("Order dispatcher stopped")
        return dropped

    def enqueue(self, order_id: int) -> bool:
        """
        Submit a processing job for order_id.

        Returns:
            True if the pool accepted the job, False if it was rejected.
            Rejection is counted as orders_rejected and logged; the order
            stays RECEIVED.
        """
        try:
            self.pool.submit(self._run_job, order_id)
        except DispatchRejectedError as e:
            self.metrics.increment_counter(ORDERS_REJECTED)
            logger.warning(f"Dispatch rejected for order id={order_id}: {e}")
            return False

        logger.info(f"Order id={order_id} dispatched for processing")
        return True

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until every accepted job has finished."""
        return self.pool.wait_idle(timeout)

    def snapshot(self) -> PoolSnapshot:
        return self.pool.snapshot()

    def _run_job(self, order_id: int) -> None:
        try:
            self.processor.run(order_id, cancel_event=self.pool.cancel_event)
        except Exception as e:
            # ProcessingFault carries the store error; anything else is a bug
            self.metrics.increment_counter(ORDERS_FAULTED)
            logger.error(
                f"Async processing failed for orderId={order_id}: "
                f"{type(e).__name__}: {e}",
                exc_info=True,
            )
