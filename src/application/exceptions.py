"""
Application Layer Exceptions

Errors raised by the asynchronous half of the pipeline. Neither reaches the
submission caller: both are isolated per job and observable through logs and
metrics only.
"""


class DispatchRejectedError(Exception):
    """
    Raised by the worker pool when a job cannot be accepted.

    This happens when the backlog is at capacity and every worker up to the
    concurrency ceiling is busy, or when the pool is not running.

    Attributes:
        queue_capacity: Backlog limit at the time of rejection
        max_workers: Concurrency ceiling at the time of rejection
    """

    def __init__(
        self,
        message: str,
        queue_capacity: int | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.queue_capacity = queue_capacity
        self.max_workers = max_workers
        super().__init__(message)


class ProcessingFault(Exception):
    """
    Unexpected fault inside a processor run.

    Wraps the original error (store failure, metrics failure, ...) together
    with the order id so the job boundary can log it. The order is left in
    whatever state it last successfully persisted.

    Attributes:
        order_id: Order being processed
        original_error: Exception that caused the fault

    Examples:
        >>> raise ProcessingFault(7, RedisError("connection reset"))
    """

    def __init__(self, order_id: int, original_error: Exception) -> None:
        self.order_id = order_id
        self.original_error = original_error
        super().__init__(
            f"Processing of order {order_id} failed: "
            f"{type(original_error).__name__}: {original_error}"
        )
