"""
MetricsSink Port

Protocol for the metrics backend consumed by the service and the processor.
Infrastructure Layer implements it (in-memory and Prometheus-backed sinks).

Thread Safety:
    Implementations must accept concurrent increments and samples from every
    worker thread at once.
"""

from typing import Protocol

from src.application.models import DurationSummary


class MetricsSinkProtocol(Protocol):
    """
    Contract for recording named counters and duration samples.

    Counter names used: orders_received, orders_success, orders_failed,
    orders_rejected, orders_faulted, orders_interrupted.
    Duration name used: order_processing_duration (seconds).
    """

    def increment_counter(self, name: str, amount: int = 1) -> None:
        """Add amount (>= 1) to the monotonic counter called name."""
        ...

    def record_duration(self, name: str, seconds: float) -> None:
        """Record one sample into the duration distribution called name."""
        ...

    def read_counter(self, name: str) -> int:
        """Current value of counter name; 0 if it was never incremented."""
        ...

    def summarize(self, name: str) -> DurationSummary:
        """Percentile summary (at least p50 and p95) of distribution name."""
        ...
