"""
Shared Application Models

Responsibility:
    Metric names and small DTOs shared across the Application Layer.
    Prevents circular dependencies between services, dispatch and API.

Contains:
    - Metric name constants (counters and the processing duration)
    - OrderStats: Result of the stats query
    - DurationSummary: Percentile summary of a duration distribution

Does NOT contain:
    - Business logic (belongs to Domain Layer)
    - HTTP models (belongs to API Layer)
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Final


# ============================================================================
# METRIC NAMES
# ============================================================================

ORDERS_RECEIVED: Final[str] = "orders_received"
ORDERS_SUCCESS: Final[str] = "orders_success"
ORDERS_FAILED: Final[str] = "orders_failed"
ORDERS_REJECTED: Final[str] = "orders_rejected"
ORDERS_FAULTED: Final[str] = "orders_faulted"
ORDERS_INTERRUPTED: Final[str] = "orders_interrupted"

ORDER_PROCESSING_DURATION: Final[str] = "order_processing_duration"

COUNTER_NAMES: Final[tuple[str, ...]] = (
    ORDERS_RECEIVED,
    ORDERS_SUCCESS,
    ORDERS_FAILED,
    ORDERS_REJECTED,
    ORDERS_FAULTED,
    ORDERS_INTERRUPTED,
)


@dataclass(frozen=True)
class OrderStats:
    """
    Read-only reporting snapshot.

    Attributes:
        total_received: Value of the orders_received counter
        timestamp: Time the snapshot was taken (UTC)
    """

    total_received: int
    timestamp: datetime


@dataclass(frozen=True)
class DurationSummary:
    """
    Summary of one duration distribution, in seconds.

    All values are 0.0 when no sample has been recorded yet. Percentiles are
    computed over the retained window of recent samples, count and total
    over every sample ever recorded.
    """

    count: int
    total: float
    mean: float
    max: float
    p50: float
    p95: float
    p99: float

    @classmethod
    def empty(cls) -> "DurationSummary":
        return cls(count=0, total=0.0, mean=0.0, max=0.0, p50=0.0, p95=0.0, p99=0.0)
