"""
In-Memory Metrics Sink

Thread-safe implementation of MetricsSinkProtocol holding counters and
duration samples in process memory.

Responsibility:
    - Monotonic named counters
    - Duration distributions with count/total/max over every sample and
      percentiles (numpy) over a bounded window of recent samples

Architecture Notes:
    - Infrastructure Layer (implements Application port)
    - One lock guards every counter and distribution
    - Window size bounds memory under sustained load
"""

import logging
import threading
from collections import defaultdict, deque
from dataclasses import dataclass, field
from typing import Final

import numpy as np

from src.application.models import DurationSummary

# Configure logger for this module
logger = logging.getLogger(__name__)

DEFAULT_MAX_SAMPLES: Final[int] = 10_000


@dataclass
class _Distribution:
    """Running aggregates plus the retained sample window."""

    window: deque
    count: int = 0
    total: float = 0.0
    max: float = 0.0

    def add(self, seconds: float) -> None:
        self.window.append(seconds)
        self.count += 1
        self.total += seconds
        if seconds > self.max:
            self.max = seconds


@dataclass
class _State:
    counters: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    distributions: dict[str, _Distribution] = field(default_factory=dict)


class InMemoryMetricsSink:
    """
    Counters and duration summaries kept in memory.

    Examples:
        >>> sink = InMemoryMetricsSink()
        >>> sink.increment_counter("orders_received")
        >>> sink.read_counter("orders_received")
        1
        >>> sink.record_duration("order_processing_duration", 0.75)
        >>> sink.summarize("order_processing_duration").p50
        0.75
    """

    def __init__(self, max_samples: int = DEFAULT_MAX_SAMPLES) -> None:
        if max_samples < 1:
            raise ValueError(f"max_samples must be >= 1, got {max_samples}")
        self.max_samples = max_samples
        self._state = _State()
        self._lock = threading.Lock()

    def increment_counter(self, name: str, amount: int = 1) -> None:
        if amount < 1:
            raise ValueError(f"Counter increment must be >= 1, got {amount}")
        with self._lock:
            self._state.counters[name] += amount

    def record_duration(self, name: str, seconds: float) -> None:
        if seconds < 0:
            logger.warning(f"Negative duration {seconds} for {name} clamped to 0")
            seconds = 0.0
        with self._lock:
            distribution = self._state.distributions.get(name)
            if distribution is None:
                distribution = _Distribution(window=deque(maxlen=self.max_samples))
                self._state.distributions[name] = distribution
            distribution.add(seconds)

    def read_counter(self, name: str) -> int:
        with self._lock:
            return self._state.counters.get(name, 0)

    def counters(self) -> dict[str, int]:
        """Copy of every counter incremented so far."""
        with self._lock:
            return dict(self._state.counters)

    def summarize(self, name: str) -> DurationSummary:
        with self._lock:
            distribution = self._state.distributions.get(name)
            if distribution is None or distribution.count == 0:
                return DurationSummary.empty()
            samples = np.fromiter(distribution.window, dtype=float)
            count, total, peak = distribution.count, distribution.total, distribution.max

        p50, p95, p99 = np.percentile(samples, [50, 95, 99])
        return DurationSummary(
            count=count,
            total=total,
            mean=total / count,
            max=peak,
            p50=float(p50),
            p95=float(p95),
            p99=float(p99),
        )
