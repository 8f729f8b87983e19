"""
Prometheus Metrics Sink

MetricsSinkProtocol implementation that keeps the in-memory aggregates (so
read_counter/summarize keep working) and mirrors every update into
prometheus_client collectors for scraping on /metrics.

Collectors:
    - Counter "{name}" for every counter name (exposed as {name}_total)
    - Histogram "{name}_seconds" for every duration name

Architecture Notes:
    - Each sink owns a private CollectorRegistry, so several sinks (tests,
      multiple app instances) never collide on the global default registry
    - Collectors are created lazily on first use
"""

import logging
import threading
from typing import Final, Optional

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from src.infrastructure.metrics.in_memory_sink import DEFAULT_MAX_SAMPLES, InMemoryMetricsSink

# Configure logger for this module
logger = logging.getLogger(__name__)

# Processing delay is 0.5s-2s by default; buckets cover that window densely
DURATION_BUCKETS: Final[tuple[float, ...]] = (
    0.05, 0.1, 0.25, 0.5, 0.75, 1.0, 1.25, 1.5, 2.0, 2.5, 5.0, 10.0,
)


class PrometheusMetricsSink(InMemoryMetricsSink):
    """
    In-memory sink whose updates are also exported in Prometheus format.

    Examples:
        >>> sink = PrometheusMetricsSink()
        >>> sink.increment_counter("orders_received")
        >>> b"orders_received_total 1.0" in sink.exposition()
        True
    """

    content_type: str = CONTENT_TYPE_LATEST

    def __init__(
        self,
        registry: Optional[CollectorRegistry] = None,
        max_samples: int = DEFAULT_MAX_SAMPLES,
    ) -> None:
        super().__init__(max_samples=max_samples)
        self.registry = registry or CollectorRegistry()
        self._counters: dict[str, Counter] = {}
        self._histograms: dict[str, Histogram] = {}
        self._collector_lock = threading.Lock()

    def _counter(self, name: str) -> Counter:
        with self._collector_lock:
            counter = self._counters.get(name)
            if counter is None:
                counter = Counter(
                    name,
                    f"Order service counter {name}",
                    registry=self.registry,
                )
                self._counters[name] = counter
            return counter

    def _histogram(self, name: str) -> Histogram:
        with self._collector_lock:
            histogram = self._histograms.get(name)
            if histogram is None:
                histogram = Histogram(
                    f"{name}_seconds",
                    f"Order service duration {name} in seconds",
                    buckets=DURATION_BUCKETS,
                    registry=self.registry,
                )
                self._histograms[name] = histogram
            return histogram

    def register_counters(self, *names: str) -> None:
        """Create counters up front so they are exported as 0 before first use."""
        for name in names:
            self._counter(name)

    def increment_counter(self, name: str, amount: int = 1) -> None:
        super().increment_counter(name, amount)
        self._counter(name).inc(amount)

    def record_duration(self, name: str, seconds: float) -> None:
        super().record_duration(name, seconds)
        self._histogram(name).observe(max(seconds, 0.0))

    def exposition(self) -> bytes:
        """Render every collector in the Prometheus text format."""
        return generate_latest(self.registry)
