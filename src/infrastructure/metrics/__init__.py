"""
Metrics Infrastructure Module

Exports:
    - InMemoryMetricsSink: Counters and duration percentiles in memory
    - PrometheusMetricsSink: Same, mirrored into prometheus_client collectors
"""

from .in_memory_sink import InMemoryMetricsSink
from .prometheus_sink import PrometheusMetricsSink

__all__ = [
    "InMemoryMetricsSink",
    "PrometheusMetricsSink",
]
