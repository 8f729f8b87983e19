"""
Infrastructure Layer - External Dependencies

Implements technical capabilities that support the Domain and Application
Layers: order storage and metrics backends.

Architecture:
    - Implements Domain repository interfaces (Dependency Inversion)
    - Implements Application Layer protocols (MetricsSinkProtocol)
    - Depends on external libraries (Redis, numpy, prometheus_client)
    - No Domain business logic (only technical implementations)

Modules:
    - persistence: In-memory and Redis order repositories
    - metrics: In-memory and Prometheus metrics sinks

Usage:
    >>> from src.infrastructure import InMemoryOrderRepository, PrometheusMetricsSink
    >>> from src.infrastructure.persistence.redis import get_redis_client
"""

# Persistence
from .persistence import InMemoryOrderRepository, RedisOrderRepository

# Metrics
from .metrics import InMemoryMetricsSink, PrometheusMetricsSink

__all__ = [
    # Persistence
    "InMemoryOrderRepository",
    "RedisOrderRepository",
    # Metrics
    "InMemoryMetricsSink",
    "PrometheusMetricsSink",
]
