"""
Tests for component wiring (src/application/wiring.py).
"""

from unittest.mock import MagicMock, patch

from src.application.config import AppSettings
from src.application.models import COUNTER_NAMES
from src.application.wiring import build_components
from src.infrastructure.metrics import InMemoryMetricsSink, PrometheusMetricsSink
from src.infrastructure.persistence import InMemoryOrderRepository, RedisOrderRepository


def test_memory_backends():
    components = build_components(AppSettings(metrics_backend="memory"))

    assert isinstance(components.repository, InMemoryOrderRepository)
    assert type(components.metrics) is InMemoryMetricsSink
    assert components.service.repository is components.repository
    assert components.service.dispatcher is components.dispatcher
    assert components.dispatcher.processor is components.processor
    assert components.dispatcher.pool is components.pool
    assert components.processor.metrics is components.metrics


def test_pool_built_from_settings():
    components = build_components(AppSettings())

    assert components.pool.core_workers == 4
    assert components.pool.max_workers == 10
    assert components.pool.queue_capacity == 50
    assert components.pool.thread_name_prefix == "order-processor"
    assert components.pool.snapshot().running is False


def test_prometheus_backend_preregisters_counters():
    components = build_components(AppSettings(metrics_backend="prometheus"))

    assert isinstance(components.metrics, PrometheusMetricsSink)
    exposition = components.metrics.exposition().decode()
    for name in COUNTER_NAMES:
        assert f"{name}_total 0.0" in exposition


def test_redis_backend_uses_settings():
    settings = AppSettings(
        store_backend="redis",
        redis_host="redis.internal",
        redis_port=6380,
        redis_db=3,
        redis_key_prefix="orders-test",
    )
    client = MagicMock()

    with patch("src.application.wiring.get_redis_client", return_value=client) as factory:
        components = build_components(settings)

    factory.assert_called_once_with(host="redis.internal", port=6380, db=3)
    assert isinstance(components.repository, RedisOrderRepository)
    assert components.repository.redis is client
    assert components.repository.key_prefix == "orders-test"


def test_injected_repository_and_metrics_override_settings():
    repository = InMemoryOrderRepository()
    metrics = InMemoryMetricsSink()

    with patch("src.application.wiring.get_redis_client") as factory:
        components = build_components(
            AppSettings(store_backend="redis"), repository=repository, metrics=metrics
        )

    factory.assert_not_called()
    assert components.repository is repository
    assert components.metrics is metrics


def test_rng_reaches_processor(make_rng):
    rng = make_rng()

    components = build_components(AppSettings(metrics_backend="memory"), rng=rng)

    assert components.processor.rng is rng
