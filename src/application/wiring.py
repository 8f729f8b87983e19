"""
Component Wiring

Explicit construction of every long-lived object, done once at startup.
The API factory and the simulation script both call build_components();
nothing is looked up from a global container.

Construction Order:
    1. Repository (memory or Redis, from settings)
    2. Metrics sink (memory or Prometheus, from settings)
    3. OrderProcessor(repository, metrics, processing config, rng)
    4. BoundedWorkerPool(worker pool config)
    5. OrderDispatcher(processor, pool, metrics)
    6. OrderService(repository, metrics, dispatcher)

The dispatcher is NOT started here; callers own the lifecycle
(FastAPI lifespan, or the script's try/finally).
"""

import logging
from dataclasses import dataclass
from typing import Optional

from src.application.config import AppSettings
from src.application.dispatch.dispatcher import OrderDispatcher
from src.application.dispatch.worker_pool import BoundedWorkerPool
from src.application.models import COUNTER_NAMES
from src.application.ports.metrics_sink import MetricsSinkProtocol
from src.application.services.order_processor import OrderProcessor, RandomSource
from src.application.services.order_service import OrderService
from src.domain.orders.repositories.order_repository import OrderRepositoryProtocol
from src.infrastructure.metrics import InMemoryMetricsSink, PrometheusMetricsSink
from src.infrastructure.persistence import InMemoryOrderRepository, RedisOrderRepository
from src.infrastructure.persistence.redis import get_redis_client

# Configure logger for this module
logger = logging.getLogger(__name__)


@dataclass
class AppComponents:
    """Everything the API and scripts need, already connected."""

    settings: AppSettings
    repository: OrderRepositoryProtocol
    metrics: MetricsSinkProtocol
    processor: OrderProcessor
    pool: BoundedWorkerPool
    dispatcher: OrderDispatcher
    service: OrderService


def build_repository(settings: AppSettings) -> OrderRepositoryProtocol:
    if settings.store_backend == "redis":
        client = get_redis_client(
            host=settings.redis_host,
            port=settings.redis_port,
            db=settings.redis_db,
        )
        return RedisOrderRepository(client, key_prefix=settings.redis_key_prefix)
    return InMemoryOrderRepository()


def build_metrics(settings: AppSettings) -> MetricsSinkProtocol:
    if settings.metrics_backend == "prometheus":
        sink = PrometheusMetricsSink()
        sink.register_counters(*COUNTER_NAMES)
        return sink
    return InMemoryMetricsSink()


def build_components(
    settings: Optional[AppSettings] = None,
    rng: Optional[RandomSource] = None,
    repository: Optional[OrderRepositoryProtocol] = None,
    metrics: Optional[MetricsSinkProtocol] = None,
) -> AppComponents:
    """
    Build the full object graph.

    Args:
        settings: Application settings (defaults to AppSettings.from_env())
        rng: Random source for the processor (tests pass a stub)
        repository: Pre-built repository, overrides settings.store_backend
        metrics: Pre-built sink, overrides settings.metrics_backend

    Returns:
        AppComponents with a dispatcher that has not been started yet
    """
    settings = settings or AppSettings.from_env()
    repository = repository if repository is not None else build_repository(settings)
    metrics = metrics if metrics is not None else build_metrics(settings)

    processor = OrderProcessor(repository, metrics, settings.processing, rng=rng)

    pool_config = settings.worker_pool
    pool = BoundedWorkerPool(
        core_workers=pool_config.core_concurrency,
        max_workers=pool_config.max_concurrency,
        queue_capacity=pool_config.queue_capacity,
        keep_alive_seconds=pool_config.keep_alive_seconds,
        thread_name_prefix=pool_config.thread_name_prefix,
    )
    dispatcher = OrderDispatcher(processor, pool, metrics)
    service = OrderService(repository, metrics, dispatcher)

    logger.info(
        f"Components built: store={type(repository).__name__}, "
        f"metrics={type(metrics).__name__}, "
        f"pool core={pool_config.core_concurrency} max={pool_config.max_concurrency} "
        f"queue={pool_config.queue_capacity}"
    )

    return AppComponents(
        settings=settings,
        repository=repository,
        metrics=metrics,
        processor=processor,
        pool=pool,
        dispatcher=dispatcher,
        service=service,
    )
