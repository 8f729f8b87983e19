"""
Pytest Configuration and Shared Fixtures

This module contains pytest configuration and shared fixtures used across
all test suites (unit, integration).

Fixtures:
    - make_rng: Factory for deterministic random sources
    - fast_settings: AppSettings with zero delays and a small pool
    - components: Fully wired (not started) AppComponents on in-memory backends
    - test_client: FastAPI TestClient with the dispatcher running
    - redis_client: Real Redis client (skips when Redis is not reachable)
    - clean_redis: Redis client with the database flushed around the test

Architecture Notes:
    - Randomness is injected, so outcomes and delays are deterministic
    - TestClient is entered as a context manager so the lifespan starts and
      stops the dispatcher
    - Tests needing a real Redis are skipped, not failed, without one

Usage:
    def test_something(test_client):
        response = test_client.get("/health")
        assert response.status_code == 200
"""

import logging
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from src.api.main import create_app
from src.application.config import AppSettings, ProcessingConfig, WorkerPoolConfig
from src.application.wiring import AppComponents, build_components
from src.infrastructure.persistence.redis.connection import (
    close_connections,
    get_redis_client,
    health_check,
)

# Configure logger for tests
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ============================================================================
# RANDOMNESS
# ============================================================================


class StubRandom:
    """
    RandomSource with fixed draws.

    uniform() always returns uniform_value (clamped to [a, b] unless
    clamp=False), random() always returns random_value.
    """

    def __init__(self, uniform_value: float = 0.0, random_value: float = 0.5, clamp: bool = True):
        self.uniform_value = uniform_value
        self.random_value = random_value
        self.clamp = clamp
        self.uniform_calls: list[tuple[float, float]] = []

    def uniform(self, a: float, b: float) -> float:
        self.uniform_calls.append((a, b))
        if not self.clamp:
            return self.uniform_value
        return min(max(self.uniform_value, a), b)

    def random(self) -> float:
        return self.random_value


@pytest.fixture
def make_rng():
    """
    Factory for StubRandom instances.

    Examples:
        >>> def test_failure(make_rng):
        ...     rng = make_rng(random_value=0.05)  # below p=0.1 -> FAILED
    """
    return StubRandom


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================


@pytest.fixture
def fast_settings() -> AppSettings:
    """Small pool, zero delay, never failing, Prometheus sink."""
    return AppSettings(
        worker_pool=WorkerPoolConfig(
            core_concurrency=2,
            max_concurrency=4,
            queue_capacity=20,
            keep_alive_seconds=1.0,
        ),
        processing=ProcessingConfig(
            min_delay_seconds=0.0,
            max_delay_seconds=0.0,
            failure_probability=0.0,
        ),
        store_backend="memory",
        metrics_backend="prometheus",
    )


@pytest.fixture
def components(fast_settings, make_rng) -> AppComponents:
    """Wired components on in-memory backends; dispatcher not started."""
    return build_components(fast_settings, rng=make_rng())


@pytest.fixture
def test_client(components) -> Generator[TestClient, None, None]:
    """
    Provide FastAPI TestClient for API testing.

    The app uses the components fixture, so tests can inspect the same
    repository, metrics sink and pool the endpoints use.

    Yields:
        TestClient: FastAPI test client (lifespan running)
    """
    app = create_app(components=components)
    with TestClient(app) as client:
        logger.info("FastAPI TestClient created")
        yield client
    logger.info("FastAPI TestClient closed")


# ============================================================================
# REDIS FIXTURES
# ============================================================================


@pytest.fixture(scope="session")
def redis_client():
    """
    Provide a real Redis client, or skip when Redis is not reachable.

    Scope: session (shared across all tests in session)

    Note:
        Run `docker run -p 6379:6379 redis` before running Redis tests.
    """
    if not health_check():
        close_connections()
        pytest.skip("Redis is not available")

    client = get_redis_client()
    yield client
    close_connections()


@pytest.fixture(scope="function")
def clean_redis(redis_client):
    """
    Flush the Redis database before and after each test.

    Yields:
        redis.Redis: Clean Redis client
    """
    redis_client.flushdb()
    logger.info("Redis database flushed (before test)")

    yield redis_client

    redis_client.flushdb()
    logger.info("Redis database flushed (after test)")


# ============================================================================
# PYTEST CONFIGURATION
# ============================================================================


def pytest_configure(config):
    """
    Registers custom markers for test categorization.

    Markers:
        - integration: Integration tests (may require external services)
        - unit: Unit tests (no external dependencies)
        - redis: Tests that need a running Redis server
        - slow: Slow tests (>1s execution time)

    Usage:
        # Run all except Redis tests:
        # pytest -m "not redis"
    """
    config.addinivalue_line(
        "markers", "integration: Integration tests (may require external services)"
    )
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "redis: Tests that need a running Redis server")
    config.addinivalue_line("markers", "slow: Slow tests (>1s execution time)")


def pytest_collection_modifyitems(config, items):
    """Add the 'slow' marker to every Redis test."""
    for item in items:
        if "redis" in item.keywords:
            item.add_marker(pytest.mark.slow)
