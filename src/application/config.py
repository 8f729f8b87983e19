"""
Order Service Configuration

Configuration objects for the worker pool, the simulated processing step and
the backends the application is wired with.

Business Context:
    Processing latency is simulated with a uniform delay and a fixed failure
    probability. Concurrency is bounded by a core/max worker count and a
    bounded backlog. All values are externally configurable through
    environment variables (or a .env file) without code changes.

Design Principles:
    - Configuration as code with environment overrides
    - Immutable (frozen dataclasses), validated on construction
    - Invalid values raise ValueError at startup, never at request time
"""

import os
from dataclasses import dataclass, field
from typing import Final, Mapping, Optional

from dotenv import load_dotenv


# ============================================================================
# DEFAULTS
# ============================================================================

DEFAULT_CORE_CONCURRENCY: Final[int] = 4
DEFAULT_MAX_CONCURRENCY: Final[int] = 10
DEFAULT_QUEUE_CAPACITY: Final[int] = 50
DEFAULT_KEEP_ALIVE_SECONDS: Final[float] = 60.0
DEFAULT_THREAD_NAME_PREFIX: Final[str] = "order-processor"

DEFAULT_MIN_DELAY_MS: Final[int] = 500
DEFAULT_MAX_DELAY_MS: Final[int] = 2000
DEFAULT_FAILURE_PROBABILITY: Final[float] = 0.1  # 1 in 10

STORE_BACKENDS: Final[tuple[str, ...]] = ("memory", "redis")
METRICS_BACKENDS: Final[tuple[str, ...]] = ("memory", "prometheus")


# ============================================================================
# ENV HELPERS
# ============================================================================


def _env_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# ============================================================================
# CONFIG DATACLASSES
# ============================================================================


@dataclass(frozen=True)
class WorkerPoolConfig:
    """
    Limits of the bounded worker pool owned by the dispatcher.

    Attributes:
        core_concurrency: Steady-state worker count
        max_concurrency: Burst ceiling, never exceeded
        queue_capacity: Maximum accepted-but-not-started jobs
        keep_alive_seconds: Idle time before a surplus worker retires
        thread_name_prefix: Prefix of worker thread names
    """

    core_concurrency: int = DEFAULT_CORE_CONCURRENCY
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY
    keep_alive_seconds: float = DEFAULT_KEEP_ALIVE_SECONDS
    thread_name_prefix: str = DEFAULT_THREAD_NAME_PREFIX

    def __post_init__(self) -> None:
        """Validate pool limits."""
        if self.max_concurrency < 1:
            raise ValueError(f"max_concurrency must be >= 1, got {self.max_concurrency}")
        if not 0 <= self.core_concurrency <= self.max_concurrency:
            raise ValueError(
                f"core_concurrency must be between 0 and max_concurrency "
                f"({self.max_concurrency}), got {self.core_concurrency}"
            )
        if self.queue_capacity < 0:
            raise ValueError(f"queue_capacity must be >= 0, got {self.queue_capacity}")
        if self.keep_alive_seconds <= 0:
            raise ValueError(
                f"keep_alive_seconds must be > 0, got {self.keep_alive_seconds}"
            )

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "WorkerPoolConfig":
        return cls(
            core_concurrency=_env_int(env, "ORDER_POOL_CORE_CONCURRENCY", DEFAULT_CORE_CONCURRENCY),
            max_concurrency=_env_int(env, "ORDER_POOL_MAX_CONCURRENCY", DEFAULT_MAX_CONCURRENCY),
            queue_capacity=_env_int(env, "ORDER_POOL_QUEUE_CAPACITY", DEFAULT_QUEUE_CAPACITY),
            keep_alive_seconds=_env_float(
                env, "ORDER_POOL_KEEP_ALIVE_SECONDS", DEFAULT_KEEP_ALIVE_SECONDS
            ),
        )


@dataclass(frozen=True)
class ProcessingConfig:
    """
    Parameters of the simulated processing step.

    Attributes:
        min_delay_seconds: Lower bound of the uniform delay (inclusive)
        max_delay_seconds: Upper bound of the uniform delay (inclusive)
        failure_probability: Chance that an order ends as FAILED (0.0-1.0)

    Usage:
        config = ProcessingConfig.from_millis(500, 2000, 0.1)
    """

    min_delay_seconds: float = DEFAULT_MIN_DELAY_MS / 1000
    max_delay_seconds: float = DEFAULT_MAX_DELAY_MS / 1000
    failure_probability: float = DEFAULT_FAILURE_PROBABILITY

    def __post_init__(self) -> None:
        """Validate delay window and probability."""
        if self.min_delay_seconds < 0:
            raise ValueError(f"min_delay must be >= 0, got {self.min_delay_seconds}")
        if self.max_delay_seconds < self.min_delay_seconds:
            raise ValueError(
                f"max_delay ({self.max_delay_seconds}) must be >= "
                f"min_delay ({self.min_delay_seconds})"
            )
        if not 0.0 <= self.failure_probability <= 1.0:
            raise ValueError(
                f"failure_probability must be between 0.0 and 1.0, "
                f"got {self.failure_probability}"
            )

    @classmethod
    def from_millis(
        cls, min_delay_ms: float, max_delay_ms: float, failure_probability: float
    ) -> "ProcessingConfig":
        return cls(
            min_delay_seconds=min_delay_ms / 1000,
            max_delay_seconds=max_delay_ms / 1000,
            failure_probability=failure_probability,
        )

    @classmethod
    def from_env(cls, env: Mapping[str, str]) -> "ProcessingConfig":
        return cls.from_millis(
            _env_float(env, "ORDER_PROCESSING_MIN_DELAY_MS", DEFAULT_MIN_DELAY_MS),
            _env_float(env, "ORDER_PROCESSING_MAX_DELAY_MS", DEFAULT_MAX_DELAY_MS),
            _env_float(env, "ORDER_FAILURE_PROBABILITY", DEFAULT_FAILURE_PROBABILITY),
        )


@dataclass(frozen=True)
class AppSettings:
    """
    Top-level settings used by build_components() and the API factory.

    Attributes:
        worker_pool: Worker pool limits
        processing: Simulated processing parameters
        store_backend: "memory" or "redis"
        metrics_backend: "memory" or "prometheus"
        redis_host / redis_port / redis_db: Redis location (redis backend only)
        redis_key_prefix: Prefix of order keys in Redis
        log_level: Root logging level name
        cancel_running_on_shutdown: Interrupt in-flight jobs and drop the
            backlog on shutdown instead of draining it

    Examples:
        >>> settings = AppSettings.from_env()
        >>> settings.worker_pool.max_concurrency
        10
    """

    worker_pool: WorkerPoolConfig = field(default_factory=WorkerPoolConfig)
    processing: ProcessingConfig = field(default_factory=ProcessingConfig)
    store_backend: str = "memory"
    metrics_backend: str = "prometheus"
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_key_prefix: str = "order"
    log_level: str = "INFO"
    cancel_running_on_shutdown: bool = False

    def __post_init__(self) -> None:
        """Validate backend names."""
        if self.store_backend not in STORE_BACKENDS:
            raise ValueError(
                f"store_backend must be one of {STORE_BACKENDS}, got {self.store_backend!r}"
            )
        if self.metrics_backend not in METRICS_BACKENDS:
            raise ValueError(
                f"metrics_backend must be one of {METRICS_BACKENDS}, "
                f"got {self.metrics_backend!r}"
            )

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "AppSettings":
        """
        Build settings from environment variables.

        When env is None the process environment is used, after loading a
        .env file if one exists.

        Args:
            env: Explicit mapping (tests pass a dict)

        Raises:
            ValueError: If any value cannot be parsed or fails validation
        """
        if env is None:
            load_dotenv()
            env = os.environ

        return cls(
            worker_pool=WorkerPoolConfig.from_env(env),
            processing=ProcessingConfig.from_env(env),
            store_backend=env.get("ORDER_STORE_BACKEND", "memory").lower(),
            metrics_backend=env.get("METRICS_BACKEND", "prometheus").lower(),
            redis_host=env.get("REDIS_HOST", "localhost"),
            redis_port=_env_int(env, "REDIS_PORT", 6379),
            redis_db=_env_int(env, "REDIS_DB", 0),
            redis_key_prefix=env.get("REDIS_KEY_PREFIX", "order"),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            cancel_running_on_shutdown=_env_bool(
                env, "ORDER_CANCEL_RUNNING_ON_SHUTDOWN", False
            ),
        )
