"""
Redis Connection Pool Management.

Provides a shared connection pool for Redis with a startup PING and retry
logic. Used by RedisOrderRepository and the /health endpoint.

Responsibility:
    - Manage one Redis connection pool per process
    - Verify connectivity with PING, retrying with exponential backoff
    - Health check that never raises
    - Close the pool on application shutdown

Business Rules:
    - Max connections: REDIS_MAX_CONNECTIONS (default 20, one per worker plus
      request handlers)
    - Socket timeout: REDIS_TIMEOUT seconds (default 5)
    - Retry attempts: REDIS_RETRY_ATTEMPTS (default 3), backoff 1s, 2s, 4s
    - Decode responses: True (hash fields come back as str)

Examples:
    >>> client = get_redis_client(host="localhost", port=6379, db=0)
    >>> if health_check():
    ...     print("Redis is healthy")
    >>> close_connections()
"""

import logging
import os
import threading
import time
from typing import Optional

from redis import ConnectionPool, Redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError

# Configure logger for this module
logger = logging.getLogger(__name__)

# Process-wide pool, created lazily under the lock
_redis_pool: Optional[ConnectionPool] = None
_pool_lock = threading.Lock()


def _get_pool(host: str, port: int, db: int) -> ConnectionPool:
    global _redis_pool

    if _redis_pool is None:
        with _pool_lock:
            if _redis_pool is None:
                max_conn = int(os.getenv("REDIS_MAX_CONNECTIONS", "20"))
                conn_timeout = int(os.getenv("REDIS_TIMEOUT", "5"))
                logger.info(
                    f"Creating Redis connection pool: host={host}, port={port}, db={db}, "
                    f"max_connections={max_conn}, timeout={conn_timeout}s"
                )
                _redis_pool = ConnectionPool(
                    host=host,
                    port=port,
                    db=db,
                    max_connections=max_conn,
                    socket_timeout=conn_timeout,
                    socket_connect_timeout=conn_timeout,
                    socket_keepalive=True,
                    decode_responses=True,
                )
    return _redis_pool


def get_redis_client(
    host: Optional[str] = None,
    port: Optional[int] = None,
    db: int = 0,
) -> Redis:
    """
    Get a Redis client backed by the shared pool, verified with PING.

    The pool is created on the first call; later calls reuse it and ignore
    host/port/db.

    Args:
        host: Redis hostname (default from env: REDIS_HOST or "localhost")
        port: Redis port (default from env: REDIS_PORT or 6379)
        db: Redis database number (default 0)

    Returns:
        Redis client instance

    Raises:
        RedisError: If PING fails after all retry attempts
    """
    redis_host = host or os.getenv("REDIS_HOST", "localhost")
    redis_port = port or int(os.getenv("REDIS_PORT", "6379"))

    client = Redis(connection_pool=_get_pool(redis_host, redis_port, db))

    retry_attempts = int(os.getenv("REDIS_RETRY_ATTEMPTS", "3"))
    last_error: Optional[Exception] = None

    for attempt in range(retry_attempts):
        try:
            client.ping()
            logger.debug(f"Redis connection established (attempt {attempt + 1})")
            return client
        except (ConnectionError, TimeoutError) as e:
            last_error = e
            if attempt < retry_attempts - 1:
                delay = 2**attempt
                logger.warning(
                    f"Redis connection failed (attempt {attempt + 1}/{retry_attempts}): {e}. "
                    f"Retrying in {delay}s..."
                )
                time.sleep(delay)
            else:
                logger.error(f"Redis connection failed after {retry_attempts} attempts: {e}")

    raise RedisError(
        f"Failed to connect to Redis after {retry_attempts} attempts. "
        f"Last error: {last_error}"
    )


def health_check(client: Optional[Redis] = None) -> bool:
    """
    PING Redis and report the result without raising.

    Args:
        client: Client to check (defaults to one from the shared pool)

    Returns:
        True if PING succeeded, False otherwise
    """
    try:
        client = client or get_redis_client()
        if client.ping():
            return True
        logger.warning("Redis health check: PING returned False")
        return False
    except RedisError as e:
        logger.warning(f"Redis health check failed: {e}")
        return False


def close_connections() -> None:
    """
    Disconnect and drop the shared pool. Safe to call more than once.
    """
    global _redis_pool

    with _pool_lock:
        if _redis_pool is None:
            logger.debug("Redis connection pool already closed or not initialized")
            return

        logger.info("Closing Redis connection pool")
        try:
            _redis_pool.disconnect()
        except RedisError as e:
            logger.error(f"Error closing Redis connection pool: {e}")
        finally:
            _redis_pool = None
