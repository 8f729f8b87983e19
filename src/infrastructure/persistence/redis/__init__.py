"""
Redis Infrastructure Module

Redis-based order storage and connection pooling.

Exports:
    - RedisOrderRepository: Orders stored as Redis hashes
    - get_redis_client: Get Redis client with connection pooling
    - health_check: Check Redis health with PING test
    - close_connections: Close all Redis connections
"""

from .connection import close_connections, get_redis_client, health_check
from .order_repository import RedisOrderRepository

__all__ = [
    "RedisOrderRepository",
    "get_redis_client",
    "health_check",
    "close_connections",
]
