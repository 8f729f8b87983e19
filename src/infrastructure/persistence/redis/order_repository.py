"""
Redis Order Repository

Concrete implementation of OrderRepositoryProtocol backed by Redis hashes.
Durable alternative to the in-memory store, shared by every worker thread.

Responsibility:
    - Assign ids with an atomic INCR
    - Store one hash per order
    - Serialize/deserialize entities to/from string fields

Storage Format:
    - "{prefix}:id_seq"  -> integer counter (INCR)
    - "{prefix}:{id}"    -> HASH {id, item, amount, status, created_at}
      created_at is ISO-8601, amount uses repr() so floats round-trip

Consistency:
    - create(): the id is only handed out after HSET has stored the record
    - update(): EXISTS check then one HSET of every field; a single HSET is
      atomic, so a record is never half-written
    - No WATCH/optimistic locking: last writer wins

Examples:
    >>> repo = RedisOrderRepository(get_redis_client())
    >>> order = repo.create("widget", 9.99)
    >>> repo.get_by_id(order.id).item
    'widget'
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from redis import Redis

from src.domain.orders.entities.order import Order, OrderStatus, utc_now
from src.domain.shared.exceptions import OrderNotFoundError

# Configure logger for this module
logger = logging.getLogger(__name__)


class RedisOrderRepository:
    """
    Redis-based implementation of OrderRepositoryProtocol.

    The client must be created with decode_responses=True (see
    get_redis_client()).
    """

    def __init__(
        self,
        redis_client: Redis,
        key_prefix: str = "order",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """
        Args:
            redis_client: Connected Redis client
            key_prefix: Namespace for order keys
            clock: Time source for created_at (defaults to UTC now)
        """
        self.redis = redis_client
        self.key_prefix = key_prefix
        self.clock = clock or utc_now

    def _get_key(self, order_id: int) -> str:
        """
        Generate Redis key for an order.

        Examples:
            >>> repo._get_key(42)
            'order:42'
        """
        return f"{self.key_prefix}:{order_id}"

    def _get_sequence_key(self) -> str:
        return f"{self.key_prefix}:id_seq"

    @staticmethod
    def _serialize(order: Order) -> dict[str, str]:
        # Hash values are strings; repr keeps the float exact
        fields = order.to_dict()
        fields["amount"] = repr(order.amount)
        return {key: str(value) for key, value in fields.items()}

    def create(self, item: str, amount: float) -> Order:
        item, amount = Order.validate_fields(item, amount)

        order_id = int(self.redis.incr(self._get_sequence_key()))
        order = Order(
            id=order_id,
            item=item,
            amount=amount,
            status=OrderStatus.RECEIVED,
            created_at=self.clock(),
        )
        self.redis.hset(self._get_key(order_id), mapping=self._serialize(order))

        logger.debug(f"Stored new order id={order_id} in Redis")
        return order

    def get_by_id(self, order_id: int) -> Optional[Order]:
        data = self.redis.hgetall(self._get_key(order_id))
        if not data:
            return None
        return Order.from_dict(data)

    def update(self, order: Order) -> Order:
        key = self._get_key(order.id)
        if not self.redis.exists(key):
            raise OrderNotFoundError(order.id)

        self.redis.hset(key, mapping=self._serialize(order))
        return order.copy()
