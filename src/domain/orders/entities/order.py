"""
Order Entity.

Core domain entity representing a single submitted order.
This entity has identity (integer id assigned by the store) and a short
lifecycle: RECEIVED -> PROCESSED or RECEIVED -> FAILED.

Unlike Value Objects, Entities are mutable. Callers always work on a local
copy fetched from the repository and write it back as a whole record.
"""

import math
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from numbers import Real
from typing import Any

from src.domain.shared.exceptions import InvalidOrderError, InvalidOrderStateError


def utc_now() -> datetime:
    """Timezone-aware current time used for createdAt and stats timestamps."""
    return datetime.now(timezone.utc)


class OrderStatus(str, Enum):
    """
    Lifecycle states of Order entity.

    States:
        RECEIVED: Persisted and waiting for (or undergoing) processing
        PROCESSED: Simulated processing succeeded (terminal)
        FAILED: Simulated processing failed (terminal)
    """

    RECEIVED = "RECEIVED"
    PROCESSED = "PROCESSED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not OrderStatus.RECEIVED


@dataclass
class Order:
    """
    Mutable entity representing one order and its processing status.

    Attributes:
        id: Unique identifier assigned by the repository at creation
        item: Non-empty description of the ordered item
        amount: Strictly positive numeric amount
        status: Current lifecycle status (RECEIVED on creation)
        created_at: Creation timestamp, never mutated

    Examples:
        >>> order = Order(id=1, item="widget", amount=9.99)
        >>> order.status
        <OrderStatus.RECEIVED: 'RECEIVED'>
        >>> order.complete(failed=False)
        >>> order.status.is_terminal
        True
    """

    id: int
    item: str
    amount: float
    status: OrderStatus = OrderStatus.RECEIVED
    created_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        """
        Validate fields after initialization.

        Raises:
            InvalidOrderError: If item or amount is invalid
        """
        self.item, self.amount = self.validate_fields(self.item, self.amount)
        if not isinstance(self.status, OrderStatus):
            self.status = OrderStatus(self.status)

    @staticmethod
    def validate_fields(item: Any, amount: Any) -> tuple[str, float]:
        """
        Validate item/amount pair and return normalized values.

        Repositories call this before consuming an id so a rejected
        creation does not leave a gap in the sequence.

        Args:
            item: Candidate item description
            amount: Candidate amount

        Returns:
            (item, amount) with amount coerced to float

        Raises:
            InvalidOrderError: If item is blank or amount is not a positive number
        """
        if not isinstance(item, str) or not item.strip():
            raise InvalidOrderError("item must be a non-empty string", field_name="item")

        # bool is a Real subclass; True must not be accepted as amount=1
        if isinstance(amount, bool) or not isinstance(amount, Real):
            raise InvalidOrderError(
                f"amount must be a number, got {type(amount).__name__}",
                field_name="amount",
            )
        amount = float(amount)
        if not math.isfinite(amount) or amount <= 0:
            raise InvalidOrderError(f"amount must be > 0, got {amount}", field_name="amount")

        return item, amount

    @property
    def is_terminal(self) -> bool:
        """True once the processor has set PROCESSED or FAILED."""
        return self.status.is_terminal

    def complete(self, failed: bool) -> None:
        """
        Apply the processing outcome.

        Args:
            failed: True sets FAILED, False sets PROCESSED

        Raises:
            InvalidOrderStateError: If the order already has a terminal status
        """
        if self.is_terminal:
            raise InvalidOrderStateError(
                f"Order {self.id} already {self.status.value}",
                order_id=self.id,
                current_status=self.status.value,
            )
        self.status = OrderStatus.FAILED if failed else OrderStatus.PROCESSED

    def revise(self, item: str, amount: float) -> None:
        """
        Overwrite item and amount in place. Status and created_at are untouched.

        Raises:
            InvalidOrderError: If the new values are invalid
        """
        self.item, self.amount = self.validate_fields(item, amount)

    def copy(self) -> "Order":
        """Detached copy; repositories never hand out their stored instance."""
        return replace(self)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize order to dictionary.

        Returns:
            Dictionary with all fields, status as string and created_at as ISO-8601
        """
        return {
            "id": self.id,
            "item": self.item,
            "amount": self.amount,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Order":
        """
        Deserialize order from dictionary produced by to_dict().

        Accepts string values for every field (Redis hashes store strings).

        Raises:
            InvalidOrderError: If the stored values fail validation
            KeyError: If a required field is missing
        """
        created_at = data["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)

        return cls(
            id=int(data["id"]),
            item=data["item"],
            amount=float(data["amount"]),
            status=OrderStatus(data["status"]),
            created_at=created_at,
        )

    def __repr__(self) -> str:
        return (
            f"Order(id={self.id}, item={self.item!r}, amount={self.amount}, "
            f"status={self.status.value})"
        )
