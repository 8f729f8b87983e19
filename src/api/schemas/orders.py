"""
Order API Schemas

Pydantic request/response models for the /orders endpoints.

Responsibility:
    - Validate request bodies (non-blank item, positive amount)
    - Render orders and stats with the camelCase field names clients use
      (createdAt, totalRequests)
    - Convert domain objects to HTTP models (from_entity / from_stats)

Architecture Notes:
    - Part of API Layer (Presentation)
    - Validation failures become 400 responses (see api.main handlers)
"""

import math
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.application.models import OrderStats
from src.domain.orders.entities.order import Order, OrderStatus


class OrderRequest(BaseModel):
    """
    Body of POST /orders and PUT /orders/{id}.

    Attributes:
        item: Item description, must contain a non-whitespace character
        amount: Strictly positive JSON number; booleans and numeric strings are rejected
    """

    item: str = Field(min_length=1, description="Item description (non-empty)")
    amount: float = Field(
        gt=0, strict=True, description="Order amount, strictly positive (JSON number)"
    )

    @field_validator("item")
    @classmethod
    def item_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("item must not be blank")
        return v

    @field_validator("amount")
    @classmethod
    def amount_is_finite(cls, v: float) -> float:
        if not math.isfinite(v):
            raise ValueError("amount must be a finite number")
        return v

    class Config:
        json_schema_extra = {
            "example": {
                "item": "widget",
                "amount": 9.99,
            }
        }


class OrderResponse(BaseModel):
    """
    Order as returned by every /orders endpoint.

    created_at is serialized as createdAt (ISO-8601, UTC).
    """

    id: int = Field(description="Order id")
    item: str = Field(description="Item description")
    amount: float = Field(description="Order amount")
    status: OrderStatus = Field(description="RECEIVED, PROCESSED or FAILED")
    created_at: datetime = Field(
        alias="createdAt", description="Creation timestamp, never changes"
    )

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "item": "widget",
                "amount": 9.99,
                "status": "RECEIVED",
                "createdAt": "2025-01-15T10:30:00Z",
            }
        }

    @classmethod
    def from_entity(cls, order: Order) -> "OrderResponse":
        return cls(
            id=order.id,
            item=order.item,
            amount=order.amount,
            status=order.status,
            created_at=order.created_at,
        )


class StatsResponse(BaseModel):
    """Body of GET /orders/stats."""

    total_requests: int = Field(
        alias="totalRequests", ge=0, description="Orders received since startup"
    )
    timestamp: datetime = Field(description="Time the stats were read (UTC)")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "totalRequests": 42,
                "timestamp": "2025-01-15T10:31:00Z",
            }
        }

    @classmethod
    def from_stats(cls, stats: OrderStats) -> "StatsResponse":
        return cls(total_requests=stats.total_received, timestamp=stats.timestamp)
