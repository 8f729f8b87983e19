"""
Common API Schemas

Shared Pydantic models used across all API routers.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Standard error response model for all API errors.

    Provides consistent error structure across all endpoints.

    Attributes:
        code: Machine-readable error code (e.g., "ORDER_NOT_FOUND", "INVALID_ORDER")
        message: Human-readable error message
        details: Optional additional error context (validation errors, order id)
    """

    code: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error message")
    details: Optional[Dict[str, Any]] = Field(
        default=None, description="Additional error context"
    )

    class Config:
        json_schema_extra = {
            "example": {
                "code": "ORDER_NOT_FOUND",
                "message": "Order 42 not found",
                "details": {"order_id": 42},
            }
        }
