"""
API Schemas Package

Contains Pydantic models for the API Layer.
"""

from src.api.schemas.common import ErrorResponse
from src.api.schemas.orders import OrderRequest, OrderResponse, StatsResponse

__all__ = ["ErrorResponse", "OrderRequest", "OrderResponse", "StatsResponse"]
