"""
Shared Domain Module

Cross-subdomain concepts. Currently the exception hierarchy only.

This module exports:
    - DomainException: Base exception for all domain errors
    - InvalidOrderError, OrderNotFoundError, InvalidOrderStateError
"""

from .exceptions import (
    DomainException,
    InvalidOrderError,
    InvalidOrderStateError,
    OrderNotFoundError,
)

__all__ = [
    "DomainException",
    "InvalidOrderError",
    "InvalidOrderStateError",
    "OrderNotFoundError",
]
