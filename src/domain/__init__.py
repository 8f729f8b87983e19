"""
Domain Layer - Core Business Logic

Order entity, status lifecycle, repository contract and domain exceptions.
Framework-independent and highly testable.

Architecture:
    - Clean Architecture: Domain Layer is the center, no external dependencies
    - Dependency Inversion: Domain defines interfaces, Infrastructure implements

Subdomains:
    - orders: Order entity and repository Protocol
    - shared: Exception hierarchy

Usage:
    >>> from src.domain import Order, OrderStatus, DomainException
"""

from .orders import Order, OrderRepositoryProtocol, OrderStatus
from .shared import (
    DomainException,
    InvalidOrderError,
    InvalidOrderStateError,
    OrderNotFoundError,
)
