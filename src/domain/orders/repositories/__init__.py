"""Repository interfaces for the orders subdomain."""

from .order_repository import OrderRepositoryProtocol

__all__ = ["OrderRepositoryProtocol"]
