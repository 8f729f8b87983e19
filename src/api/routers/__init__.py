"""
API Routers Package

Contains all FastAPI routers grouped by functionality.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Routers are thin wrappers around Application Layer services
    - All routers follow dependency injection pattern

Available Routers:
    - orders_router: Order submission, update, lookup and stats
"""

from .orders import router as orders_router

__all__ = ["orders_router"]
