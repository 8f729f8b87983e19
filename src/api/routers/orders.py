"""
API Router for Orders

Responsibility:
    HTTP interface for submitting, updating and reading orders, plus the
    stats query. Thin wrappers around OrderService.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Depends on Application Layer (OrderService) through app.state
    - No business logic - pure HTTP concerns
    - Handlers are plain functions: service calls block (Redis I/O), so
      FastAPI runs them in its threadpool instead of on the event loop
    - Domain exceptions propagate to the global handlers in api.main
      (OrderNotFoundError -> 404, InvalidOrderError -> 400)

Contains:
    - POST /orders - Submit an order (fire-and-forget processing)
    - GET /orders/stats - Total orders received
    - GET /orders/{order_id} - Read one order
    - PUT /orders/{order_id} - Overwrite item and amount

Does NOT contain:
    - Processing (worker threads owned by the dispatcher)
    - Object construction (application.wiring)
"""

import logging

from fastapi import APIRouter, Depends, Path, Request, status

from src.api.schemas.common import ErrorResponse
from src.api.schemas.orders import OrderRequest, OrderResponse, StatsResponse
from src.application.services.order_service import OrderService

# Configure logger
logger = logging.getLogger(__name__)


# ============================================================================
# ROUTER CONFIGURATION
# ============================================================================


router = APIRouter(
    prefix="/orders",
    tags=["orders"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - Invalid order body"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    },
)


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================


def get_order_service(request: Request) -> OrderService:
    """
    Dependency injection for OrderService.

    The service is built once by create_app() and stored on app.state, so
    every request shares one repository, metrics sink and dispatcher.
    """
    return request.app.state.components.service


# ============================================================================
# ENDPOINTS
# ============================================================================


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=OrderResponse,
    response_model_by_alias=True,
    summary="Submit an order",
    description=(
        "Persists the order with status RECEIVED and schedules asynchronous "
        "processing. Returns immediately; poll GET /orders/{id} for the outcome."
    ),
)
def create_order(
    body: OrderRequest,
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    order = service.submit(body.item, body.amount)
    return OrderResponse.from_entity(order)


# Declared before /{order_id} so "stats" is not parsed as an id
@router.get(
    "/stats",
    response_model=StatsResponse,
    response_model_by_alias=True,
    summary="Order statistics",
    description="Total number of orders received since startup.",
)
def get_stats(
    service: OrderService = Depends(get_order_service),
) -> StatsResponse:
    return StatsResponse.from_stats(service.stats())


@router.get(
    "/{order_id}",
    response_model=OrderResponse,
    response_model_by_alias=True,
    summary="Get an order",
    responses={404: {"model": ErrorResponse, "description": "Not Found - Unknown order id"}},
)
def get_order(
    order_id: int = Path(..., description="Order id"),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    return OrderResponse.from_entity(service.get_order(order_id))


@router.put(
    "/{order_id}",
    response_model=OrderResponse,
    response_model_by_alias=True,
    summary="Update an order",
    description="Overwrites item and amount. Status and createdAt are preserved.",
    responses={404: {"model": ErrorResponse, "description": "Not Found - Unknown order id"}},
)
def update_order(
    body: OrderRequest,
    order_id: int = Path(..., description="Order id"),
    service: OrderService = Depends(get_order_service),
) -> OrderResponse:
    order = service.update_order(order_id, body.item, body.amount)
    return OrderResponse.from_entity(order)
