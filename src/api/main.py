"""
FastAPI Application Setup

Main entry point for the Order Monitor API application.

Responsibility:
    - FastAPI app initialization
    - Component construction and dispatcher lifecycle (lifespan)
    - Router registration (orders)
    - CORS middleware configuration
    - Global exception handlers
    - Request logging middleware
    - Health check and Prometheus metrics endpoints

Architecture Notes:
    - Part of API Layer (Presentation)
    - Entry point for HTTP server (uvicorn)
    - Centralizes cross-cutting concerns (logging, CORS, error handling)
    - No business logic - pure HTTP orchestration

Contains:
    - create_app() factory function
    - Global exception handlers
    - Request logging middleware
    - Health check endpoint: GET /health
    - Metrics endpoint: GET /metrics

Does NOT contain:
    - Business logic (delegated to Application Layer)
    - Direct storage access (uses Infrastructure Layer via OrderService)
"""

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel

# Import routers
from src.api.routers import orders

# Import shared schemas
from src.api.schemas.common import ErrorResponse

# Application wiring
from src.application.config import AppSettings
from src.application.wiring import AppComponents, build_components

# Import domain exceptions for global handling
from src.domain.shared.exceptions import (
    DomainException,
    InvalidOrderError,
    InvalidOrderStateError,
    OrderNotFoundError,
)
from src.infrastructure.persistence.redis import (
    RedisOrderRepository,
    close_connections,
)
from src.infrastructure.persistence.redis import health_check as redis_health_check

API_VERSION = "0.1.0"

# Configure logger
logger = logging.getLogger(__name__)


# ============================================================================
# RESPONSE MODELS
# ============================================================================


class HealthCheckResponse(BaseModel):
    """
    Health check response model.

    Attributes:
        status: "ok" when the dispatcher is running and the store answers,
            "degraded" otherwise
        version: API version
        timestamp: Unix timestamp of health check
        pool: Worker pool snapshot (size, active, queued, peak, completed, failed)
        store: Order store state ("ok", or "unavailable" when Redis fails PING)
    """

    status: str = "ok"
    version: str = API_VERSION
    timestamp: float
    pool: Dict[str, Any] = {}
    store: str = "ok"


# ============================================================================
# MIDDLEWARE
# ============================================================================


async def request_logging_middleware(request: Request, call_next):
    """
    Request logging middleware.

    Logs all incoming requests with method, path, status code, and duration.

    Logging Format:
        INFO: "Incoming request: POST /orders"
        INFO: "Request completed: POST /orders - 201 - 0.004s"
    """
    logger.info(f"Incoming request: {request.method} {request.url.path}")

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    logger.info(
        f"Request completed: {request.method} {request.url.path} - "
        f"{response.status_code} - {duration:.3f}s"
    )

    return response


# ============================================================================
# EXCEPTION HANDLERS
# ============================================================================


async def domain_exception_handler(request: Request, exc: DomainException):
    """
    Global exception handler for domain layer exceptions.

    Mapping:
        - InvalidOrderError -> 400 Bad Request
        - OrderNotFoundError -> 404 Not Found
        - InvalidOrderStateError -> 409 Conflict
        - Other DomainException -> 400 Bad Request

    Examples:
        >>> raise OrderNotFoundError(42)
        >>> # Returns: 404 {"code": "ORDER_NOT_FOUND", "message": "...", "details": {"order_id": 42}}
    """
    details: Dict[str, Any] = {"exception_type": exc.__class__.__name__}

    if isinstance(exc, OrderNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
        error_code = "ORDER_NOT_FOUND"
        details["order_id"] = exc.order_id
    elif isinstance(exc, InvalidOrderStateError):
        status_code = status.HTTP_409_CONFLICT
        error_code = "INVALID_ORDER_STATE"
        details["order_id"] = exc.order_id
    elif isinstance(exc, InvalidOrderError):
        status_code = status.HTTP_400_BAD_REQUEST
        error_code = "INVALID_ORDER"
        if exc.field_name:
            details["field"] = exc.field_name
    else:
        status_code = status.HTTP_400_BAD_REQUEST
        error_code = exc.__class__.__name__.replace("Error", "").upper()

    error_response = ErrorResponse(
        code=error_code,
        message=exc.message,
        details=details,
    )

    logger.warning(
        f"Domain exception: {exc.__class__.__name__} - {exc.message} - "
        f"Request: {request.method} {request.url.path}"
    )

    return JSONResponse(
        status_code=status_code,
        content=error_response.model_dump(),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Request body/path validation errors -> 400 Bad Request.

    Only loc, msg and type of each pydantic error are returned; the raw
    error context can hold non-serializable exception objects.
    """
    errors = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]

    error_response = ErrorResponse(
        code="VALIDATION_ERROR",
        message="Request validation failed",
        details={"errors": errors},
    )

    logger.warning(
        f"Validation error: {len(errors)} error(s) - "
        f"Request: {request.method} {request.url.path}"
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_response.model_dump(),
    )


async def generic_exception_handler(request: Request, exc: Exception):
    """
    Global exception handler for unexpected exceptions.

    Catches all unhandled exceptions and converts to 500 Internal Server Error.
    Logs full stack trace for debugging.
    """
    error_response = ErrorResponse(
        code="INTERNAL_SERVER_ERROR",
        message="An unexpected error occurred",
        details={"error": str(exc), "type": exc.__class__.__name__},
    )

    logger.error(
        f"Unexpected error: {exc.__class__.__name__} - {str(exc)} - "
        f"Request: {request.method} {request.url.path}",
        exc_info=True,
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response.model_dump(),
    )


# ============================================================================
# LIFESPAN
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Build components (unless injected) and run the dispatcher for the
    lifetime of the app.

    Shutdown drains the backlog by default; with
    ORDER_CANCEL_RUNNING_ON_SHUTDOWN=true in-flight delays are interrupted
    and queued orders stay RECEIVED.
    """
    settings: AppSettings = app.state.settings
    if app.state.components is None:
        app.state.components = build_components(settings)

    components: AppComponents = app.state.components
    components.dispatcher.start()
    logger.info("Order dispatcher running")

    try:
        yield
    finally:
        components.dispatcher.stop(
            wait=True,
            cancel_running=settings.cancel_running_on_shutdown,
        )
        if settings.store_backend == "redis":
            close_connections()
        logger.info("Application shutdown complete")


# ============================================================================
# APP FACTORY
# ============================================================================


def create_app(
    settings: Optional[AppSettings] = None,
    components: Optional[AppComponents] = None,
) -> FastAPI:
    """
    FastAPI application factory.

    Configuration:
        - Title: Order Monitor API
        - CORS: Allow all origins (development mode)
        - Logging: LOG_LEVEL with structured format
        - Routers: /orders
        - Health: GET /health, Metrics: GET /metrics

    Args:
        settings: Application settings (defaults to AppSettings.from_env())
        components: Pre-built components (tests inject stub randomness and
            zero delays this way); built in the lifespan when omitted

    Usage:
        >>> app = create_app()
        >>> # uvicorn src.api.main:app --reload
    """
    if settings is None:
        settings = components.settings if components is not None else AppSettings.from_env()

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="Order Monitor API",
        version=API_VERSION,
        description=(
            "Order intake with asynchronous, bounded-concurrency processing. "
            "Submit orders, poll their status and read processing metrics."
        ),
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.components = components

    # Add CORS middleware (allow all origins for development)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Production: restrict to specific origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add request logging middleware
    app.middleware("http")(request_logging_middleware)

    # Register global exception handlers
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(orders.router)

    @app.get(
        "/health",
        response_model=HealthCheckResponse,
        status_code=status.HTTP_200_OK,
        summary="Health check endpoint",
        description="Status, version, worker pool snapshot and order store state",
        tags=["health"],
    )
    def health_check(request: Request) -> HealthCheckResponse:
        """
        Examples:
            >>> curl http://localhost:8000/health
            {"status": "ok", "version": "0.1.0", "timestamp": 1704976800.1,
             "pool": {"pool_size": 4, "active": 1, "queued": 0, ...}}
        """
        current: Optional[AppComponents] = request.app.state.components
        if current is None:
            return HealthCheckResponse(status="starting", timestamp=time.time())

        snapshot = current.dispatcher.snapshot()
        store = "ok"
        if isinstance(current.repository, RedisOrderRepository):
            store = "ok" if redis_health_check(current.repository.redis) else "unavailable"

        return HealthCheckResponse(
            status="ok" if snapshot.running and store == "ok" else "degraded",
            timestamp=time.time(),
            pool=snapshot.to_dict(),
            store=store,
        )

    @app.get(
        "/metrics",
        summary="Prometheus metrics",
        description="Counters and processing duration histogram in Prometheus text format",
        tags=["health"],
        responses={404: {"model": ErrorResponse, "description": "Metrics export disabled"}},
    )
    async def metrics(request: Request) -> Response:
        current: Optional[AppComponents] = request.app.state.components
        sink = current.metrics if current is not None else None
        if sink is None or not hasattr(sink, "exposition"):
            error_response = ErrorResponse(
                code="METRICS_DISABLED",
                message="Prometheus export requires METRICS_BACKEND=prometheus",
            )
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND,
                content=error_response.model_dump(),
            )
        return Response(content=sink.exposition(), media_type=sink.content_type)

    logger.info("FastAPI application created successfully")
    logger.info("Registered routers: /orders")
    logger.info("Health check available at: GET /health")

    return app


# ============================================================================
# APP INSTANCE (for uvicorn)
# ============================================================================

# Usage: uvicorn src.api.main:app --reload
app = create_app()
