"""
API Layer - FastAPI Presentation Layer

Responsibility:
    HTTP interface for the application. Handles requests and responses and
    hands orders to the Application Layer. No business logic.

Contains:
    - FastAPI routers (orders)
    - Request/Response models (Pydantic)
    - App factory with lifespan, exception handlers and middleware
    - Health and Prometheus metrics endpoints

Does NOT contain:
    - Business logic (belongs to Domain layer)
    - Processing and dispatch (belongs to Application layer)
    - Storage operations (belongs to Infrastructure layer)
"""
