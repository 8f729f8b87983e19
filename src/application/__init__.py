"""
Application Layer - Use Cases and Orchestration

Responsibility:
    Coordinates the flow of data between API and Domain layers.
    Runs order processing asynchronously on a bounded worker pool.

Contains:
    - Configuration objects (config.py)
    - Ports (MetricsSinkProtocol)
    - OrderService and OrderProcessor (services)
    - BoundedWorkerPool and OrderDispatcher (dispatch)
    - Explicit component wiring (wiring.py)

Does NOT contain:
    - Domain business rules (belongs to Domain layer)
    - HTTP handling (belongs to API layer)
    - Infrastructure details (belongs to Infrastructure layer)
"""
