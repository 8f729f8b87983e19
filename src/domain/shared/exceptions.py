"""
Domain Layer Exceptions

Exception hierarchy for the order domain. All domain errors inherit from
DomainException so the API layer can translate them in one place.

Responsibility:
    - Base exception class for domain errors
    - Validation, lookup and state-transition failures for orders
    - Clear separation from framework exceptions

Architecture Notes:
    - Part of Shared Domain (used by entities, repositories and services)
    - API Layer maps each subclass to an HTTP status code (see src.api.main)
    - Infrastructure errors (RedisError etc.) are NOT wrapped here
"""


class DomainException(Exception):
    """
    Base exception for all domain layer errors.

    Usage:
        - Catch this in Application Layer to handle all domain errors
        - API Layer converts to appropriate HTTP status codes

    Examples:
        >>> raise DomainException("Business rule violation")
    """

    def __init__(self, message: str) -> None:
        """
        Initialize domain exception with error message.

        Args:
            message: Human-readable error description
        """
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        """String representation of the exception."""
        return f"{self.__class__.__name__}: {self.message}"

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return f"{self.__class__.__name__}(message={self.message!r})"


class InvalidOrderError(DomainException):
    """
    Raised when order fields violate business rules.

    This exception is raised when:
    - item is not a string, empty or whitespace only
    - amount is not a number, not finite, or not strictly positive

    Surfaced to HTTP callers as 400 Bad Request and never retried.

    Examples:
        >>> raise InvalidOrderError("item must not be blank", field_name="item")
        >>> raise InvalidOrderError("amount must be > 0, got -5", field_name="amount")
    """

    def __init__(self, message: str, field_name: str | None = None) -> None:
        """
        Initialize order validation error.

        Args:
            message: Error description
            field_name: Name of field that caused error (optional)
        """
        self.field_name = field_name
        super().__init__(message)


class OrderNotFoundError(DomainException):
    """
    Raised when no order exists for the requested id.

    Used by:
    - OrderService.update_order() and OrderService.get_order()
    - OrderRepository.update() when the record is missing

    Attributes:
        order_id: Identifier that was looked up

    Examples:
        >>> raise OrderNotFoundError(42)
    """

    def __init__(self, order_id: int, message: str | None = None) -> None:
        """
        Initialize not-found error.

        Args:
            order_id: Identifier that was looked up
            message: Optional override of the default message
        """
        self.order_id = order_id
        super().__init__(message or f"Order {order_id} not found")


class InvalidOrderStateError(DomainException):
    """
    Raised when a status transition is not allowed.

    Orders move RECEIVED -> PROCESSED or RECEIVED -> FAILED exactly once.
    Any attempt to leave a terminal status raises this error.

    Attributes:
        order_id: Order whose transition was rejected
        current_status: Status value at the time of the attempt
    """

    def __init__(
        self,
        message: str,
        order_id: int | None = None,
        current_status: str | None = None,
    ) -> None:
        self.order_id = order_id
        self.current_status = current_status
        super().__init__(message)
