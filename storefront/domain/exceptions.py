"""Domain exceptions.

Every error a service raises on purpose inherits from ``StorefrontError``.
The API layer maps each subclass to an HTTP status; anything else is
treated as an internal error.
"""

from typing import Any


class StorefrontError(Exception):
    """Base class for all storefront exceptions."""

    error_code = "ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize storefront error.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional error context.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(StorefrontError):
    """Raised when a request field is missing or malformed."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, details={"field": field} if field else None)
        self.field = field


class NotFoundError(StorefrontError):
    """Raised when a product, category or photo does not exist."""

    error_code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: str | None = None) -> None:
        """Initialize not found error.

        Args:
            resource: Kind of resource, e.g. "Product".
            identifier: Lookup key that failed to resolve.
        """
        super().__init__(
            f"{resource} not found",
            details={"resource": resource, "identifier": identifier},
        )
        self.resource = resource
        self.identifier = identifier


class ExternalServiceError(StorefrontError):
    """Raised when the payment gateway fails or declines a request.

    ``details`` may carry the raw gateway payload; it is logged, never
    returned to the caller.
    """

    error_code = "EXTERNAL_SERVICE_ERROR"

    def __init__(
        self,
        service: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details=details)
        self.service = service
