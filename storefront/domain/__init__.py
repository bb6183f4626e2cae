"""Domain layer: error taxonomy shared by every service."""

from storefront.domain.exceptions import (
    ExternalServiceError,
    NotFoundError,
    StorefrontError,
    ValidationError,
)

__all__ = [
    "ExternalServiceError",
    "NotFoundError",
    "StorefrontError",
    "ValidationError",
]
