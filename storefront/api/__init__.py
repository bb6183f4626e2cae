"""API routers for the storefront."""

from storefront.api.health import router as health_router
from storefront.api.payments import router as payments_router
from storefront.api.products import router as products_router

__all__ = ["health_router", "payments_router", "products_router"]
