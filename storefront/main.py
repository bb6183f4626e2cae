"""Storefront API main application module.

This module initializes the FastAPI application and configures
middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.health import router as health_router
from storefront.api.middleware import setup_middleware
from storefront.api.payments import router as payments_router
from storefront.api.products import router as products_router
from storefront.infrastructure.config import settings
from storefront.infrastructure.database import engine
from storefront.infrastructure.logging import configure_logging
from storefront.payments.gateway import PaymentGateway

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    # Startup
    configure_logging()
    logger.info(
        "Starting Storefront API",
        version=settings.api_version,
        debug=settings.debug,
    )

    if settings.braintree_merchant_id:
        app.state.payment_gateway = PaymentGateway.from_settings(settings)
        logger.info(
            "Payment gateway configured",
            environment=settings.braintree_environment,
        )
    else:
        app.state.payment_gateway = None
        logger.warning("Braintree credentials missing, payments disabled")

    yield

    # Shutdown
    app.state.payment_gateway = None
    await engine.dispose()
    logger.info("Shutting down Storefront API")


app = FastAPI(
    title="Storefront API",
    description="Product catalog and checkout for the storefront",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware (must be added before custom middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Request ID correlation and error handlers
setup_middleware(app)

# Include routers
app.include_router(health_router, tags=["Health"])
app.include_router(products_router)
app.include_router(payments_router)
