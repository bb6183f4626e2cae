"""Payment API endpoints.

Provides endpoints for Braintree checkout:
- GET /braintree/token - client token for the payment form
- POST /braintree/payment - charge the cart and record the order
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.auth import SignedInUser
from storefront.api.schemas import (
    ClientTokenResponse,
    ErrorResponse,
    PaymentRequest,
    PaymentResponse,
)
from storefront.domain.exceptions import ExternalServiceError
from storefront.infrastructure.database import get_session
from storefront.payments.gateway import SERVICE_NAME, PaymentGateway
from storefront.payments.service import PaymentBridge

router = APIRouter(prefix="/api/v1/product/braintree", tags=["Payments"])


# ============================================================================
# Dependencies
# ============================================================================


def get_payment_gateway(request: Request) -> PaymentGateway:
    """Get the gateway client built at start-up.

    Raises:
        ExternalServiceError: If no gateway is configured.
    """
    gateway = getattr(request.app.state, "payment_gateway", None)
    if gateway is None:
        raise ExternalServiceError(SERVICE_NAME, "Payment gateway is not configured")
    return gateway


def get_payment_bridge(
    session: Annotated[AsyncSession, Depends(get_session)],
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
) -> PaymentBridge:
    """Get payment bridge."""
    return PaymentBridge(session, gateway)


BridgeDep = Annotated[PaymentBridge, Depends(get_payment_bridge)]


# ============================================================================
# Endpoints
# ============================================================================


@router.get(
    "/token",
    response_model=ClientTokenResponse,
    responses={502: {"model": ErrorResponse}},
    summary="Get client token",
)
async def get_client_token(bridge: BridgeDep) -> ClientTokenResponse:
    """Issue a one-time client token for the drop-in payment form."""
    token = await bridge.issue_client_token()
    return ClientTokenResponse(client_token=token)


@router.post(
    "/payment",
    response_model=PaymentResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
    summary="Submit payment",
)
async def submit_payment(
    body: PaymentRequest,
    user: SignedInUser,
    bridge: BridgeDep,
) -> PaymentResponse:
    """Charge the cart and record an order for the signed-in buyer."""
    cart = [item.model_dump(mode="json") for item in body.cart]
    order = await bridge.submit_payment(body.nonce, cart, buyer_id=user.id)
    await bridge.session.commit()
    return PaymentResponse(order_id=order.id)
