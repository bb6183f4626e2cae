"""Braintree gateway client.

Wraps the blocking Braintree SDK in awaitable calls. One ``PaymentGateway``
is built at application start-up and handed to whoever needs it.
"""

import asyncio
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

import braintree
import structlog

from storefront.domain.exceptions import ExternalServiceError
from storefront.infrastructure.config import Settings

logger = structlog.get_logger()

SERVICE_NAME = "braintree"

ENVIRONMENTS = {
    "sandbox": braintree.Environment.Sandbox,
    "production": braintree.Environment.Production,
}


class PaymentGatewayError(ExternalServiceError):
    """Error from a payment gateway call."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(SERVICE_NAME, message, details=details)


@dataclass
class SaleResult:
    """A settled sale as reported by the gateway."""

    transaction_id: str
    status: str
    amount: str
    payload: dict[str, Any] = field(default_factory=dict)


def _transaction_payload(transaction: Any) -> dict[str, Any]:
    """Extract the JSON-safe part of a Braintree transaction."""
    return {
        "id": transaction.id,
        "status": transaction.status,
        "type": getattr(transaction, "type", None),
        "amount": str(transaction.amount),
        "currency_iso_code": getattr(transaction, "currency_iso_code", None),
        "merchant_account_id": getattr(transaction, "merchant_account_id", None),
        "processor_response_code": getattr(transaction, "processor_response_code", None),
        "processor_response_text": getattr(transaction, "processor_response_text", None),
        "created_at": str(getattr(transaction, "created_at", "") or ""),
    }


def _error_details(result: Any) -> dict[str, Any]:
    errors = getattr(result, "errors", None)
    deep_errors = getattr(errors, "deep_errors", None) or []
    details: dict[str, Any] = {
        "errors": [
            {"code": error.code, "attribute": error.attribute, "message": error.message}
            for error in deep_errors
        ],
    }
    transaction = getattr(result, "transaction", None)
    if transaction is not None:
        details["transaction"] = _transaction_payload(transaction)
    return details


class PaymentGateway:
    """Async facade over the Braintree SDK.

    Example usage:
        gateway = PaymentGateway.from_settings(settings)
        token = await gateway.generate_client_token()
        sale = await gateway.sale(Decimal("35.00"), nonce)
    """

    def __init__(self, sdk: braintree.BraintreeGateway) -> None:
        """Initialize with a configured SDK gateway.

        Args:
            sdk: Braintree SDK gateway.
        """
        self._sdk = sdk

    @classmethod
    def from_settings(cls, settings: Settings) -> "PaymentGateway":
        """Build a gateway from application settings."""
        environment = ENVIRONMENTS.get(settings.braintree_environment.lower())
        if environment is None:
            raise ValueError(
                f"Unknown Braintree environment: {settings.braintree_environment}"
            )
        sdk = braintree.BraintreeGateway(
            braintree.Configuration(
                environment=environment,
                merchant_id=settings.braintree_merchant_id,
                public_key=settings.braintree_public_key,
                private_key=settings.braintree_private_key,
            )
        )
        return cls(sdk)

    async def generate_client_token(self) -> str:
        """Request a one-time client token.

        Raises:
            PaymentGatewayError: If the gateway call fails.
        """
        try:
            return await asyncio.to_thread(self._sdk.client_token.generate)
        except Exception as e:
            logger.error("Client token generation failed", error=str(e))
            raise PaymentGatewayError(
                "Failed to generate client token",
                details={"error": str(e)},
            ) from e

    async def sale(self, amount: Decimal, nonce: str) -> SaleResult:
        """Submit a sale for immediate settlement.

        Args:
            amount: Total to charge.
            nonce: Payment method nonce from the client.

        Returns:
            The settled sale.

        Raises:
            PaymentGatewayError: If the call fails or the sale is declined.
        """
        request = {
            "amount": str(amount.quantize(Decimal("0.01"))),
            "payment_method_nonce": nonce,
            "options": {"submit_for_settlement": True},
        }
        try:
            result = await asyncio.to_thread(self._sdk.transaction.sale, request)
        except Exception as e:
            logger.error("Sale request failed", amount=request["amount"], error=str(e))
            raise PaymentGatewayError(
                "Payment gateway request failed",
                details={"error": str(e)},
            ) from e

        if not result.is_success:
            logger.warning(
                "Payment declined",
                amount=request["amount"],
                reason=getattr(result, "message", None),
            )
            raise PaymentGatewayError(
                "Payment was declined",
                details={"message": getattr(result, "message", None), **_error_details(result)},
            )

        payload = _transaction_payload(result.transaction)
        return SaleResult(
            transaction_id=payload["id"],
            status=payload["status"],
            amount=payload["amount"],
            payload=payload,
        )
