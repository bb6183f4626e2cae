"""Tests for the Braintree gateway facade."""

from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from storefront.infrastructure.config import Settings
from storefront.payments.gateway import PaymentGateway, PaymentGatewayError


def settled_result(amount: str = "35.00") -> SimpleNamespace:
    return SimpleNamespace(
        is_success=True,
        transaction=SimpleNamespace(
            id="txn_abc",
            status="submitted_for_settlement",
            type="sale",
            amount=Decimal(amount),
            currency_iso_code="USD",
            merchant_account_id="storefront",
            processor_response_code="1000",
            processor_response_text="Approved",
            created_at="2026-10-17 12:00:00",
        ),
    )


def declined_result() -> SimpleNamespace:
    return SimpleNamespace(
        is_success=False,
        message="Do Not Honor",
        errors=SimpleNamespace(
            deep_errors=[
                SimpleNamespace(code="91564", attribute="payment_method_nonce", message="Cannot use a payment_method_nonce more than once."),
            ]
        ),
        transaction=None,
    )


@pytest.fixture
def sdk() -> MagicMock:
    return MagicMock()


class TestClientToken:
    """Tests for generate_client_token."""

    async def test_returns_sdk_token(self, sdk):
        sdk.client_token.generate.return_value = "client-token-xyz"

        token = await PaymentGateway(sdk).generate_client_token()

        assert token == "client-token-xyz"

    async def test_sdk_error_becomes_gateway_error(self, sdk):
        sdk.client_token.generate.side_effect = RuntimeError("authentication failed")

        with pytest.raises(PaymentGatewayError) as exc_info:
            await PaymentGateway(sdk).generate_client_token()

        assert exc_info.value.service == "braintree"
        assert "authentication failed" in exc_info.value.details["error"]


class TestSale:
    """Tests for sale."""

    async def test_submits_for_settlement(self, sdk):
        sdk.transaction.sale.return_value = settled_result()

        result = await PaymentGateway(sdk).sale(Decimal("35"), "nonce-1")

        sdk.transaction.sale.assert_called_once_with(
            {
                "amount": "35.00",
                "payment_method_nonce": "nonce-1",
                "options": {"submit_for_settlement": True},
            }
        )
        assert result.transaction_id == "txn_abc"
        assert result.status == "submitted_for_settlement"
        assert result.payload["amount"] == "35.00"
        assert result.payload["processor_response_text"] == "Approved"

    async def test_declined_sale(self, sdk):
        sdk.transaction.sale.return_value = declined_result()

        with pytest.raises(PaymentGatewayError, match="declined") as exc_info:
            await PaymentGateway(sdk).sale(Decimal("10"), "nonce-1")

        assert exc_info.value.details["message"] == "Do Not Honor"
        assert exc_info.value.details["errors"][0]["code"] == "91564"

    async def test_sdk_exception(self, sdk):
        sdk.transaction.sale.side_effect = ConnectionError("timed out")

        with pytest.raises(PaymentGatewayError, match="request failed"):
            await PaymentGateway(sdk).sale(Decimal("10"), "nonce-1")


class TestFromSettings:
    """Tests for building the gateway from settings."""

    def test_unknown_environment(self):
        settings = Settings(braintree_environment="staging", braintree_merchant_id="m")

        with pytest.raises(ValueError, match="Unknown Braintree environment"):
            PaymentGateway.from_settings(settings)
