"""Test doubles."""

from decimal import Decimal

from storefront.payments.gateway import PaymentGatewayError, SaleResult


class FakePaymentGateway:
    """In-memory stand-in for ``PaymentGateway``.

    Records every sale; can be told to decline sales or fail token requests.
    """

    def __init__(self, decline: bool = False, fail_token: bool = False) -> None:
        self.decline = decline
        self.fail_token = fail_token
        self.sales: list[tuple[Decimal, str]] = []

    async def generate_client_token(self) -> str:
        if self.fail_token:
            raise PaymentGatewayError(
                "Failed to generate client token",
                details={"error": "Authentication failed for merchant"},
            )
        return "fake-client-token"

    async def sale(self, amount: Decimal, nonce: str) -> SaleResult:
        self.sales.append((amount, nonce))
        if self.decline:
            raise PaymentGatewayError(
                "Payment was declined",
                details={"message": "Do Not Honor", "processor_response_code": "2000"},
            )
        transaction_id = f"txn_{len(self.sales)}"
        amount_text = str(amount.quantize(Decimal("0.01")))
        return SaleResult(
            transaction_id=transaction_id,
            status="submitted_for_settlement",
            amount=amount_text,
            payload={
                "id": transaction_id,
                "status": "submitted_for_settlement",
                "amount": amount_text,
            },
        )
