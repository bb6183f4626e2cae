"""Payment bridge.

Hands checkout to the payment gateway and records an Order once the
gateway has settled the sale.
"""

from decimal import Decimal, InvalidOperation
from typing import Any

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.domain.exceptions import ValidationError
from storefront.payments.gateway import PaymentGateway
from storefront.payments.models import Order

logger = structlog.get_logger()


def cart_total(cart: list[dict[str, Any]]) -> Decimal:
    """Sum price times quantity over the cart lines.

    Lines without a quantity count once.

    Raises:
        ValidationError: If a line has no usable price or quantity.
    """
    total = Decimal("0")
    for index, line in enumerate(cart):
        try:
            price = Decimal(str(line["price"]))
            quantity = line.get("quantity")
            quantity = 1 if quantity is None else int(quantity)
        except (KeyError, TypeError, ValueError, InvalidOperation):
            raise ValidationError(
                f"Cart line {index} must have a numeric price and quantity",
                field="cart",
            ) from None
        if price < 0 or quantity < 1:
            raise ValidationError(
                f"Cart line {index} has a negative price or non-positive quantity",
                field="cart",
            )
        total += price * quantity
    return total


class PaymentBridge:
    """Checkout against the payment gateway.

    Resubmitting the same nonce and cart is not deduplicated: each sale the
    gateway accepts yields its own Order.
    """

    def __init__(self, session: AsyncSession, gateway: PaymentGateway) -> None:
        """Initialize bridge.

        Args:
            session: Async SQLAlchemy session used to persist orders.
            gateway: Payment gateway client.
        """
        self.session = session
        self.gateway = gateway

    async def issue_client_token(self) -> str:
        """Get a client token for the drop-in payment form."""
        return await self.gateway.generate_client_token()

    async def submit_payment(
        self,
        nonce: str | None,
        cart: list[dict[str, Any]],
        buyer_id: str,
    ) -> Order:
        """Charge the cart and record the order.

        Args:
            nonce: Payment method nonce from the client.
            cart: Line items with product reference, price and quantity.
            buyer_id: Authenticated buyer.

        Returns:
            The created order.

        Raises:
            ValidationError: If the nonce or cart is missing or malformed.
            PaymentGatewayError: If the gateway fails or declines the sale.
        """
        if not nonce:
            raise ValidationError("Payment nonce is required", field="nonce")
        if not cart:
            raise ValidationError("Cart is empty", field="cart")

        total = cart_total(cart)
        sale = await self.gateway.sale(total, nonce)

        order = Order(products=cart, payment=sale.payload, buyer_id=buyer_id)
        self.session.add(order)
        await self.session.flush()

        logger.info(
            "Payment settled",
            order_id=order.id,
            buyer_id=buyer_id,
            transaction_id=sale.transaction_id,
            amount=str(total),
            line_count=len(cart),
        )
        return order
