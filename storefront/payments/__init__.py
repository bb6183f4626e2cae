"""Checkout through Braintree and the orders it produces."""

from storefront.payments.gateway import PaymentGateway, PaymentGatewayError, SaleResult
from storefront.payments.models import Order
from storefront.payments.service import PaymentBridge, cart_total

__all__ = [
    "Order",
    "PaymentBridge",
    "PaymentGateway",
    "PaymentGatewayError",
    "SaleResult",
    "cart_total",
]
