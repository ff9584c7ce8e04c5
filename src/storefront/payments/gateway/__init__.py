"""Payment gateway factory.

get_gateway() builds the adapter named by PAYMENT_GATEWAY on first use:
- FakeGateway ("fake", default) for development and testing
- StripeGateway ("stripe") for production
"""

from storefront.config import get_settings
from storefront.payments.gateway.fake_adapter import FakeGateway
from storefront.payments.gateway.port import GatewayError, PaymentGateway, PaymentIntent, WebhookEvent
from storefront.payments.gateway.stripe_adapter import StripeGateway

__all__ = [
    "GatewayError",
    "PaymentGateway",
    "PaymentIntent",
    "WebhookEvent",
    "get_gateway",
    "reset_gateway",
    "set_gateway",
]

_current_gateway: PaymentGateway | None = None


def _build_gateway() -> PaymentGateway:
    settings = get_settings()
    if settings.payment_gateway == "stripe":
        if not settings.payment_gateway_api_key:
            raise RuntimeError("PAYMENT_GATEWAY=stripe requires PAYMENT_GATEWAY_API_KEY")
        return StripeGateway(
            api_key=settings.payment_gateway_api_key,
            webhook_secret=settings.payment_gateway_webhook_secret,
            timeout=settings.payment_gateway_timeout,
        )
    return FakeGateway()


def get_gateway() -> PaymentGateway:
    global _current_gateway
    if _current_gateway is None:
        _current_gateway = _build_gateway()
    return _current_gateway


def set_gateway(gateway: PaymentGateway) -> None:
    """Override the active payment gateway (useful for tests)."""
    global _current_gateway
    _current_gateway = gateway


def reset_gateway() -> None:
    global _current_gateway
    _current_gateway = None
