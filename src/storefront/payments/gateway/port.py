"""Payment gateway port (abstract interface).

Adapters create a payment intent for an order's total and later prove that
a confirmation webhook really came from the provider. Domain code only ever
talks to this interface.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class GatewayError(Exception):
    """The provider rejected the request or could not be reached."""


@dataclass(frozen=True)
class PaymentIntent:
    reference: str
    status: str
    client_secret: str | None = None


@dataclass(frozen=True)
class WebhookEvent:
    """A payment outcome reported by the provider, in storefront terms."""

    order_id: str
    reference: str
    status: str  # succeeded, failed
    failure_reason: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


class PaymentGateway(ABC):
    @abstractmethod
    def create_payment_intent(self, amount_minor: int, currency: str, order_id: str) -> PaymentIntent:
        """Ask the provider to authorize `amount_minor` for the order. Raises GatewayError."""
        ...

    @abstractmethod
    def verify_webhook_signature(self, payload: str, signature: str) -> bool:
        """Check `signature` against the exact request body the provider sent."""
        ...

    @abstractmethod
    def parse_webhook_event(self, payload: str) -> WebhookEvent | None:
        """Translate a verified webhook body. None for event types the storefront ignores.

        Raises GatewayError when the body is not a payment event it understands.
        """
        ...
