"""Configurable fake payment gateway for development and testing.

No external calls are made. Tests and the non-production configure endpoint
toggle success/failure, and can add artificial latency to exercise the
dispatcher's timeout.

Webhook bodies are flat JSON: `{"order_id", "reference", "status", "failure_reason"?}`.
"""

import json
import time
from uuid import uuid4

from storefront.payments.gateway.port import GatewayError, PaymentGateway, PaymentIntent, WebhookEvent

TEST_SIGNATURE = "test-signature"


class FakeGateway(PaymentGateway):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Card declined"
        self.latency_seconds: float = 0.0
        self.calls: list[dict] = []

    def configure(
        self,
        should_succeed: bool,
        failure_reason: str = "Card declined",
        latency_seconds: float = 0.0,
    ) -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason
        self.latency_seconds = latency_seconds

    def create_payment_intent(self, amount_minor: int, currency: str, order_id: str) -> PaymentIntent:
        self.calls.append(
            {
                "method": "create_payment_intent",
                "amount_minor": amount_minor,
                "currency": currency,
                "order_id": order_id,
            }
        )
        if self.latency_seconds:
            time.sleep(self.latency_seconds)

        if not self.should_succeed:
            raise GatewayError(self.failure_reason)
        return PaymentIntent(
            reference=f"pi_fake_{uuid4().hex[:16]}",
            status="requires_confirmation",
            client_secret=f"secret_{uuid4().hex[:12]}",
        )

    def verify_webhook_signature(self, payload: str, signature: str) -> bool:  # noqa: ARG002
        return signature == TEST_SIGNATURE

    def parse_webhook_event(self, payload: str) -> WebhookEvent:
        try:
            body = json.loads(payload)
            return WebhookEvent(
                order_id=str(body["order_id"]),
                reference=str(body["reference"]),
                status=str(body["status"]),
                failure_reason=body.get("failure_reason"),
            )
        except (ValueError, KeyError, TypeError) as exc:
            raise GatewayError(f"Malformed webhook body: {exc}") from exc
