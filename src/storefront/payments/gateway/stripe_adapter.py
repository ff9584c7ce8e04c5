"""Stripe adapter built on the stripe-python SDK.

Payment intents carry the order id in their metadata so that webhook events
can be routed back to the order. Webhook signatures are checked by
`stripe.Webhook.construct_event` over the raw request body.
"""

import json

import stripe
import structlog

from storefront.payments.gateway.port import GatewayError, PaymentGateway, PaymentIntent, WebhookEvent

logger = structlog.get_logger(__name__)

SIGNATURE_TOLERANCE_SECONDS = 300

_SUCCEEDED_EVENTS = {"payment_intent.succeeded"}
_FAILED_EVENTS = {"payment_intent.payment_failed", "payment_intent.canceled"}


class StripeGateway(PaymentGateway):
    def __init__(self, api_key: str, webhook_secret: str | None = None, timeout: float = 10.0) -> None:
        self.webhook_secret = webhook_secret
        self.timeout = timeout
        self.client = stripe.StripeClient(api_key, http_client=stripe.RequestsClient(timeout=timeout))

    def create_payment_intent(self, amount_minor: int, currency: str, order_id: str) -> PaymentIntent:
        try:
            intent = self.client.payment_intents.create(
                params={
                    "amount": amount_minor,
                    "currency": currency.lower(),
                    "description": f"Order #{order_id}",
                    "metadata": {"order_id": order_id},
                    "automatic_payment_methods": {"enabled": True},
                },
                options={"idempotency_key": f"order-{order_id}"},
            )
        except stripe.StripeError as exc:
            logger.warning("Stripe rejected payment intent", order_id=order_id, error=exc.user_message or str(exc))
            raise GatewayError(exc.user_message or str(exc)) from exc

        return PaymentIntent(reference=intent.id, status=intent.status, client_secret=intent.client_secret)

    def verify_webhook_signature(self, payload: str, signature: str) -> bool:
        """Check a `Stripe-Signature` header (`t=<ts>,v1=<hmac>`) against the raw body."""
        if not self.webhook_secret or not signature:
            return False
        try:
            stripe.Webhook.construct_event(
                payload, signature, self.webhook_secret, tolerance=SIGNATURE_TOLERANCE_SECONDS
            )
        except (stripe.SignatureVerificationError, ValueError):
            return False
        return True

    def parse_webhook_event(self, payload: str) -> WebhookEvent | None:
        try:
            event = json.loads(payload)
            event_type = event["type"]
            intent = event["data"]["object"]
        except (ValueError, KeyError, TypeError) as exc:
            raise GatewayError(f"Malformed Stripe event: {exc}") from exc

        if event_type in _SUCCEEDED_EVENTS:
            status, failure_reason = "succeeded", None
        elif event_type in _FAILED_EVENTS:
            status = "failed"
            failure_reason = (intent.get("last_payment_error") or {}).get("message") or event_type
        else:
            return None

        order_id = (intent.get("metadata") or {}).get("order_id")
        if not order_id:
            raise GatewayError(f"Stripe event {event.get('id')} carries no order id")
        return WebhookEvent(
            order_id=order_id,
            reference=intent["id"],
            status=status,
            failure_reason=failure_reason,
        )
