import hashlib
import hmac
import json
import time
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
import stripe
from storefront.payments.gateway import GatewayError
from storefront.payments.gateway.stripe_adapter import StripeGateway

SECRET = "whsec_test"


def sign(payload: str, timestamp: int | None = None, secret: str = SECRET) -> str:
    """Build a `Stripe-Signature` header the way Stripe does."""
    timestamp = timestamp if timestamp is not None else int(time.time())
    digest = hmac.new(secret.encode(), f"{timestamp}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={digest}"


def intent_event(event_type: str, order_id: str = "order-9", reference: str = "pi_123", **intent) -> str:
    body = {
        "id": "evt_1",
        "type": event_type,
        "data": {"object": {"id": reference, "object": "payment_intent", "metadata": {"order_id": order_id}, **intent}},
    }
    return json.dumps(body, separators=(",", ":"))


@pytest.fixture
def gateway():
    gateway = StripeGateway(api_key="sk_test_123", webhook_secret=SECRET, timeout=3)
    gateway.client = MagicMock()
    return gateway


class TestCreatePaymentIntent:
    def test_sends_order_amount_and_metadata(self, gateway):
        gateway.client.payment_intents.create.return_value = SimpleNamespace(
            id="pi_123", status="requires_payment_method", client_secret="pi_123_secret"
        )

        intent = gateway.create_payment_intent(250000, "INR", "order-9")

        assert intent.reference == "pi_123"
        assert intent.client_secret == "pi_123_secret"
        _, kwargs = gateway.client.payment_intents.create.call_args
        assert kwargs["params"]["amount"] == 250000
        assert kwargs["params"]["currency"] == "inr"
        assert kwargs["params"]["description"] == "Order #order-9"
        assert kwargs["params"]["metadata"] == {"order_id": "order-9"}
        assert kwargs["options"] == {"idempotency_key": "order-order-9"}

    def test_card_error_becomes_gateway_error(self, gateway):
        gateway.client.payment_intents.create.side_effect = stripe.CardError(
            "Your card was declined.", param=None, code="card_declined"
        )

        with pytest.raises(GatewayError, match="declined"):
            gateway.create_payment_intent(100, "INR", "order-9")

    def test_connection_error_becomes_gateway_error(self, gateway):
        gateway.client.payment_intents.create.side_effect = stripe.APIConnectionError("connection reset")

        with pytest.raises(GatewayError, match="reset"):
            gateway.create_payment_intent(100, "INR", "order-9")


class TestWebhookSignature:
    def test_valid_signature_over_compact_body(self, gateway):
        payload = intent_event("payment_intent.succeeded")
        assert gateway.verify_webhook_signature(payload, sign(payload))

    def test_reserialized_body_does_not_verify(self, gateway):
        payload = intent_event("payment_intent.succeeded")
        reserialized = json.dumps(json.loads(payload))
        assert not gateway.verify_webhook_signature(reserialized, sign(payload))

    def test_wrong_secret(self, gateway):
        payload = intent_event("payment_intent.succeeded")
        assert not gateway.verify_webhook_signature(payload, sign(payload, secret="whsec_other"))

    def test_stale_timestamp(self, gateway):
        payload = intent_event("payment_intent.succeeded")
        assert not gateway.verify_webhook_signature(payload, sign(payload, timestamp=int(time.time()) - 3600))

    @pytest.mark.parametrize("signature", ["", "garbage", "t=abc,v1=00"])
    def test_malformed_header(self, gateway, signature):
        assert not gateway.verify_webhook_signature("{}", signature)

    def test_no_secret_configured(self):
        gateway = StripeGateway(api_key="sk_test_123")
        payload = "{}"
        assert not gateway.verify_webhook_signature(payload, sign(payload))


class TestParseWebhookEvent:
    def test_succeeded(self, gateway):
        event = gateway.parse_webhook_event(intent_event("payment_intent.succeeded"))
        assert event.succeeded
        assert event.order_id == "order-9"
        assert event.reference == "pi_123"

    def test_payment_failed_carries_reason(self, gateway):
        payload = intent_event("payment_intent.payment_failed", last_payment_error={"message": "Insufficient funds"})
        event = gateway.parse_webhook_event(payload)
        assert not event.succeeded
        assert event.failure_reason == "Insufficient funds"

    def test_unrelated_event_types_are_skipped(self, gateway):
        assert gateway.parse_webhook_event(intent_event("payment_intent.created")) is None

    def test_missing_order_id(self, gateway):
        payload = json.dumps({"type": "payment_intent.succeeded", "data": {"object": {"id": "pi_1", "metadata": {}}}})
        with pytest.raises(GatewayError):
            gateway.parse_webhook_event(payload)

    def test_not_json(self, gateway):
        with pytest.raises(GatewayError):
            gateway.parse_webhook_event("not json")
