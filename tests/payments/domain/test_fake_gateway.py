import pytest
from storefront.payments.gateway import GatewayError, get_gateway, reset_gateway, set_gateway
from storefront.payments.gateway.fake_adapter import TEST_SIGNATURE, FakeGateway


def test_success_returns_intent():
    gateway = FakeGateway()

    intent = gateway.create_payment_intent(200000, "INR", "order-1")

    assert intent.reference.startswith("pi_fake_")
    assert intent.client_secret
    assert gateway.calls[0]["amount_minor"] == 200000


def test_configured_failure_raises():
    gateway = FakeGateway()
    gateway.configure(should_succeed=False, failure_reason="Insufficient funds")

    with pytest.raises(GatewayError, match="Insufficient funds"):
        gateway.create_payment_intent(100, "INR", "order-1")
    assert len(gateway.calls) == 1


def test_signature_check():
    gateway = FakeGateway()
    assert gateway.verify_webhook_signature("{}", TEST_SIGNATURE)
    assert not gateway.verify_webhook_signature("{}", "forged")


def test_factory_defaults_to_fake_and_can_be_overridden():
    reset_gateway()
    assert isinstance(get_gateway(), FakeGateway)
    assert get_gateway() is get_gateway()

    replacement = FakeGateway()
    set_gateway(replacement)
    assert get_gateway() is replacement


def test_stripe_requires_api_key(monkeypatch):
    monkeypatch.setenv("PAYMENT_GATEWAY", "stripe")
    monkeypatch.delenv("PAYMENT_GATEWAY_API_KEY", raising=False)
    reset_gateway()

    with pytest.raises(RuntimeError):
        get_gateway()


def test_webhook_body_is_parsed():
    event = FakeGateway().parse_webhook_event('{"order_id":"o-1","reference":"pi_fake_1","status":"succeeded"}')
    assert event.succeeded
    assert event.order_id == "o-1"


def test_malformed_webhook_body():
    with pytest.raises(GatewayError):
        FakeGateway().parse_webhook_event('{"order_id": "o-1"}')
