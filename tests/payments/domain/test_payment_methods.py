import pytest
from storefront.payments.dispatch import GatewayPayment, MockPayment, canonical_tag, resolve_payment_method
from storefront.shared.errors import InvalidArgument


@pytest.mark.parametrize(
    "tag, expected",
    [
        (None, "gateway"),
        ("", "gateway"),
        ("gateway", "gateway"),
        ("stripe", "gateway"),
        (" Stripe ", "gateway"),
        ("mock", "mock"),
        ("MOCK", "mock"),
    ],
)
def test_canonical_tags(tag, expected):
    assert canonical_tag(tag) == expected


@pytest.mark.parametrize("tag", ["paypal", "cod", "cheque"])
def test_unknown_tags_are_rejected(tag):
    with pytest.raises(InvalidArgument) as exc:
        canonical_tag(tag)
    assert exc.value.details["allowed"] == ["gateway", "mock"]


def test_resolution_picks_variant():
    assert isinstance(resolve_payment_method("mock"), MockPayment)
    assert isinstance(resolve_payment_method("stripe"), GatewayPayment)
