"""Money helpers. Amounts are integer minor units (paise, cents) everywhere."""

from protean.exceptions import ValidationError

VALID_CURRENCIES = frozenset(
    {
        "INR",
        "USD",
        "EUR",
        "GBP",
        "JPY",
        "CAD",
        "AUD",
        "SGD",
        "AED",
    }
)


def normalize_currency(code: str) -> str:
    normalized = (code or "").strip().upper()
    if normalized not in VALID_CURRENCIES:
        raise ValidationError({"currency": [f"Unsupported currency: {code}"]})
    return normalized


def line_total(unit_price_cents: int, quantity: int) -> int:
    if not isinstance(unit_price_cents, int) or not isinstance(quantity, int):
        raise TypeError("Money arithmetic requires integer minor units and quantities")
    return unit_price_cents * quantity
