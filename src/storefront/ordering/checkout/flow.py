"""Checkout entry point.

    lock products → PlaceOrder (validate, assemble, reserve, persist) → unlock
    → dispatch payment

Everything up to the persisted PENDING order is one failure-atomic unit.
Payment dispatch is deliberately outside it: the gateway has its own latency
and timeout, and a failure there leaves the order in place.
"""

import json

import structlog
from protean.utils.globals import current_domain

from storefront.catalogue.stock_guard import process_holding
from storefront.config import get_settings
from storefront.ordering.checkout.cart import parse_cart
from storefront.ordering.checkout.placement import PlaceOrder
from storefront.ordering.order import Order, ShippingAddress
from storefront.payments.dispatch import resolve_payment_method
from storefront.shared.errors import InsufficientStock, NotFound, PaymentProcessingFailed, StockBusy

logger = structlog.get_logger(__name__)


def checkout(user_id: str, items, shipping_address: dict, payment_method: str | None = None) -> Order:
    """Convert a cart into an order and dispatch its payment.

    Raises:
        InvalidArgument: empty cart, non-positive quantity or unknown payment method.
        NotFound: a product in the cart does not exist or is inactive.
        InsufficientStock: at validation or at reservation; nothing is persisted.
        StockBusy: a product lock could not be acquired in time.
        PaymentProcessingFailed: the gateway failed, or its result could not be
            recorded in time; the order stays PENDING.
    """
    lines = parse_cart(items)
    method = resolve_payment_method(payment_method)
    # Required-field checks before any lock is taken
    address = ShippingAddress(**shipping_address).to_dict()

    command = PlaceOrder(
        user_id=user_id,
        items=json.dumps([line.to_dict() for line in lines]),
        shipping_address=json.dumps(address),
        currency=get_settings().currency,
        payment_method=method.tag,
    )
    try:
        order_id = process_holding(command, [line.product_id for line in lines])
    except (InsufficientStock, NotFound) as exc:
        logger.info("Checkout rejected", user_id=str(user_id), reason=type(exc).__name__, **exc.details)
        raise

    order = current_domain.repository_for(Order).find_by_id(order_id)
    try:
        return method.dispatch(order)
    except StockBusy as exc:
        # The order is persisted; the caller needs its id to follow up
        logger.warning("Payment result not recorded", order_id=order_id, **exc.details)
        raise PaymentProcessingFailed(order_id, exc.message) from exc
