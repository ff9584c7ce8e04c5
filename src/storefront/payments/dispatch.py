"""Payment dispatch, one variant per payment method.

Dispatch happens after the order and its stock reservation have committed.
A failed gateway call leaves the order PENDING without a payment reference;
`release_stale_orders` later cancels it and returns the stock.
"""

from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout
from uuid import uuid4

import structlog
from protean.utils.globals import current_domain

from storefront.catalogue.stock_guard import process_holding
from storefront.config import get_settings
from storefront.ordering.order import Order
from storefront.payments.gateway import GatewayError, PaymentGateway, get_gateway
from storefront.payments.recording import ConfirmPayment, RecordPaymentIntent
from storefront.shared.errors import InvalidArgument, PaymentProcessingFailed

logger = structlog.get_logger(__name__)

# Gateway calls run here so they can be abandoned after the payment timeout
_gateway_calls = ThreadPoolExecutor(max_workers=8, thread_name_prefix="payment-gateway")


class PaymentMethod(ABC):
    tag: str

    @abstractmethod
    def dispatch(self, order: Order) -> Order:
        """Settle or start payment for a freshly placed order and return it reloaded."""
        ...

    @staticmethod
    def _record(command, order: Order) -> Order:
        process_holding(command, order.product_ids)
        return current_domain.repository_for(Order).find_by_id(str(order.id))


class MockPayment(PaymentMethod):
    """Approves immediately with a locally generated reference."""

    tag = "mock"

    def dispatch(self, order: Order) -> Order:
        reference = f"MOCK_{uuid4().hex}"
        logger.info("Mock payment approved", order_id=str(order.id), reference=reference)
        return self._record(ConfirmPayment(order_id=str(order.id), reference=reference), order)


class GatewayPayment(PaymentMethod):
    """Creates a payment intent; the order stays PENDING until the webhook confirms it."""

    tag = "gateway"

    def __init__(self, gateway: PaymentGateway | None = None, timeout: float | None = None) -> None:
        self._gateway = gateway
        self.timeout = timeout

    @property
    def gateway(self) -> PaymentGateway:
        return self._gateway or get_gateway()

    def dispatch(self, order: Order) -> Order:
        order_id = str(order.id)
        timeout = self.timeout if self.timeout is not None else get_settings().payment_gateway_timeout

        future = _gateway_calls.submit(
            self.gateway.create_payment_intent,
            order.total_cents,
            order.currency,
            order_id,
        )
        try:
            intent = future.result(timeout=timeout)
        except FutureTimeout:
            future.cancel()
            logger.error("Payment gateway timed out", order_id=order_id, timeout=timeout)
            raise PaymentProcessingFailed(order_id, f"gateway did not respond within {timeout}s") from None
        except GatewayError as exc:
            logger.error("Payment gateway rejected intent", order_id=order_id, error=str(exc))
            raise PaymentProcessingFailed(order_id, str(exc)) from exc
        except Exception as exc:
            logger.exception("Payment gateway call raised", order_id=order_id)
            raise PaymentProcessingFailed(order_id, str(exc)) from exc

        logger.info("Payment intent created", order_id=order_id, reference=intent.reference)
        return self._record(RecordPaymentIntent(order_id=order_id, reference=intent.reference), order)


_ALIASES = {"stripe": GatewayPayment.tag}
PAYMENT_METHOD_TAGS = (GatewayPayment.tag, MockPayment.tag)


def canonical_tag(tag: str | None) -> str:
    normalized = (tag or GatewayPayment.tag).strip().lower()
    normalized = _ALIASES.get(normalized, normalized)
    if normalized not in PAYMENT_METHOD_TAGS:
        raise InvalidArgument(f"Unknown payment method: {tag}", allowed=list(PAYMENT_METHOD_TAGS))
    return normalized


def resolve_payment_method(tag: str | None) -> PaymentMethod:
    canonical = canonical_tag(tag)
    if canonical == MockPayment.tag:
        return MockPayment()
    return GatewayPayment()
