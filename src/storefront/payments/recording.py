"""Recording payment outcomes on orders — commands and handler."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order import Order, OrderStatus
from storefront.shared.errors import InvalidArgument

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class RecordPaymentIntent:
    """The gateway accepted a payment intent; the order waits for confirmation."""

    order_id = Identifier(required=True)
    reference = String(required=True, max_length=255)


@storefront.command(part_of="Order")
class ConfirmPayment:
    """Payment is settled: mock approval, or a verified gateway webhook."""

    order_id = Identifier(required=True)
    reference = String(required=True, max_length=255)


@storefront.command_handler(part_of=Order)
class PaymentRecordingHandler:
    @handle(RecordPaymentIntent)
    def record_payment_intent(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_by_id(command.order_id)
        order.record_payment_intent(command.reference)
        repo.add(order)
        logger.info("Payment intent recorded", order_id=command.order_id, reference=command.reference)

    @handle(ConfirmPayment)
    def confirm_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_by_id(command.order_id)

        if order.payment_reference and order.payment_reference != command.reference:
            raise InvalidArgument(
                "Payment reference does not match the order",
                order_id=command.order_id,
            )
        if order.current_status is OrderStatus.PAID:
            # Redelivered confirmation
            return

        order.mark_paid(command.reference)
        repo.add(order)
        logger.info("Order paid", order_id=command.order_id, reference=command.reference)
