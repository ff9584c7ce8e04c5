"""Administrative order status changes — command and handler.

Cancelling an order returns its reserved stock in the same unit of work.
"""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.catalogue.stock_guard import process_holding
from storefront.domain import storefront
from storefront.ordering.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    override = Boolean(default=False)
    reason = String(max_length=255)


def release_order_stock(order: Order) -> None:
    """Put every line's quantity back on its product."""
    quantities: dict[str, int] = {}
    for item in order.items:
        quantities[str(item.product_id)] = quantities.get(str(item.product_id), 0) + item.quantity

    products = current_domain.repository_for(Product)
    for product_id, quantity in quantities.items():
        products.increment_stock(product_id, quantity)


@storefront.command_handler(part_of=Order)
class OrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        target = OrderStatus.parse(command.status)
        order = current_domain.repository_for(Order).update_status(
            command.order_id,
            target,
            override=bool(command.override),
            reason=command.reason,
        )
        if target is OrderStatus.CANCELLED:
            release_order_stock(order)

        logger.info(
            "Order status updated",
            order_id=command.order_id,
            status=order.status,
            override=bool(command.override),
        )
        return order.status


def update_order_status(order_id: str, status: str, override: bool = False, reason: str | None = None) -> Order:
    """Apply an admin status change while holding the order's product locks."""
    target = OrderStatus.parse(status)
    repo = current_domain.repository_for(Order)
    order = repo.find_by_id(order_id)

    process_holding(
        UpdateOrderStatus(order_id=order_id, status=target.value, override=override, reason=reason),
        order.product_ids,
    )
    return repo.find_by_id(order_id)
