"""Order placement — command and handler.

The handler runs validate → assemble → reserve → persist inside one unit of
work. Any exception raised along the way rolls back every stock decrement
made so far, and no order is stored.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.domain import storefront
from storefront.ordering.checkout.assembler import assemble_order, reservation_plan
from storefront.ordering.checkout.cart import parse_cart, validate_cart
from storefront.ordering.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of cart line dicts
    shipping_address = Text(required=True)  # JSON: address dict
    currency = String(required=True, max_length=3)
    payment_method = String(required=True, max_length=20)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        lines = parse_cart(json.loads(command.items))
        products = current_domain.repository_for(Product)

        validated = validate_cart(lines, products)
        order = assemble_order(
            user_id=command.user_id,
            validated=validated,
            shipping_address=json.loads(command.shipping_address),
            currency=command.currency,
            payment_method=command.payment_method,
        )

        for product_id, quantity in reservation_plan(lines).items():
            product = products.decrement_stock(product_id, quantity)
            logger.debug("Stock reserved", product_id=product_id, quantity=quantity, remaining=product.stock)

        current_domain.repository_for(Order).add(order)
        logger.info(
            "Order placed",
            order_id=str(order.id),
            user_id=str(order.user_id),
            total_cents=order.total_cents,
            lines=len(order.items),
        )
        return str(order.id)
