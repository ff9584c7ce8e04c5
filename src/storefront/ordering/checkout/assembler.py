"""Order assembly: price snapshot, integer total and the reservation plan."""

from storefront.catalogue.product import Product
from storefront.ordering.checkout.cart import CartLine
from storefront.ordering.order import Order
from storefront.shared.errors import InvalidArgument

DEFAULT_PAYMENT_METHOD = "gateway"


def assemble_order(
    user_id: str,
    validated: list[tuple[CartLine, Product]],
    shipping_address: dict,
    currency: str,
    payment_method: str | None = None,
) -> Order:
    """Build a PENDING order whose line prices are copied from the products now."""
    line_items = []
    for line, product in validated:
        if product.currency != currency:
            raise InvalidArgument(
                f"Product {product.id} is priced in {product.currency}, not {currency}",
                product_id=str(product.id),
            )
        line_items.append(
            {
                "product_id": str(product.id),
                "product_name": product.name,
                "quantity": line.quantity,
                "unit_price_cents": product.price_cents,
                "size": line.size,
                "color": line.color,
            }
        )

    return Order.place(
        user_id=user_id,
        line_items=line_items,
        shipping_address=shipping_address,
        currency=currency,
        payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
    )


def reservation_plan(lines: list[CartLine]) -> dict[str, int]:
    """Total quantity per product, in order of first appearance in the cart."""
    plan: dict[str, int] = {}
    for line in lines:
        plan[line.product_id] = plan.get(line.product_id, 0) + line.quantity
    return plan
