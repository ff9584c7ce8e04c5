"""Cart lines and the cart validator."""

from dataclasses import dataclass

from storefront.catalogue.product import Product
from storefront.shared.errors import InsufficientStock, InvalidArgument, NotFound


@dataclass(frozen=True)
class CartLine:
    product_id: str
    quantity: int
    size: str | None = None
    color: str | None = None

    def __post_init__(self):
        if not self.product_id:
            raise InvalidArgument("Cart line is missing a product id")
        if not isinstance(self.quantity, int) or isinstance(self.quantity, bool) or self.quantity <= 0:
            raise InvalidArgument(
                "Quantity must be a positive integer",
                product_id=str(self.product_id),
                quantity=self.quantity,
            )

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(
            product_id=str(data.get("product_id") or ""),
            quantity=data.get("quantity"),
            size=data.get("size"),
            color=data.get("color"),
        )

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "quantity": self.quantity,
            "size": self.size,
            "color": self.color,
        }


def parse_cart(raw_lines) -> list[CartLine]:
    lines = [line if isinstance(line, CartLine) else CartLine.from_dict(line) for line in raw_lines or []]
    if not lines:
        raise InvalidArgument("Cart is empty")
    return lines


def validate_cart(lines: list[CartLine], products) -> list[tuple[CartLine, Product]]:
    """Check every line in order; the first failure aborts with no side effects.

    Returns each line paired with the product snapshot it was validated
    against. Inactive products are reported as missing.
    """
    validated = []
    for line in lines:
        product = products.get_product(line.product_id)
        if not product.active:
            raise NotFound("Product", line.product_id)
        if line.quantity > product.stock:
            raise InsufficientStock(
                product_id=line.product_id,
                requested=line.quantity,
                available=product.stock,
                stage=InsufficientStock.VALIDATION,
            )
        validated.append((line, product))
    return validated
