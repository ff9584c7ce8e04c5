"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    __version__ = 1

    product_id: Identifier(required=True)
    sku: String(required=True)
    slug: String(required=True)
    price_cents: Integer(required=True)
    currency: String(required=True)
    stock: Integer(required=True)
    created_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductPriceChanged:
    """Catalog price changed. Existing order lines keep the price they captured."""

    __version__ = 1

    product_id: Identifier(required=True)
    previous_price_cents: Integer(required=True)
    new_price_cents: Integer(required=True)
    changed_at: DateTime(required=True)


@storefront.event(part_of="Product")
class StockAdjusted:
    """Stock on hand moved by `delta` (negative for reservations)."""

    __version__ = 1

    product_id: Identifier(required=True)
    delta: Integer(required=True)
    stock: Integer(required=True)
    reason: String(required=True, max_length=50)
    adjusted_at: DateTime(required=True)


@storefront.event(part_of="Product")
class ProductDeactivated:
    __version__ = 1

    product_id: Identifier(required=True)
    deactivated_at: DateTime(required=True)
