"""Domain events for the Order aggregate."""

from protean.fields import DateTime, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A cart was converted into a PENDING order and its stock reserved."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    total_cents = Integer(required=True)
    currency = String(required=True, max_length=3)
    item_count = Integer(required=True)
    payment_method = String(required=True)
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class PaymentIntentRecorded:
    __version__ = 1

    order_id = Identifier(required=True)
    payment_reference = String(required=True)
    recorded_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    from_status = String(required=True)
    to_status = String(required=True)
    reason = String()
    changed_at = DateTime(required=True)
