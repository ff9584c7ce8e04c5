"""Order aggregate — line-item snapshot plus the order status state machine.

State Machine:
    PENDING → PAID → SHIPPED → DELIVERED
    PENDING → CANCELLED
    PAID → CANCELLED

DELIVERED and CANCELLED are terminal. PAID is entered through payment
confirmation; an administrator can only force it with an explicit override.
"""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.ordering.events import OrderPlaced, OrderStatusChanged, PaymentIntentRecorded
from storefront.shared.clock import utcnow
from storefront.shared.errors import IllegalTransition, InvalidArgument
from storefront.shared.money import line_total


class OrderStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, name):
        try:
            return cls[name]
        except (KeyError, TypeError):
            raise InvalidArgument(
                f"Unknown order status: {name}",
                allowed=[status.name for status in cls],
            ) from None


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

TERMINAL_STATES = frozenset(status for status, targets in _VALID_TRANSITIONS.items() if not targets)


@storefront.value_object(part_of="Order")
class ShippingAddress:
    """Delivery address copied onto the order at checkout; never updated afterwards."""

    full_name = String(required=True, max_length=150)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    city = String(required=True, max_length=100)
    state = String(required=True, max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)
    phone = String(required=True, max_length=30)


@storefront.entity(part_of="Order")
class LineItem:
    """One product/quantity/size/color entry, priced at the moment of checkout."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price_cents = Integer(required=True, min_value=0)
    size = String(max_length=50)
    color = String(max_length=50)
    position = Integer(default=0, min_value=0)

    @property
    def line_total_cents(self) -> int:
        return line_total(self.unit_price_cents, self.quantity)


@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    items = HasMany(LineItem)
    total_cents = Integer(required=True, min_value=0)
    currency = String(required=True, max_length=3)
    shipping_address = ValueObject(ShippingAddress, required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_method = String(required=True, max_length=20)
    payment_reference = String(max_length=255)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def total_must_equal_sum_of_line_items(self):
        if not self.items:
            return
        expected = sum(item.line_total_cents for item in self.items)
        if self.total_cents != expected:
            raise ValidationError(
                {"total_cents": [f"Order total {self.total_cents} does not match line items {expected}"]}
            )

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, user_id, line_items, shipping_address, currency, payment_method):
        """Create a PENDING order from already-priced line items.

        Args:
            user_id: Owner of the order.
            line_items: Dicts with product_id, product_name, quantity,
                unit_price_cents and optional size/color.
            shipping_address: ShippingAddress value object or dict.
            currency: ISO currency of every unit price.
            payment_method: Canonical payment method tag.
        """
        if not line_items:
            raise InvalidArgument("An order needs at least one line item")

        items = [LineItem(**data, position=index) for index, data in enumerate(line_items)]
        total = sum(item.line_total_cents for item in items)
        if isinstance(shipping_address, dict):
            shipping_address = ShippingAddress(**shipping_address)

        now = utcnow()
        order = cls(
            user_id=user_id,
            items=items,
            total_cents=total,
            currency=currency,
            shipping_address=shipping_address,
            status=OrderStatus.PENDING.value,
            payment_method=payment_method,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                total_cents=total,
                currency=currency,
                item_count=len(items),
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def ordered_items(self) -> list[LineItem]:
        return sorted(self.items, key=lambda item: item.position)

    @property
    def product_ids(self) -> list[str]:
        return sorted({str(item.product_id) for item in self.items})

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in _VALID_TRANSITIONS[self.current_status]

    def transition_to(self, target: OrderStatus, override: bool = False, reason: str | None = None) -> None:
        """Move the order to `target` if the transition table allows it.

        Entering PAID requires `override` outside the payment flow.
        """
        if not self.can_transition_to(target):
            raise IllegalTransition(self.status, target.value)
        if target is OrderStatus.PAID and not override:
            raise IllegalTransition(self.status, target.value)
        self._set_status(target, reason)

    def record_payment_intent(self, reference: str) -> None:
        if self.current_status is not OrderStatus.PENDING:
            raise IllegalTransition(self.status, OrderStatus.PENDING.value)
        now = utcnow()
        self.payment_reference = reference
        self.updated_at = now
        self.raise_(
            PaymentIntentRecorded(
                order_id=str(self.id),
                payment_reference=reference,
                recorded_at=now,
            )
        )

    def mark_paid(self, reference: str) -> None:
        if not self.can_transition_to(OrderStatus.PAID):
            raise IllegalTransition(self.status, OrderStatus.PAID.value)
        self.payment_reference = reference
        self._set_status(OrderStatus.PAID, "payment confirmed")

    def _set_status(self, target: OrderStatus, reason: str | None) -> None:
        previous = self.status
        now = utcnow()
        self.status = target.value
        self.updated_at = now
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                from_status=previous,
                to_status=target.value,
                reason=reason,
                changed_at=now,
            )
        )
