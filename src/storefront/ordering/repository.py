"""Order store: lookups, paged listings and status updates."""

from datetime import datetime

from protean.exceptions import ObjectNotFoundError

from storefront.domain import storefront
from storefront.ordering.order import Order, OrderStatus
from storefront.shared.errors import NotFound
from storefront.shared.paging import Page, paginate, scan


def _newest_first(orders: list[Order]) -> list[Order]:
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


@storefront.repository(part_of=Order)
class OrderRepository:
    def find_by_id(self, order_id: str) -> Order:
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            raise NotFound("Order", order_id) from None

    def find_by_user(self, user_id: str, page: int = 0, size: int = 10) -> Page:
        return paginate(_newest_first(list(scan(self._dao, user_id=user_id))), page, size)

    def find_all(self, page: int = 0, size: int = 20) -> Page:
        return paginate(_newest_first(list(scan(self._dao))), page, size)

    def created_since(self, cutoff: datetime) -> list[Order]:
        return [order for order in scan(self._dao) if order.created_at and order.created_at >= cutoff]

    def pending_created_before(self, cutoff: datetime) -> list[Order]:
        return [
            order
            for order in scan(self._dao, status=OrderStatus.PENDING.value)
            if order.created_at and order.created_at <= cutoff
        ]

    def update_status(
        self, order_id: str, status: OrderStatus, override: bool = False, reason: str | None = None
    ) -> Order:
        order = self.find_by_id(order_id)
        order.transition_to(status, override=override, reason=reason)
        self.add(order)
        return order
