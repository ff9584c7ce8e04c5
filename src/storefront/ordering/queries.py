"""Read side for orders: owner-checked lookup and paged listings."""

from protean.utils.globals import current_domain

from storefront.identity.user import User
from storefront.ordering.order import Order
from storefront.shared.errors import Unauthorized
from storefront.shared.paging import Page


def get_order(order_id: str, user: User) -> Order:
    """Fetch an order for `user`; only the owner or an admin may read it."""
    order = current_domain.repository_for(Order).find_by_id(order_id)
    if str(order.user_id) != str(user.id) and not user.is_admin:
        raise Unauthorized("Unauthorized access to order", order_id=str(order_id))
    return order


def list_user_orders(user_id: str, page: int = 0, size: int = 10) -> Page:
    return current_domain.repository_for(Order).find_by_user(user_id, page=page, size=size)


def list_all_orders(page: int = 0, size: int = 20) -> Page:
    return current_domain.repository_for(Order).find_all(page=page, size=size)
