"""Order analytics: revenue and volume over a trailing window."""

from dataclasses import dataclass
from datetime import datetime, timedelta

from protean.utils.globals import current_domain

from storefront.ordering.order import Order, OrderStatus
from storefront.shared.clock import as_naive_utc, utcnow
from storefront.shared.errors import InvalidArgument

DEFAULT_WINDOW_DAYS = 30


@dataclass(frozen=True)
class OrderAnalytics:
    revenue_cents: int
    order_count: int
    days: int
    since: datetime


def order_analytics(days: int = DEFAULT_WINDOW_DAYS, as_of: datetime | None = None) -> OrderAnalytics:
    """Revenue counts PAID orders only; the order count includes every status."""
    if days <= 0:
        raise InvalidArgument("days must be greater than zero")

    since = as_naive_utc(as_of or utcnow()) - timedelta(days=days)
    orders = current_domain.repository_for(Order).created_since(since)

    return OrderAnalytics(
        revenue_cents=sum(o.total_cents or 0 for o in orders if o.status == OrderStatus.PAID.value),
        order_count=len(orders),
        days=days,
        since=since,
    )
