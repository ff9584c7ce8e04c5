"""Stale order reconciliation.

Orders whose payment never completed keep their stock reserved. Triggered
periodically by an external scheduler (cron, K8s CronJob) through the
maintenance endpoint, `release_stale_orders` cancels PENDING orders older
than the configured TTL and returns their stock.
"""

from datetime import datetime, timedelta

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.stock_guard import process_holding
from storefront.config import get_settings
from storefront.domain import storefront
from storefront.ordering.order import Order, OrderStatus
from storefront.ordering.status import release_order_stock
from storefront.shared.clock import as_naive_utc, utcnow
from storefront.shared.errors import InvalidArgument, StorefrontError

logger = structlog.get_logger(__name__)

EXPIRY_REASON = "payment not completed in time"


@storefront.command(part_of="Order")
class ExpirePendingOrder:
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class ExpirePendingOrderHandler:
    @handle(ExpirePendingOrder)
    def expire_pending_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.find_by_id(command.order_id)
        # Payment may have been confirmed after the scan picked this order
        if order.current_status is not OrderStatus.PENDING:
            return False

        order.transition_to(OrderStatus.CANCELLED, reason=EXPIRY_REASON)
        repo.add(order)
        release_order_stock(order)
        return True


def release_stale_orders(older_than_minutes: int | None = None, as_of: datetime | None = None) -> int:
    """Cancel PENDING orders created before the cutoff. Returns how many were cancelled."""
    threshold_minutes = older_than_minutes
    if threshold_minutes is None:
        threshold_minutes = get_settings().pending_order_ttl_minutes
    if threshold_minutes < 0:
        raise InvalidArgument("older_than_minutes must not be negative")
    cutoff = as_naive_utc(as_of or utcnow()) - timedelta(minutes=threshold_minutes)

    logger.info("Checking for stale orders", cutoff=cutoff.isoformat(), threshold_minutes=threshold_minutes)

    stale = current_domain.repository_for(Order).pending_created_before(cutoff)
    if not stale:
        logger.info("No stale orders found")
        return 0

    released = 0
    for order in stale:
        try:
            if process_holding(ExpirePendingOrder(order_id=str(order.id)), order.product_ids):
                released += 1
                logger.info("Released stale order", order_id=str(order.id), created_at=str(order.created_at))
        except StorefrontError as exc:
            logger.warning("Failed to release stale order", order_id=str(order.id), error=exc.message)

    logger.info("Stale order cleanup complete", released_count=released)
    return released
