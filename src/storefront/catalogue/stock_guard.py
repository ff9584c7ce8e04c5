"""Per-product exclusive access to stock.

Every write that reads and then changes a product's stock (checkout,
cancellation, admin corrections) runs while holding that product's lock.
Locks are re-entrant so a holder may call into code that takes the same lock
again, and multi-product holds always acquire in sorted id order so two
orders touching the same products cannot deadlock.
"""

import threading
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

import structlog
from protean.utils.globals import current_domain

from storefront.config import get_settings
from storefront.shared.errors import StockBusy

logger = structlog.get_logger(__name__)


class StockGuard:
    def __init__(self) -> None:
        self._locks: dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, product_id: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(product_id)
            if lock is None:
                lock = self._locks[product_id] = threading.RLock()
            return lock

    @contextmanager
    def hold(self, product_ids: Iterable[str], timeout: float | None = None) -> Iterator[None]:
        """Hold the locks of all `product_ids` for the duration of the block.

        Raises StockBusy, with nothing held, if any lock cannot be acquired
        within `timeout` seconds.
        """
        if timeout is None:
            timeout = get_settings().stock_lock_timeout

        acquired: list[threading.RLock] = []
        try:
            for product_id in sorted({str(pid) for pid in product_ids}):
                lock = self._lock_for(product_id)
                if not lock.acquire(timeout=timeout):
                    logger.warning("Stock lock timed out", product_id=product_id, timeout=timeout)
                    raise StockBusy(product_id, timeout)
                acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()

    def reset(self) -> None:
        with self._registry_lock:
            self._locks.clear()


stock_guard = StockGuard()


def process_holding(command, product_ids: Iterable[str]):
    """Process `command` synchronously while holding the given products' locks.

    The locks stay held until the command's unit of work has committed, so no
    other writer can interleave between the handler's reads and its commit.
    """
    with stock_guard.hold(product_ids):
        return current_domain.process(command, asynchronous=False)
