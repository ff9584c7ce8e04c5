"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state; nothing is shared across
users. State tracks IDs returned by creation endpoints so follow-up requests
can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks a simulated customer from registration to their last order."""

    user_id: str | None = None
    order_ids: list[str] = field(default_factory=list)
    rejected_checkouts: int = 0


@dataclass
class MerchantState:
    """Tracks an administrator and the products they created."""

    user_id: str | None = None
    product_ids: list[str] = field(default_factory=list)

    @property
    def headers(self) -> dict:
        return {"X-User-Id": self.user_id or ""}
