"""Runtime settings read from environment variables."""

import os
from dataclasses import dataclass


def current_env() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


@dataclass(frozen=True)
class Settings:
    env: str
    currency: str
    payment_gateway: str
    payment_gateway_api_key: str | None
    payment_gateway_webhook_secret: str | None
    payment_gateway_timeout: float
    stock_lock_timeout: float
    pending_order_ttl_minutes: int

    @property
    def is_production(self) -> bool:
        return self.env == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            env=current_env(),
            currency=os.getenv("STOREFRONT_CURRENCY", "INR").upper(),
            payment_gateway=os.getenv("PAYMENT_GATEWAY", "fake").lower(),
            payment_gateway_api_key=os.getenv("PAYMENT_GATEWAY_API_KEY"),
            payment_gateway_webhook_secret=os.getenv("PAYMENT_GATEWAY_WEBHOOK_SECRET"),
            payment_gateway_timeout=float(os.getenv("PAYMENT_GATEWAY_TIMEOUT", "10")),
            stock_lock_timeout=float(os.getenv("STOCK_LOCK_TIMEOUT", "5")),
            pending_order_ttl_minutes=int(os.getenv("PENDING_ORDER_TTL_MINUTES", "30")),
        )


def get_settings() -> Settings:
    """Read settings fresh from the environment on every call."""
    return Settings.from_env()
