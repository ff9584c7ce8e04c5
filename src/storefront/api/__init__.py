"""Storefront API package."""

from storefront.api.errors import register_error_handlers
from storefront.api.routes import admin_router, order_router, payment_router, product_router, user_router

__all__ = [
    "admin_router",
    "order_router",
    "payment_router",
    "product_router",
    "register_error_handlers",
    "user_router",
]
