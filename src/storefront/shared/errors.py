"""Storefront error taxonomy.

Every error carries the HTTP status it maps to and renders itself as the
`{"error": ...}` body returned by the API.
"""

from typing import Any


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "code": type(self).__name__, **self.details}


class NotFound(StorefrontError):
    status_code = 404

    def __init__(self, kind: str, identifier: str) -> None:
        super().__init__(f"{kind} not found", kind=kind, id=str(identifier))


class InvalidArgument(StorefrontError):
    status_code = 400


class IllegalTransition(InvalidArgument):
    status_code = 409

    def __init__(self, current: str, target: str) -> None:
        super().__init__(
            f"Cannot transition order from {current} to {target}",
            current=current,
            target=target,
        )


class InsufficientStock(StorefrontError):
    """Requested quantity exceeds available stock.

    `stage` tells the caller where the shortfall was observed: `validation`
    when the cart was checked, `reservation` when the decrement itself found
    that a concurrent order had already consumed the stock.
    """

    status_code = 409

    VALIDATION = "validation"
    RESERVATION = "reservation"

    def __init__(self, product_id: str, requested: int, available: int, stage: str) -> None:
        super().__init__(
            f"Insufficient stock for product {product_id}",
            product_id=str(product_id),
            requested=requested,
            available=available,
            stage=stage,
        )
        self.product_id = str(product_id)
        self.requested = requested
        self.available = available
        self.stage = stage


class PaymentProcessingFailed(StorefrontError):
    status_code = 502

    def __init__(self, order_id: str, reason: str) -> None:
        super().__init__(f"Payment processing failed: {reason}", order_id=str(order_id))
        self.order_id = str(order_id)
        self.reason = reason


class Unauthorized(StorefrontError):
    status_code = 403


class StockBusy(StorefrontError):
    status_code = 503

    def __init__(self, product_id: str, timeout: float) -> None:
        super().__init__(
            f"Timed out after {timeout}s waiting for stock of product {product_id}",
            product_id=str(product_id),
        )
