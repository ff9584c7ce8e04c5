"""Pydantic request/response schemas for the storefront API.

These are external contracts, kept separate from the Protean commands and
aggregates they are translated to.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class ShippingAddressSchema(BaseModel):
    full_name: str
    address_line1: str
    address_line2: str | None = None
    city: str
    state: str
    postal_code: str
    country: str
    phone: str


class CartItemSchema(BaseModel):
    product_id: str
    # Non-positive values are rejected by the domain with InvalidArgument
    quantity: int
    size: str | None = None
    color: str | None = None


class ImageSchema(BaseModel):
    id: str
    url: str
    alt_text: str | None = None
    display_order: int


class LineItemSchema(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price_cents: int
    line_total_cents: int
    size: str | None = None
    color: str | None = None


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------
class RegisterUserRequest(BaseModel):
    name: str
    email: str
    role: str = "CUSTOMER"


class CheckoutRequest(BaseModel):
    items: list[CartItemSchema]
    shipping_address: ShippingAddressSchema
    payment_method: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [{"product_id": "prod-001", "quantity": 2, "size": "M", "color": "Red"}],
                    "shipping_address": {
                        "full_name": "Asha Rao",
                        "address_line1": "12 MG Road",
                        "city": "Bengaluru",
                        "state": "KA",
                        "postal_code": "560001",
                        "country": "IN",
                        "phone": "+91-9000000000",
                    },
                    "payment_method": "mock",
                }
            ]
        }
    }


class CreateProductRequest(BaseModel):
    name: str
    sku: str
    description: str | None = None
    price_cents: int = Field(ge=0)
    currency: str | None = None
    sizes: list[str] = []
    colors: list[str] = []
    stock: int = Field(default=0, ge=0)


class UpdateProductRequest(BaseModel):
    name: str | None = None
    description: str | None = None
    price_cents: int | None = Field(default=None, ge=0)
    sizes: list[str] | None = None
    colors: list[str] | None = None
    stock: int | None = Field(default=None, ge=0)


class AddImageRequest(BaseModel):
    url: str
    alt_text: str | None = None


class RestockRequest(BaseModel):
    quantity: int = Field(gt=0)


class UpdateOrderStatusRequest(BaseModel):
    status: str
    override: bool = False
    reason: str | None = None


class ReleaseStaleOrdersRequest(BaseModel):
    older_than_minutes: int | None = Field(default=None, ge=0)
    as_of: datetime | None = None


class ConfigureGatewayRequest(BaseModel):
    should_succeed: bool = True
    failure_reason: str = "Card declined"
    latency_seconds: float = Field(default=0.0, ge=0)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------
class UserIdResponse(BaseModel):
    user_id: str


class ProductIdResponse(BaseModel):
    product_id: str


class ImageIdResponse(BaseModel):
    image_id: str


class StatusResponse(BaseModel):
    status: str


class ProductResponse(BaseModel):
    id: str
    name: str
    slug: str
    sku: str
    description: str | None = None
    price_cents: int
    currency: str
    sizes: list[str]
    colors: list[str]
    stock: int
    active: bool
    images: list[ImageSchema]


class ProductPageResponse(BaseModel):
    items: list[ProductResponse]
    total: int
    page: int
    size: int
    total_pages: int


class OrderResponse(BaseModel):
    id: str
    user_id: str
    items: list[LineItemSchema]
    total_cents: int
    currency: str
    status: str
    payment_method: str
    payment_reference: str | None = None
    shipping_address: ShippingAddressSchema
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderPageResponse(BaseModel):
    items: list[OrderResponse]
    total: int
    page: int
    size: int
    total_pages: int


class AnalyticsResponse(BaseModel):
    revenue_cents: int
    order_count: int
    days: int


class ReleasedOrdersResponse(BaseModel):
    released_count: int


class GatewayConfigResponse(BaseModel):
    gateway: str
    should_succeed: bool
    failure_reason: str
    latency_seconds: float
