"""FastAPI routers for the storefront API, one per audience.

Routes that take stock locks or call the payment gateway are plain `def`
functions so FastAPI runs them in its threadpool, off the event loop.
"""

import structlog
from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from protean.utils.globals import current_domain
from starlette.concurrency import run_in_threadpool

from storefront.analytics.orders import DEFAULT_WINDOW_DAYS, order_analytics
from storefront.api.dependencies import admin_user, current_user
from storefront.api.schemas import (
    AddImageRequest,
    AnalyticsResponse,
    CheckoutRequest,
    ConfigureGatewayRequest,
    CreateProductRequest,
    GatewayConfigResponse,
    ImageIdResponse,
    OrderPageResponse,
    OrderResponse,
    ProductIdResponse,
    ProductPageResponse,
    ProductResponse,
    RegisterUserRequest,
    ReleasedOrdersResponse,
    ReleaseStaleOrdersRequest,
    RestockRequest,
    StatusResponse,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UserIdResponse,
)
from storefront.catalogue import management
from storefront.catalogue.listing import ProductSearch, get_active_product, get_product_by_slug, search_products
from storefront.catalogue.product import Product
from storefront.catalogue.stock_guard import process_holding
from storefront.config import get_settings
from storefront.identity.registration import RegisterUser
from storefront.identity.user import User
from storefront.ordering import queries
from storefront.ordering.checkout.flow import checkout
from storefront.ordering.order import Order
from storefront.ordering.reconciliation import release_stale_orders
from storefront.ordering.status import update_order_status
from storefront.payments.gateway import GatewayError, WebhookEvent, get_gateway
from storefront.payments.gateway.fake_adapter import FakeGateway
from storefront.payments.recording import ConfirmPayment
from storefront.shared.paging import Page

logger = structlog.get_logger(__name__)


# ---------------------------------------------------------------------------
# Response mapping
# ---------------------------------------------------------------------------
def _product_response(product: Product) -> ProductResponse:
    return ProductResponse(
        id=str(product.id),
        name=product.name,
        slug=product.slug,
        sku=product.sku,
        description=product.description,
        price_cents=product.price_cents,
        currency=product.currency,
        sizes=product.size_options,
        colors=product.color_options,
        stock=product.stock,
        active=product.active,
        images=[
            {
                "id": str(image.id),
                "url": image.url,
                "alt_text": image.alt_text,
                "display_order": image.display_order,
            }
            for image in product.ordered_images
        ],
    )


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=str(order.id),
        user_id=str(order.user_id),
        items=[
            {
                "product_id": str(item.product_id),
                "product_name": item.product_name,
                "quantity": item.quantity,
                "unit_price_cents": item.unit_price_cents,
                "line_total_cents": item.line_total_cents,
                "size": item.size,
                "color": item.color,
            }
            for item in order.ordered_items
        ],
        total_cents=order.total_cents,
        currency=order.currency,
        status=order.status,
        payment_method=order.payment_method,
        payment_reference=order.payment_reference,
        shipping_address=order.shipping_address.to_dict(),
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def _order_page(page: Page) -> OrderPageResponse:
    return OrderPageResponse(
        items=[_order_response(order) for order in page.items],
        total=page.total,
        page=page.page,
        size=page.size,
        total_pages=page.total_pages,
    )


# ---------------------------------------------------------------------------
# User Router
# ---------------------------------------------------------------------------
user_router = APIRouter(prefix="/users", tags=["users"])


@user_router.post("", status_code=201, response_model=UserIdResponse)
async def register_user(body: RegisterUserRequest) -> UserIdResponse:
    command = RegisterUser(name=body.name, email=body.email, role=body.role)
    user_id = current_domain.process(command, asynchronous=False)
    return UserIdResponse(user_id=user_id)


# ---------------------------------------------------------------------------
# Product Router (public catalog)
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.get("", response_model=ProductPageResponse)
async def list_products(
    q: str | None = None,
    sizes: list[str] = Query(default=[]),
    colors: list[str] = Query(default=[]),
    min_price_cents: int | None = None,
    max_price_cents: int | None = None,
    sort: str | None = None,
    page: int = 0,
    size: int = 12,
) -> ProductPageResponse:
    """Browse active products with optional filters."""
    result = search_products(
        ProductSearch(
            query=q,
            sizes=sizes,
            colors=colors,
            min_price_cents=min_price_cents,
            max_price_cents=max_price_cents,
            sort=sort,
            page=page,
            size=size,
        )
    )
    return ProductPageResponse(
        items=[_product_response(p) for p in result.items],
        total=result.total,
        page=result.page,
        size=result.size,
        total_pages=result.total_pages,
    )


@product_router.get("/slug/{slug}", response_model=ProductResponse)
async def get_product_by_slug_route(slug: str) -> ProductResponse:
    return _product_response(get_product_by_slug(slug))


@product_router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str) -> ProductResponse:
    return _product_response(get_active_product(product_id))


# ---------------------------------------------------------------------------
# Order Router (checkout and the caller's orders)
# ---------------------------------------------------------------------------
order_router = APIRouter(tags=["orders"])


@order_router.post("/checkout", status_code=201, response_model=OrderResponse)
def place_order(body: CheckoutRequest, user: User = Depends(current_user)) -> OrderResponse:
    """Convert the submitted cart into an order and dispatch its payment."""
    order = checkout(
        user_id=str(user.id),
        items=[item.model_dump() for item in body.items],
        shipping_address=body.shipping_address.model_dump(),
        payment_method=body.payment_method,
    )
    return _order_response(order)


@order_router.get("/orders", response_model=OrderPageResponse)
async def list_my_orders(page: int = 0, size: int = 10, user: User = Depends(current_user)) -> OrderPageResponse:
    return _order_page(queries.list_user_orders(str(user.id), page=page, size=size))


@order_router.get("/orders/{order_id}", response_model=OrderResponse)
async def get_my_order(order_id: str, user: User = Depends(current_user)) -> OrderResponse:
    return _order_response(queries.get_order(order_id, user))


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(admin_user)])


@admin_router.post("/products", status_code=201, response_model=ProductIdResponse)
def create_product(body: CreateProductRequest) -> ProductIdResponse:
    product_id = management.create_product(**body.model_dump(exclude_none=True))
    return ProductIdResponse(product_id=product_id)


@admin_router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(product_id: str, body: UpdateProductRequest) -> ProductResponse:
    management.update_product(product_id, **body.model_dump(exclude_none=True))
    return _product_response(current_domain.repository_for(Product).get_product(product_id))


@admin_router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: str) -> None:
    """Soft delete: the product is deactivated, existing orders keep referencing it."""
    management.deactivate_product(product_id)


@admin_router.post("/products/{product_id}/images", status_code=201, response_model=ImageIdResponse)
def add_product_image(product_id: str, body: AddImageRequest) -> ImageIdResponse:
    image_id = management.add_product_image(product_id, body.url, alt_text=body.alt_text)
    return ImageIdResponse(image_id=image_id)


@admin_router.post("/products/{product_id}/restock", response_model=ProductResponse)
def restock_product(product_id: str, body: RestockRequest) -> ProductResponse:
    management.restock_product(product_id, body.quantity)
    return _product_response(current_domain.repository_for(Product).get_product(product_id))


@admin_router.get("/orders", response_model=OrderPageResponse)
async def list_all_orders(page: int = 0, size: int = 20) -> OrderPageResponse:
    return _order_page(queries.list_all_orders(page=page, size=size))


@admin_router.put("/orders/{order_id}/status", response_model=OrderResponse)
def change_order_status(order_id: str, body: UpdateOrderStatusRequest) -> OrderResponse:
    order = update_order_status(order_id, body.status, override=body.override, reason=body.reason)
    return _order_response(order)


@admin_router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(days: int = DEFAULT_WINDOW_DAYS) -> AnalyticsResponse:
    result = order_analytics(days=days)
    return AnalyticsResponse(revenue_cents=result.revenue_cents, order_count=result.order_count, days=result.days)


@admin_router.post("/maintenance/release-stale-orders", response_model=ReleasedOrdersResponse)
def release_stale(body: ReleaseStaleOrdersRequest) -> ReleasedOrdersResponse:
    """Cancel unpaid orders past their TTL and return their stock.

    Meant to be called periodically by an external scheduler.
    """
    released = release_stale_orders(older_than_minutes=body.older_than_minutes, as_of=body.as_of)
    return ReleasedOrdersResponse(released_count=released)


# ---------------------------------------------------------------------------
# Payment Router
# ---------------------------------------------------------------------------
payment_router = APIRouter(prefix="/payments", tags=["payments"])


def _confirm_payment(event: WebhookEvent) -> None:
    order = current_domain.repository_for(Order).find_by_id(event.order_id)
    process_holding(ConfirmPayment(order_id=event.order_id, reference=event.reference), order.product_ids)


@payment_router.post("/webhook", response_model=StatusResponse)
async def payment_webhook(
    request: Request,
    x_gateway_signature: str = Header(default=""),
    stripe_signature: str = Header(default=""),
) -> StatusResponse:
    """Payment outcome callback from the gateway.

    The signature covers the exact bytes the provider sent, so the raw body
    is verified before anything parses it.
    """
    payload = (await request.body()).decode("utf-8")
    gateway = get_gateway()
    if not gateway.verify_webhook_signature(payload, x_gateway_signature or stripe_signature):
        raise HTTPException(status_code=401, detail="Invalid webhook signature")

    try:
        event = gateway.parse_webhook_event(payload)
    except GatewayError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if event is None:
        return StatusResponse(status="ignored")
    if not event.succeeded:
        # Order stays PENDING; reconciliation releases it if nothing follows
        logger.warning(
            "Gateway reported failed payment",
            order_id=event.order_id,
            reference=event.reference,
            failure_reason=event.failure_reason,
        )
        return StatusResponse(status="ignored")

    # Waits on stock locks, so keep it off the event loop
    await run_in_threadpool(_confirm_payment, event)
    return StatusResponse(status="processed")


@payment_router.post("/gateway/configure", response_model=GatewayConfigResponse)
async def configure_gateway(body: ConfigureGatewayRequest) -> GatewayConfigResponse:
    """Configure the FakeGateway behavior (non-production only)."""
    if get_settings().is_production:
        raise HTTPException(status_code=403, detail="Gateway configuration not available in production")

    gateway = get_gateway()
    if not isinstance(gateway, FakeGateway):
        raise HTTPException(status_code=400, detail="Gateway configuration only available for FakeGateway")

    gateway.configure(
        should_succeed=body.should_succeed,
        failure_reason=body.failure_reason,
        latency_seconds=body.latency_seconds,
    )
    return GatewayConfigResponse(
        gateway=type(gateway).__name__,
        should_succeed=gateway.should_succeed,
        failure_reason=gateway.failure_reason,
        latency_seconds=gateway.latency_seconds,
    )
