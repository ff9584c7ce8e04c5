"""Catalog administration — commands and handler.

Product writes go through `process_holding` so they serialize with
checkouts reserving the same product's stock.
"""

import json
import threading

import structlog
from protean import handle
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product import Product, StockReason
from storefront.catalogue.slug import unique_slug
from storefront.catalogue.stock_guard import process_holding
from storefront.config import get_settings
from storefront.domain import storefront
from storefront.shared.errors import InvalidArgument

logger = structlog.get_logger(__name__)

# SKU and slug uniqueness checks must not interleave between two creations
_unique_keys_lock = threading.Lock()


@storefront.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=255)
    sku = String(required=True, max_length=50)
    description = Text()
    price_cents = Integer(required=True, min_value=0)
    currency = String(max_length=3)
    sizes = Text()  # JSON list
    colors = Text()  # JSON list
    stock = Integer(default=0, min_value=0)


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(max_length=255)
    description = Text()
    price_cents = Integer(min_value=0)
    sizes = Text()
    colors = Text()
    stock = Integer(min_value=0)


@storefront.command(part_of="Product")
class RestockProduct:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


@storefront.command(part_of="Product")
class AddProductImage:
    product_id = Identifier(required=True)
    url = String(required=True, max_length=500)
    alt_text = String(max_length=255)


def _decode(value):
    if value is None:
        return None
    return json.loads(value) if isinstance(value, str) else value


@storefront.command_handler(part_of=Product)
class ProductManagementHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        if repo.find_by_sku(command.sku) is not None:
            raise InvalidArgument("SKU already exists", sku=command.sku)

        product = Product.create(
            name=command.name,
            sku=command.sku,
            slug=unique_slug(command.name, repo.slug_taken),
            price_cents=command.price_cents,
            currency=command.currency or get_settings().currency,
            description=command.description,
            sizes=_decode(command.sizes),
            colors=_decode(command.colors),
            stock=command.stock,
        )
        repo.add(product)
        logger.info("Product created", product_id=str(product.id), sku=product.sku, slug=product.slug)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_product(command.product_id)

        product.update_details(
            name=command.name,
            description=command.description,
            sizes=_decode(command.sizes),
            colors=_decode(command.colors),
        )
        if command.price_cents is not None:
            product.change_price(command.price_cents)
        if command.stock is not None:
            product.set_stock(command.stock)

        repo.add(product)
        logger.info("Product updated", product_id=str(product.id))
        return str(product.id)

    @handle(RestockProduct)
    def restock_product(self, command):
        product = current_domain.repository_for(Product).increment_stock(
            command.product_id, command.quantity, reason=StockReason.RESTOCK
        )
        logger.info("Product restocked", product_id=str(product.id), stock=product.stock)
        return product.stock

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_product(command.product_id)
        product.deactivate()
        repo.add(product)
        logger.info("Product deactivated", product_id=str(product.id))

    @handle(AddProductImage)
    def add_product_image(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get_product(command.product_id)
        image = product.add_image(command.url, alt_text=command.alt_text)
        repo.add(product)
        return str(image.id)


def create_product(**fields) -> str:
    """Create a product; SKU and slug checks are serialized across threads."""
    if isinstance(fields.get("sizes"), list):
        fields["sizes"] = json.dumps(fields["sizes"])
    if isinstance(fields.get("colors"), list):
        fields["colors"] = json.dumps(fields["colors"])
    with _unique_keys_lock:
        return current_domain.process(CreateProduct(**fields), asynchronous=False)


def update_product(product_id: str, **changes) -> str:
    for key in ("sizes", "colors"):
        if isinstance(changes.get(key), list):
            changes[key] = json.dumps(changes[key])
    return process_holding(UpdateProduct(product_id=product_id, **changes), [product_id])


def restock_product(product_id: str, quantity: int) -> int:
    return process_holding(RestockProduct(product_id=product_id, quantity=quantity), [product_id])


def deactivate_product(product_id: str) -> None:
    process_holding(DeactivateProduct(product_id=product_id), [product_id])


def add_product_image(product_id: str, url: str, alt_text: str | None = None) -> str:
    return process_holding(AddProductImage(product_id=product_id, url=url, alt_text=alt_text), [product_id])
