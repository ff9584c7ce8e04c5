"""Catalog store: product lookups and the atomic stock decrement."""

from protean.exceptions import ObjectNotFoundError

from storefront.catalogue.product import Product, StockReason
from storefront.catalogue.stock_guard import stock_guard
from storefront.domain import storefront
from storefront.shared.errors import NotFound
from storefront.shared.paging import scan


@storefront.repository(part_of=Product)
class ProductRepository:
    def get_product(self, product_id: str) -> Product:
        try:
            return self.get(product_id)
        except ObjectNotFoundError:
            raise NotFound("Product", product_id) from None

    def find_by_sku(self, sku: str) -> Product | None:
        return self._dao.query.filter(sku=sku.strip().upper()).all().first

    def find_by_slug(self, slug: str) -> Product | None:
        return self._dao.query.filter(slug=slug).all().first

    def slug_taken(self, slug: str) -> bool:
        return self.find_by_slug(slug) is not None

    def all_products(self) -> list[Product]:
        return list(scan(self._dao))

    def decrement_stock(self, product_id: str, quantity: int) -> Product:
        """Atomically check and decrement a product's stock.

        Raises InsufficientStock (reservation stage) when fewer than
        `quantity` units remain. Inside a unit of work the change becomes
        visible on commit; outside one it is persisted immediately.
        """
        with stock_guard.hold([product_id]):
            product = self.get_product(product_id)
            product.reserve_stock(quantity)
            self.add(product)
            return product

    def increment_stock(self, product_id: str, quantity: int, reason: str = StockReason.RELEASE) -> Product:
        with stock_guard.hold([product_id]):
            product = self.get_product(product_id)
            product.release_stock(quantity, reason=reason)
            self.add(product)
            return product
