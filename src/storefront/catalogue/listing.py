"""Catalog browsing: filtered, sorted and paged listing of active products."""

from dataclasses import dataclass, field

from protean.utils.globals import current_domain

from storefront.catalogue.product import Product
from storefront.shared.errors import InvalidArgument, NotFound
from storefront.shared.paging import Page, paginate

# sort key -> (attribute, descending)
SORT_ORDERS = {
    "price-asc": ("price_cents", False),
    "price-desc": ("price_cents", True),
    "name-asc": ("name", False),
    "name-desc": ("name", True),
    "newest": ("created_at", True),
}
DEFAULT_SORT = "newest"


@dataclass(frozen=True)
class ProductSearch:
    query: str | None = None
    sizes: list[str] = field(default_factory=list)
    colors: list[str] = field(default_factory=list)
    min_price_cents: int | None = None
    max_price_cents: int | None = None
    sort: str | None = None
    page: int = 0
    size: int = 12

    def matches(self, product: Product) -> bool:
        if not product.active:
            return False
        if self.query:
            needle = self.query.lower()
            haystack = f"{product.name or ''}\n{product.description or ''}".lower()
            if needle not in haystack:
                return False
        if self.sizes and not set(self.sizes) & set(product.size_options):
            return False
        if self.colors and not set(self.colors) & set(product.color_options):
            return False
        if self.min_price_cents is not None and product.price_cents < self.min_price_cents:
            return False
        if self.max_price_cents is not None and product.price_cents > self.max_price_cents:
            return False
        return True


def search_products(search: ProductSearch) -> Page:
    sort = search.sort or DEFAULT_SORT
    if sort not in SORT_ORDERS:
        raise InvalidArgument(f"Unknown sort order: {sort}", allowed=sorted(SORT_ORDERS))
    attribute, descending = SORT_ORDERS[sort]

    products = current_domain.repository_for(Product).all_products()
    matching = [p for p in products if search.matches(p)]
    matching.sort(key=lambda p: getattr(p, attribute), reverse=descending)
    return paginate(matching, search.page, search.size)


def get_active_product(product_id: str) -> Product:
    product = current_domain.repository_for(Product).get_product(product_id)
    if not product.active:
        raise NotFound("Product", product_id)
    return product


def get_product_by_slug(slug: str) -> Product:
    product = current_domain.repository_for(Product).find_by_slug(slug)
    if product is None or not product.active:
        raise NotFound("Product", slug)
    return product
