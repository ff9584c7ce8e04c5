"""Product aggregate: the price and stock ledger consulted by checkout."""

import json

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, HasMany, Integer, String, Text

from storefront.domain import storefront
from storefront.shared.clock import utcnow
from storefront.shared.errors import InsufficientStock, InvalidArgument
from storefront.shared.money import normalize_currency


class StockReason:
    RESERVATION = "reservation"
    RELEASE = "release"
    RESTOCK = "restock"
    CORRECTION = "correction"


def _encode_options(values) -> str:
    """Store sizes/colors as a sorted, de-duplicated JSON list."""
    if values is None:
        return json.dumps([])
    if isinstance(values, str):
        values = [values]
    return json.dumps(sorted({str(v).strip() for v in values if str(v).strip()}))


@storefront.entity(part_of="Product")
class Image:
    url: String(required=True, max_length=500)
    alt_text: String(max_length=255)
    display_order: Integer(default=0, min_value=0)


@storefront.aggregate
class Product:
    name: String(required=True, max_length=255)
    slug: String(required=True, max_length=280)
    sku: String(required=True, max_length=50)
    description: Text()
    price_cents: Integer(required=True, min_value=0)
    currency: String(max_length=3, default="INR")
    sizes: Text(default="[]")
    colors: Text(default="[]")
    stock: Integer(default=0, min_value=0)
    active: Boolean(default=True)
    images: HasMany(Image)
    created_at: DateTime(default=utcnow)
    updated_at: DateTime(default=utcnow)

    @classmethod
    def create(
        cls,
        name,
        sku,
        slug,
        price_cents,
        currency,
        description=None,
        sizes=None,
        colors=None,
        stock=0,
    ):
        from storefront.catalogue.events import ProductCreated

        if not isinstance(price_cents, int) or isinstance(price_cents, bool):
            raise ValidationError({"price_cents": ["Price must be an integer amount of minor units"]})

        now = utcnow()
        product = cls(
            name=name,
            sku=sku.strip().upper(),
            slug=slug,
            description=description,
            price_cents=price_cents,
            currency=normalize_currency(currency),
            sizes=_encode_options(sizes),
            colors=_encode_options(colors),
            stock=stock or 0,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                sku=product.sku,
                slug=product.slug,
                price_cents=product.price_cents,
                currency=product.currency,
                stock=product.stock,
                created_at=now,
            )
        )
        return product

    @property
    def size_options(self) -> list[str]:
        return json.loads(self.sizes) if self.sizes else []

    @property
    def color_options(self) -> list[str]:
        return json.loads(self.colors) if self.colors else []

    def update_details(self, name=None, description=None, sizes=None, colors=None):
        if name is not None:
            self.name = name
        if description is not None:
            self.description = description
        if sizes is not None:
            self.sizes = _encode_options(sizes)
        if colors is not None:
            self.colors = _encode_options(colors)
        self.updated_at = utcnow()

    def change_price(self, price_cents):
        from storefront.catalogue.events import ProductPriceChanged

        if not isinstance(price_cents, int) or isinstance(price_cents, bool):
            raise ValidationError({"price_cents": ["Price must be an integer amount of minor units"]})
        if price_cents == self.price_cents:
            return

        previous = self.price_cents
        now = utcnow()
        self.price_cents = price_cents
        self.updated_at = now
        self.raise_(
            ProductPriceChanged(
                product_id=self.id,
                previous_price_cents=previous,
                new_price_cents=price_cents,
                changed_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def reserve_stock(self, quantity):
        """Decrement stock by `quantity`, refusing to go below zero.

        The check and the decrement happen together; callers serialize access
        to the same product through the stock guard.
        """
        if quantity <= 0:
            raise InvalidArgument("Quantity must be greater than zero", product_id=str(self.id))
        if quantity > self.stock:
            raise InsufficientStock(
                product_id=self.id,
                requested=quantity,
                available=self.stock,
                stage=InsufficientStock.RESERVATION,
            )
        self._move_stock(-quantity, StockReason.RESERVATION)

    def release_stock(self, quantity, reason=StockReason.RELEASE):
        if quantity <= 0:
            raise InvalidArgument("Quantity must be greater than zero", product_id=str(self.id))
        self._move_stock(quantity, reason)

    def set_stock(self, quantity):
        """Admin correction: overwrite the stock count."""
        if quantity < 0:
            raise InvalidArgument("Stock cannot be negative", product_id=str(self.id))
        if quantity != self.stock:
            self._move_stock(quantity - self.stock, StockReason.CORRECTION)

    def _move_stock(self, delta, reason):
        from storefront.catalogue.events import StockAdjusted

        now = utcnow()
        self.stock = self.stock + delta
        self.updated_at = now
        self.raise_(
            StockAdjusted(
                product_id=self.id,
                delta=delta,
                stock=self.stock,
                reason=reason,
                adjusted_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------
    def deactivate(self):
        from storefront.catalogue.events import ProductDeactivated

        if not self.active:
            return
        now = utcnow()
        self.active = False
        self.updated_at = now
        self.raise_(ProductDeactivated(product_id=self.id, deactivated_at=now))

    def add_image(self, url, alt_text=None):
        image = Image(
            url=url,
            alt_text=alt_text or self.name,
            display_order=len(self.images),
        )
        self.add_images(image)
        self.updated_at = utcnow()
        return image

    @property
    def ordered_images(self) -> list[Image]:
        return sorted(self.images, key=lambda image: image.display_order)
