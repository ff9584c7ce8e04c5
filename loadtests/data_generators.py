"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's validation
rules and match the field names expected by the API's Pydantic request
schemas. Prices are integer minor units.
"""

import random
import uuid

from faker import Faker

fake = Faker("en_IN")

SIZES = ["XS", "S", "M", "L", "XL", "Free"]
COLORS = ["Red", "Blue", "Green", "Gold", "Black", "Ivory"]
GARMENTS = ["Kurta", "Saree", "Dupatta", "Lehenga", "Sherwani", "Shawl"]
FABRICS = ["Silk", "Cotton", "Chiffon", "Linen", "Georgette", "Pashmina"]

# ---------- Users ----------


def valid_email() -> str:
    local = fake.user_name()[:20]
    return f"{local}.{uuid.uuid4().hex[:6]}@{fake.free_email_domain()}"


def user_data(role: str = "CUSTOMER") -> dict:
    """Generate RegisterUserRequest payload."""
    return {"name": fake.name()[:150], "email": valid_email(), "role": role}


# ---------- Catalog ----------


def valid_sku(prefix: str = "LT") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8].upper()}"


def product_data(stock: int | None = None) -> dict:
    """Generate CreateProductRequest payload."""
    name = f"{random.choice(FABRICS)} {random.choice(GARMENTS)} {fake.word().capitalize()}"
    return {
        "name": name[:255],
        "sku": valid_sku("PROD"),
        "description": fake.paragraph(nb_sentences=2),
        "price_cents": random.randint(5, 500) * 1000,
        "sizes": random.sample(SIZES, k=3),
        "colors": random.sample(COLORS, k=2),
        "stock": stock if stock is not None else random.randint(50, 500),
    }


def image_data() -> dict:
    return {
        "url": f"https://cdn.example.com/images/{uuid.uuid4().hex}.jpg",
        "alt_text": fake.sentence(nb_words=5)[:255],
    }


def search_params() -> dict:
    params = {"sort": random.choice(["newest", "price-asc", "price-desc", "name-asc"])}
    if random.random() < 0.5:
        params["q"] = random.choice(FABRICS + GARMENTS).lower()
    if random.random() < 0.3:
        params["colors"] = random.choice(COLORS)
    return params


# ---------- Checkout ----------


def shipping_address() -> dict:
    """Generate ShippingAddressSchema payload."""
    return {
        "full_name": fake.name()[:150],
        "address_line1": fake.street_address()[:255],
        "address_line2": None,
        "city": fake.city()[:100],
        "state": fake.state()[:100],
        "postal_code": fake.postcode()[:20],
        "country": "IN",
        "phone": fake.phone_number()[:30],
    }


def cart_items(product_ids: list[str], max_lines: int = 3) -> list[dict]:
    """Pick up to `max_lines` distinct products with small quantities."""
    chosen = random.sample(product_ids, k=min(len(product_ids), random.randint(1, max_lines)))
    return [
        {
            "product_id": product_id,
            "quantity": random.randint(1, 3),
            "size": random.choice(SIZES),
            "color": random.choice(COLORS),
        }
        for product_id in chosen
    ]


def checkout_data(product_ids: list[str], payment_method: str = "mock") -> dict:
    """Generate CheckoutRequest payload."""
    return {
        "items": cart_items(product_ids),
        "shipping_address": shipping_address(),
        "payment_method": payment_method,
    }
