"""URL slugs derived from product names."""

import re

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


def slugify(name: str) -> str:
    slug = _DISALLOWED.sub("", name.lower())
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _HYPHENS.sub("-", slug).strip("-")
    return slug or "product"


def unique_slug(name: str, is_taken) -> str:
    """Return the slug for `name`, suffixed -2, -3, ... until `is_taken` says it is free."""
    base = slugify(name)
    candidate = base
    suffix = 2
    while is_taken(candidate):
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate
