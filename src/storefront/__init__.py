"""Retail storefront: catalog, checkout with consistent inventory, and order management."""
