"""Response error extraction for load test observability.

Parses storefront API error responses into human-readable messages.
Handles two response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Storefront errors (400/403/404/409/502/503): {"error": "msg", "code": "...", ...}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact error message suitable for Locust failure messages."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if "detail" in body and isinstance(body["detail"], list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    if "error" in body:
        error = body["error"]
        if isinstance(error, dict):
            return " | ".join(f"{k}: {v}" for k, v in error.items())
        code = body.get("code")
        return f"{code}: {error}" if code else str(error)

    return str(body)[:300]


def is_stock_rejection(response: Response) -> bool:
    """True for the expected 409 InsufficientStock outcome under contention."""
    if response.status_code != 409:
        return False
    try:
        return response.json().get("code") == "InsufficientStock"
    except ValueError:
        return False
