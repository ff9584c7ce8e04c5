"""Map storefront errors onto HTTP responses with an `{"error": ...}` body."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from storefront.shared.errors import StorefrontError

logger = structlog.get_logger(__name__)


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning("Request failed", path=request.url.path, error=exc.message, code=type(exc).__name__)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StorefrontError, storefront_error_handler)
