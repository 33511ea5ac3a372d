"""HTTP rendering of declined operations.

``StorefrontError`` answers with its category's status and a body of
``{"code", "message", "details"}``. Protean's own exceptions (field
validation, missing aggregates, invalid state) go through the handlers
shipped with ``protean.integrations.fastapi``.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from storefront.domain import logger
from storefront.errors import StorefrontError


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, code=exc.code.value, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def register_error_handlers(app: FastAPI) -> None:
    register_exception_handlers(app)
    app.add_exception_handler(StorefrontError, storefront_error_handler)
