"""Storefront HTTP API package."""

from fastapi import FastAPI, Request

from storefront.api.errors import register_error_handlers
from storefront.api.routes import (
    address_router,
    admin_router,
    cart_router,
    checkout_router,
    order_router,
    product_router,
)
from storefront.domain import storefront
from storefront.utils.logging import add_context, clear_context

ROUTERS = (cart_router, address_router, checkout_router, order_router, product_router, admin_router)


def install(app: FastAPI) -> FastAPI:
    """Mount the storefront routers, error handlers and domain context on ``app``."""

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the storefront domain context for each request."""
        add_context(path=request.url.path, customer_id=request.headers.get("x-customer-id"))
        try:
            with storefront.domain_context():
                response = await call_next(request)
        finally:
            clear_context()
        return response

    for router in ROUTERS:
        app.include_router(router)

    register_error_handlers(app)
    return app


__all__ = ["ROUTERS", "install", "register_error_handlers"]
