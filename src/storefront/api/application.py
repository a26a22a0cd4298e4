"""FastAPI application factory."""

from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from protean.domain import Domain

from storefront.api.admin import admin_router
from storefront.api.customer import customer_router
from storefront.api.envelope import success
from storefront.api.errors import register_exception_handlers
from storefront.api.public import public_router
from storefront.api.seller import seller_router
from storefront.utils import settings
from storefront.utils.logging import add_context, clear_context


def create_app(domain: Domain) -> FastAPI:
    """Build the API around an initialized domain."""
    app = FastAPI(
        title="Storefront API",
        description="Multi-role e-commerce backend: catalogue, cart, orders, payments and reviews",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def domain_context_middleware(request: Request, call_next):
        """Push the domain context and tag log lines with a request id."""
        clear_context()
        add_context(request_id=request.headers.get("X-Request-ID") or uuid4().hex, path=request.url.path)
        with domain.domain_context():
            response = await call_next(request)
        return response

    app.include_router(customer_router)
    app.include_router(seller_router)
    app.include_router(admin_router)
    app.include_router(public_router)
    register_exception_handlers(app)

    @app.get("/health")
    async def health():
        return success("ok", {"status": "ok", "domain": domain.name})

    return app
