"""Storefront HTTP API package."""

from storefront.api.admin import admin_router
from storefront.api.application import create_app
from storefront.api.customer import customer_router
from storefront.api.errors import register_exception_handlers
from storefront.api.public import public_router
from storefront.api.seller import seller_router

__all__ = [
    "admin_router",
    "create_app",
    "customer_router",
    "public_router",
    "register_exception_handlers",
    "seller_router",
]
