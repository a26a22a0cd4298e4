"""Unauthenticated catalogue browsing and product reviews."""

from fastapi import APIRouter, Query

from storefront.api.envelope import success, warn
from storefront.catalogue.queries import get_product, list_categories, list_products, products_by_category
from storefront.reviews.queries import get_product_reviews

public_router = APIRouter(prefix="/api/public", tags=["public"])


@public_router.get("/categories")
async def categories():
    return success("Categories fetched successfully", list_categories())


@public_router.get("/categories/{category_id}/products")
async def category_products(category_id: str, page: int = Query(1, ge=1), limit: int = Query(10, ge=1, le=100)):
    result = products_by_category(category_id, page=page, limit=limit)
    if not result["products"]:
        return warn("No products found in this category", result)
    return success("Products fetched successfully", result)


@public_router.get("/products")
async def products(
    search: str | None = None,
    category_id: str | None = Query(None, alias="categoryId"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    result = list_products(search=search, category_id=category_id, page=page, limit=limit)
    if not result["products"]:
        return warn("No products found", result)
    return success("Products fetched successfully", result)


@public_router.get("/products/{product_id}")
async def product_detail(product_id: str):
    return success("Product fetched successfully", get_product(product_id))


@public_router.get("/products/{product_id}/reviews")
async def product_reviews(product_id: str):
    return success("Reviews fetched successfully", get_product_reviews(product_id))
