"""Seller endpoints: account, own products and orders containing them."""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.auth import current_seller
from storefront.api.envelope import success, warn
from storefront.api.schemas import (
    CreateProductRequest,
    LoginRequest,
    RegisterSellerRequest,
    UpdateOrderStatusRequest,
    UpdateProductRequest,
    UpdateSellerProfileRequest,
    UpdateStockRequest,
)
from storefront.catalogue.product.management import (
    CreateProduct,
    DeleteProduct,
    UpdateProduct,
    UpdateProductStock,
)
from storefront.catalogue.queries import get_product, list_products
from storefront.identity.account import AccountRole
from storefront.identity.administration import get_profile
from storefront.identity.authentication import AuthenticateAccount
from storefront.identity.profile import UpdateSellerProfile
from storefront.identity.registration import RegisterAccount
from storefront.identity.tokens import Principal
from storefront.ordering.order.queries import list_seller_orders, seller_order_detail
from storefront.ordering.order.status import UpdateOrderStatus

seller_router = APIRouter(prefix="/api/seller", tags=["seller"])


# --- Account ---


@seller_router.post("/register", status_code=201)
async def register(body: RegisterSellerRequest):
    command = RegisterAccount(
        name=body.name,
        email=body.email,
        password=body.password,
        role=AccountRole.SELLER.value,
        phone=body.phone,
        address=body.address,
        store_name=body.store_name,
    )
    account_id = current_domain.process(command, asynchronous=False)
    return success("Seller registered successfully", get_profile(account_id), status_code=201)


@seller_router.post("/login")
async def login(body: LoginRequest):
    command = AuthenticateAccount(email=body.email, password=body.password, role=AccountRole.SELLER.value)
    return success("Login successful", current_domain.process(command, asynchronous=False))


@seller_router.get("/profile")
async def profile(principal: Principal = Depends(current_seller)):
    return success("Profile fetched successfully", get_profile(principal.account_id))


@seller_router.put("/profile")
async def update_profile(body: UpdateSellerProfileRequest, principal: Principal = Depends(current_seller)):
    command = UpdateSellerProfile(
        seller_id=principal.account_id,
        store_name=body.store_name,
        address=body.address,
        phone=body.phone,
        description=body.description,
    )
    return success("Profile updated successfully", current_domain.process(command, asynchronous=False))


# --- Products ---


@seller_router.post("/products", status_code=201)
async def create_product(body: CreateProductRequest, principal: Principal = Depends(current_seller)):
    command = CreateProduct(
        seller_id=principal.account_id,
        name=body.name,
        description=body.description,
        price=body.price,
        stock=body.stock,
        category_id=body.category_id,
        images=json.dumps(body.images),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return success("Product added successfully", get_product(product_id), status_code=201)


@seller_router.get("/products")
async def my_products(
    search: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(current_seller),
):
    result = list_products(search=search, seller_id=principal.account_id, page=page, limit=limit)
    if not result["products"]:
        return warn("No products found", result)
    return success("Products fetched successfully", result)


@seller_router.put("/products/{product_id}")
async def update_product(product_id: str, body: UpdateProductRequest, principal: Principal = Depends(current_seller)):
    command = UpdateProduct(
        seller_id=principal.account_id,
        product_id=product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        stock=body.stock,
        category_id=body.category_id,
        images=json.dumps(body.images) if body.images is not None else None,
    )
    return success("Product updated successfully", current_domain.process(command, asynchronous=False))


@seller_router.patch("/products/{product_id}/stock")
async def update_stock(product_id: str, body: UpdateStockRequest, principal: Principal = Depends(current_seller)):
    command = UpdateProductStock(seller_id=principal.account_id, product_id=product_id, stock=body.stock)
    return success("Stock updated successfully", current_domain.process(command, asynchronous=False))


@seller_router.delete("/products/{product_id}")
async def delete_product(product_id: str, principal: Principal = Depends(current_seller)):
    command = DeleteProduct(seller_id=principal.account_id, product_id=product_id)
    deleted_id = current_domain.process(command, asynchronous=False)
    return success("Product deleted successfully", {"productId": deleted_id})


# --- Orders ---


@seller_router.get("/orders")
async def my_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: str | None = None,
    search: str | None = None,
    principal: Principal = Depends(current_seller),
):
    result = list_seller_orders(principal.account_id, page=page, limit=limit, status=status, search=search)
    if not result["orders"]:
        return warn("No orders found", result)
    return success("Orders fetched successfully", result)


@seller_router.get("/orders/{order_id}")
async def order_detail(order_id: str, principal: Principal = Depends(current_seller)):
    return success("Order fetched successfully", seller_order_detail(principal.account_id, order_id))


@seller_router.put("/orders/{order_id}/status")
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    principal: Principal = Depends(current_seller),
):
    command = UpdateOrderStatus(seller_id=principal.account_id, order_id=order_id, status=body.status)
    result = current_domain.process(command, asynchronous=False)
    return success(f"Order status updated to {result['orderStatus']}", result)
