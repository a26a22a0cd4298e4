"""Admin endpoints: user management, categories, catalogue moderation and sellers."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.auth import current_admin
from storefront.api.envelope import success, warn
from storefront.api.schemas import (
    CreateCategoryRequest,
    CreateUserRequest,
    LoginRequest,
    UpdateCategoryRequest,
    UpdateSellerStatusRequest,
    UpdateUserRequest,
)
from storefront.catalogue.category.management import CreateCategory, DeleteCategory, UpdateCategory
from storefront.catalogue.product.management import DeleteProduct
from storefront.catalogue.queries import get_category, list_categories, list_products
from storefront.identity.account import AccountRole
from storefront.identity.administration import UpdateSellerStatus, get_profile, list_sellers
from storefront.identity.authentication import AuthenticateAccount
from storefront.identity.registration import RegisterAccount
from storefront.identity.tokens import Principal
from storefront.identity.user_management import (
    DeleteAccount,
    UpdateAccount,
    get_account,
    get_seller,
    list_accounts,
)

admin_router = APIRouter(prefix="/api/admin", tags=["admin"])


@admin_router.post("/login")
async def login(body: LoginRequest):
    command = AuthenticateAccount(email=body.email, password=body.password, role=AccountRole.ADMIN.value)
    return success("Login successful", current_domain.process(command, asynchronous=False))


@admin_router.get("/me")
async def me(principal: Principal = Depends(current_admin)):
    return success("Profile fetched successfully", get_profile(principal.account_id))


# --- Users ---


@admin_router.get("/users")
async def users(
    search: str | None = None,
    role: str | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(current_admin),
):
    result = list_accounts(search=search, role=role, page=page, limit=limit)
    if not result["users"]:
        return warn("No users found", result)
    return success("Users fetched successfully", result)


@admin_router.get("/users/{account_id}")
async def user_detail(account_id: str, principal: Principal = Depends(current_admin)):
    return success("User fetched successfully", get_account(account_id))


@admin_router.post("/users", status_code=201)
async def create_user(body: CreateUserRequest, principal: Principal = Depends(current_admin)):
    command = RegisterAccount(
        name=body.name,
        email=body.email,
        password=body.password,
        role=body.role,
        phone=body.phone,
        address=body.address,
        store_name=body.store_name,
    )
    account_id = current_domain.process(command, asynchronous=False)
    return success("User created successfully", get_account(account_id), status_code=201)


@admin_router.put("/users/{account_id}")
async def update_user(account_id: str, body: UpdateUserRequest, principal: Principal = Depends(current_admin)):
    command = UpdateAccount(
        account_id=account_id,
        acting_admin_id=principal.account_id,
        name=body.name,
        email=body.email,
        password=body.password,
        phone=body.phone,
        address=body.address,
        role=body.role,
        store_name=body.store_name,
    )
    return success("User updated successfully", current_domain.process(command, asynchronous=False))


@admin_router.delete("/users/{account_id}")
async def delete_user(account_id: str, principal: Principal = Depends(current_admin)):
    command = DeleteAccount(account_id=account_id, acting_admin_id=principal.account_id)
    deleted_id = current_domain.process(command, asynchronous=False)
    return success("User deleted successfully", {"userId": deleted_id})


# --- Categories ---


@admin_router.get("/categories")
async def categories(principal: Principal = Depends(current_admin)):
    return success("Categories fetched successfully", list_categories())


@admin_router.get("/categories/{category_id}")
async def category_detail(category_id: str, principal: Principal = Depends(current_admin)):
    return success("Category fetched successfully", get_category(category_id))


@admin_router.post("/categories", status_code=201)
async def create_category(body: CreateCategoryRequest, principal: Principal = Depends(current_admin)):
    command = CreateCategory(
        name=body.name,
        description=body.description,
        parent_id=body.parent_id,
        created_by=principal.account_id,
    )
    category_id = current_domain.process(command, asynchronous=False)
    return success("Category created successfully", {"categoryId": category_id}, status_code=201)


@admin_router.put("/categories/{category_id}")
async def update_category(
    category_id: str,
    body: UpdateCategoryRequest,
    principal: Principal = Depends(current_admin),
):
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        parent_id=body.parent_id,
        clear_parent=body.clear_parent,
    )
    return success("Category updated successfully", current_domain.process(command, asynchronous=False))


@admin_router.delete("/categories/{category_id}")
async def delete_category(category_id: str, principal: Principal = Depends(current_admin)):
    deleted_id = current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return success("Category deleted successfully", {"categoryId": deleted_id})


# --- Products ---


@admin_router.get("/products")
async def all_products(
    search: str | None = None,
    category_id: str | None = Query(None, alias="categoryId"),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    principal: Principal = Depends(current_admin),
):
    result = list_products(search=search, category_id=category_id, page=page, limit=limit)
    if not result["products"]:
        return warn("No products found", result)
    return success("Products fetched successfully", result)


@admin_router.delete("/products/{product_id}")
async def delete_product(product_id: str, principal: Principal = Depends(current_admin)):
    deleted_id = current_domain.process(DeleteProduct(product_id=product_id), asynchronous=False)
    return success("Product deleted successfully", {"productId": deleted_id})


# --- Sellers ---


@admin_router.get("/sellers")
async def sellers(status: str | None = None, principal: Principal = Depends(current_admin)):
    return success("Sellers fetched successfully", list_sellers(status))


@admin_router.put("/sellers/{seller_id}/status")
async def update_seller_status(
    seller_id: str,
    body: UpdateSellerStatusRequest,
    principal: Principal = Depends(current_admin),
):
    command = UpdateSellerStatus(seller_id=seller_id, status=body.status)
    return success("Seller status updated", current_domain.process(command, asynchronous=False))


@admin_router.get("/sellers/{seller_id}")
async def seller_detail(seller_id: str, principal: Principal = Depends(current_admin)):
    return success("Seller fetched successfully", get_seller(seller_id))


@admin_router.delete("/sellers/{seller_id}")
async def delete_seller(seller_id: str, principal: Principal = Depends(current_admin)):
    command = DeleteAccount(
        account_id=seller_id,
        acting_admin_id=principal.account_id,
        role=AccountRole.SELLER.value,
    )
    deleted_id = current_domain.process(command, asynchronous=False)
    return success("Seller deleted successfully", {"sellerId": deleted_id})
