"""Pydantic request schemas for the storefront API.

Bodies are accepted in camelCase (``shippingAddress``) or snake_case.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# --- Identity ---


class RegisterCustomerRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Asha Rao",
                    "email": "asha@example.com",
                    "password": "s3cret-pass",
                    "phone": "9876543210",
                    "address": "12 MG Road, Bengaluru",
                }
            ]
        },
    )

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)
    phone: str | None = Field(None, max_length=20)
    address: str | None = None


class RegisterSellerRequest(RegisterCustomerRequest):
    store_name: str = Field(..., min_length=1, max_length=150)


class LoginRequest(CamelModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=128)


class UpdateSellerStatusRequest(CamelModel):
    status: str


class UpdateSellerProfileRequest(CamelModel):
    store_name: str | None = Field(None, max_length=150)
    address: str | None = None
    phone: str | None = Field(None, max_length=20)
    description: str | None = None


class CreateUserRequest(RegisterCustomerRequest):
    role: str = "Customer"
    store_name: str | None = Field(None, max_length=150)


class UpdateUserRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    email: str | None = Field(None, max_length=254)
    password: str | None = Field(None, max_length=128)
    phone: str | None = Field(None, max_length=20)
    address: str | None = None
    role: str | None = None
    store_name: str | None = Field(None, max_length=150)


# --- Catalogue ---


class CreateCategoryRequest(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    parent_id: str | None = None


class UpdateCategoryRequest(CamelModel):
    name: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = None
    parent_id: str | None = None
    clear_parent: bool = False


class CreateProductRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "name": "Steel Water Bottle",
                    "description": "1 litre, double walled",
                    "price": 499.0,
                    "stock": 25,
                    "categoryId": "category-id",
                    "images": ["https://cdn.example.com/bottle-front.jpg"],
                }
            ]
        },
    )

    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    price: float
    stock: int
    category_id: str
    images: list[str] = Field(default_factory=list)


class UpdateProductRequest(CamelModel):
    name: str | None = Field(None, max_length=200)
    description: str | None = None
    price: float | None = None
    stock: int | None = None
    category_id: str | None = None
    images: list[str] | None = None


class UpdateStockRequest(CamelModel):
    stock: int


# --- Cart ---


class AddToCartRequest(CamelModel):
    product_id: str
    quantity: int = 1


class UpdateCartItemRequest(CamelModel):
    quantity: int


# --- Orders ---


class PlaceOrderRequest(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "cartId": "cart-id",
                    "shippingAddress": "12 MG Road, Bengaluru 560001",
                    "paymentMethod": "COD",
                }
            ]
        },
    )

    cart_id: str
    shipping_address: str
    payment_method: str


class CancelOrderRequest(CamelModel):
    reason: str | None = Field(None, max_length=500)


class UpdateOrderStatusRequest(CamelModel):
    status: str


# --- Payments & reviews ---


class MakePaymentRequest(CamelModel):
    order_id: str
    payment_method: str
    amount: float


class AddReviewRequest(CamelModel):
    rating: int
    comment: str
