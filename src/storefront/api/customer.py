"""Customer endpoints: account, cart, orders, payments and reviews."""

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from storefront.api.auth import current_customer
from storefront.api.envelope import success, warn
from storefront.api.schemas import (
    AddReviewRequest,
    AddToCartRequest,
    CancelOrderRequest,
    LoginRequest,
    MakePaymentRequest,
    PlaceOrderRequest,
    RegisterCustomerRequest,
    UpdateCartItemRequest,
)
from storefront.identity.account import AccountRole
from storefront.identity.administration import get_profile
from storefront.identity.authentication import AuthenticateAccount
from storefront.identity.registration import RegisterAccount
from storefront.identity.tokens import Principal
from storefront.ordering.cart.items import AddToCart, RemoveCartItem, UpdateCartItem
from storefront.ordering.cart.views import get_cart
from storefront.ordering.order.cancellation import CancelOrder
from storefront.ordering.order.placement import PlaceOrder
from storefront.ordering.order.queries import (
    customer_order_detail,
    list_customer_orders,
    track_customer_order,
)
from storefront.payments.payment import MakePayment
from storefront.reviews.submission import AddProductReview

customer_router = APIRouter(prefix="/api/customer", tags=["customer"])


# --- Account ---


@customer_router.post("/register", status_code=201)
async def register(body: RegisterCustomerRequest):
    command = RegisterAccount(
        name=body.name,
        email=body.email,
        password=body.password,
        role=AccountRole.CUSTOMER.value,
        phone=body.phone,
        address=body.address,
    )
    account_id = current_domain.process(command, asynchronous=False)
    return success("Customer registered successfully", get_profile(account_id), status_code=201)


@customer_router.post("/login")
async def login(body: LoginRequest):
    command = AuthenticateAccount(email=body.email, password=body.password, role=AccountRole.CUSTOMER.value)
    result = current_domain.process(command, asynchronous=False)
    return success("Login successful", result)


@customer_router.get("/profile")
async def profile(principal: Principal = Depends(current_customer)):
    return success("Profile fetched successfully", get_profile(principal.account_id))


# --- Cart ---


@customer_router.post("/cart")
async def add_to_cart(body: AddToCartRequest, principal: Principal = Depends(current_customer)):
    command = AddToCart(customer_id=principal.account_id, product_id=body.product_id, quantity=body.quantity)
    cart = current_domain.process(command, asynchronous=False)
    return success("Item added to cart", cart)


@customer_router.get("/cart")
async def view_cart(principal: Principal = Depends(current_customer)):
    cart = get_cart(principal.account_id)
    if not cart["items"]:
        return warn("Cart is empty", cart)
    return success("Cart fetched successfully", cart)


@customer_router.put("/cart/{item_id}")
async def update_cart_item(item_id: str, body: UpdateCartItemRequest, principal: Principal = Depends(current_customer)):
    command = UpdateCartItem(customer_id=principal.account_id, item_id=item_id, quantity=body.quantity)
    cart = current_domain.process(command, asynchronous=False)
    return success("Cart item updated", cart)


@customer_router.delete("/cart/{item_id}")
async def remove_cart_item(item_id: str, principal: Principal = Depends(current_customer)):
    command = RemoveCartItem(customer_id=principal.account_id, item_id=item_id)
    cart = current_domain.process(command, asynchronous=False)
    return success("Item removed from cart", cart)


# --- Orders ---


@customer_router.post("/orders", status_code=201)
async def place_order(body: PlaceOrderRequest, principal: Principal = Depends(current_customer)):
    command = PlaceOrder(
        customer_id=principal.account_id,
        cart_id=body.cart_id,
        shipping_address=body.shipping_address,
        payment_method=body.payment_method,
    )
    order = current_domain.process(command, asynchronous=False)
    return success("Order placed successfully", order, status_code=201)


@customer_router.get("/orders")
async def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: str | None = None,
    principal: Principal = Depends(current_customer),
):
    result = list_customer_orders(principal.account_id, page=page, limit=limit, status=status)
    if not result["orders"]:
        return warn("No orders found", result)
    return success("Orders fetched successfully", result)


@customer_router.get("/orders/{order_id}")
async def order_detail(order_id: str, principal: Principal = Depends(current_customer)):
    return success("Order fetched successfully", customer_order_detail(principal.account_id, order_id))


@customer_router.put("/orders/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    principal: Principal = Depends(current_customer),
):
    command = CancelOrder(
        customer_id=principal.account_id,
        order_id=order_id,
        reason=body.reason if body else None,
    )
    result = current_domain.process(command, asynchronous=False)
    return success("Order cancelled successfully", result)


@customer_router.get("/orders/{order_id}/track")
async def track_order(order_id: str, principal: Principal = Depends(current_customer)):
    return success("Order tracking fetched successfully", track_customer_order(principal.account_id, order_id))


# --- Payments ---


@customer_router.post("/payments")
async def make_payment(body: MakePaymentRequest, principal: Principal = Depends(current_customer)):
    command = MakePayment(
        customer_id=principal.account_id,
        order_id=body.order_id,
        payment_method=body.payment_method,
        amount=body.amount,
    )
    receipt = current_domain.process(command, asynchronous=False)
    return success("Payment successful", receipt)


# --- Reviews ---


@customer_router.post("/products/{product_id}/reviews", status_code=201)
async def add_review(product_id: str, body: AddReviewRequest, principal: Principal = Depends(current_customer)):
    command = AddProductReview(
        product_id=product_id,
        customer_id=principal.account_id,
        rating=body.rating,
        comment=body.comment,
    )
    review = current_domain.process(command, asynchronous=False)
    return success("Review added successfully", review, status_code=201)
