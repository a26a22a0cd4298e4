"""Order placement: drains a customer's cart into an order.

The handler runs in a single unit of work: stock withdrawals, the new order and
the emptied cart are committed together, and any failure discards them all.
It holds the product write lock throughout, so the stock it checks is the stock
it withdraws from.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.catalogue.product.write_lock import serialize_product_writes
from storefront.domain import storefront
from storefront.ordering.cart.cart import ShoppingCart
from storefront.ordering.order.order import Order, PaymentMethod
from storefront.ordering.order.stock import StockLedger, requested_quantities
from storefront.shared.errors import InsufficientStockError
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    shipping_address = Text(required=True)
    payment_method = String(required=True, choices=PaymentMethod)


def _load_products(cart) -> dict[str, Product]:
    repo = current_domain.repository_for(Product)
    products = {}
    for item in cart.ordered_items:
        product_id = str(item.product_id)
        if product_id in products:
            continue
        try:
            products[product_id] = repo.get(product_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError({"_entity": f"Product {product_id} not found"}) from None
    return products


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @serialize_product_writes
    @handle(PlaceOrder)
    def place_order(self, command):
        if not command.shipping_address.strip():
            raise ValidationError({"shipping_address": ["Shipping address is required"]})

        cart_repo = current_domain.repository_for(ShoppingCart)
        try:
            cart = cart_repo.get(command.cart_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError({"_entity": "Cart not found"}) from None
        if str(cart.customer_id) != str(command.customer_id):
            raise ObjectNotFoundError({"_entity": "Cart not found"})
        if cart.is_empty:
            raise ValidationError({"cart": ["Cart is empty"]})

        products = _load_products(cart)

        # Snapshot name and price from the live catalogue
        lines = [
            {
                "product_id": str(item.product_id),
                "name": products[str(item.product_id)].name,
                "price": products[str(item.product_id)].price,
                "quantity": item.quantity,
            }
            for item in cart.ordered_items
        ]

        # Reject before touching any stock when a line cannot be covered
        for product_id, quantity in requested_quantities(lines).items():
            product = products[product_id]
            if not product.has_stock_for(quantity):
                raise InsufficientStockError(product.id, product.name, requested=quantity, available=product.stock)

        StockLedger(products).withdraw(lines)

        order = Order.place(
            customer_id=command.customer_id,
            cart_id=str(cart.id),
            lines=lines,
            shipping_address=command.shipping_address,
            payment_method=command.payment_method,
        )
        current_domain.repository_for(Order).add(order)

        cart.empty()
        cart_repo.add(cart)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
            total_amount=order.total_amount,
            items=len(lines),
        )
        return {
            "orderId": str(order.id),
            "totalAmount": order.total_amount,
            "paymentMethod": order.payment_method,
            "paymentStatus": order.payment_status,
            "orderStatus": order.order_status,
            "createdAt": order.created_at,
        }
