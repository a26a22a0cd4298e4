"""Seller-driven order status updates: command and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.ordering.order.order import Order, parse_status
from storefront.utils.logging import get_logger
from storefront.utils.queries import fetch_all

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    seller_id = Identifier(required=True)
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)


def seller_product_ids(seller_id) -> set[str]:
    query = current_domain.repository_for(Product)._dao.query.filter(seller_id=str(seller_id))
    return {str(p.id) for p in fetch_all(query)}


def load_seller_order(seller_id, order_id) -> tuple[Order, set[str]]:
    """Fetch an order visible to the seller, i.e. containing one of their current products."""
    product_ids = seller_product_ids(seller_id)
    if not product_ids:
        raise ObjectNotFoundError({"_entity": "No products found for this seller"})

    try:
        order = current_domain.repository_for(Order).get(order_id)
    except ObjectNotFoundError:
        raise ObjectNotFoundError({"_entity": "Order not found"}) from None
    if not order.contains_any(product_ids):
        raise ObjectNotFoundError({"_entity": "Order not found"})
    return order, product_ids


@storefront.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        target = parse_status(command.status)
        order, _ = load_seller_order(command.seller_id, command.order_id)

        previous = order.order_status
        order.advance_status(target.value)
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order status changed",
            order_id=str(order.id),
            seller_id=str(command.seller_id),
            previous_status=previous,
            new_status=order.order_status,
        )
        return {"orderId": str(order.id), "orderStatus": order.order_status, "updatedAt": order.updated_at}
