"""Customer order cancellation: command and handler.

Stock withdrawn at placement is not returned on cancellation.
"""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.order import Order
from storefront.ordering.order.queries import load_customer_order
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    reason = String(max_length=500)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        order = load_customer_order(command.customer_id, command.order_id)
        order.cancel_by_customer(command.reason)
        current_domain.repository_for(Order).add(order)

        logger.info("Order cancelled by customer", order_id=str(order.id), reason=order.cancel_reason)
        return {
            "orderId": str(order.id),
            "orderStatus": order.order_status,
            "cancelReason": order.cancel_reason,
            "cancelledAt": order.cancelled_at,
        }
