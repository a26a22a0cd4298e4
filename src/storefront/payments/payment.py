"""Payment against an order: command and handler.

The paid amount must match the order total exactly. A paid order cannot be
paid again; its payment reference and timestamp stay as first recorded.
"""

from protean import handle
from protean.exceptions import InvalidOperationError, ValidationError
from protean.fields import Float, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.ordering.order.order import Order, PaymentMethod
from storefront.ordering.order.queries import load_customer_order
from storefront.payments.gateway import get_gateway
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class MakePayment:
    customer_id = Identifier(required=True)
    order_id = Identifier(required=True)
    payment_method = String(required=True, choices=PaymentMethod)
    amount = Float(required=True)


@storefront.command_handler(part_of=Order)
class MakePaymentHandler:
    @handle(MakePayment)
    def make_payment(self, command):
        if command.amount <= 0:
            raise ValidationError({"amount": ["Amount must be greater than zero"]})

        order = load_customer_order(command.customer_id, command.order_id)
        order.assert_payable(command.amount)

        result = get_gateway().charge(str(order.id), command.amount, command.payment_method)
        if not result.success:
            logger.warning("Payment declined", order_id=str(order.id), reason=result.failure_reason)
            raise InvalidOperationError({"payment": [result.failure_reason or "Payment declined"]})

        order.record_payment(result.payment_id, command.payment_method, command.amount)
        current_domain.repository_for(Order).add(order)

        logger.info("Payment recorded", order_id=str(order.id), payment_id=order.payment_id, amount=command.amount)
        return {
            "receiptId": order.payment_id,
            "orderId": str(order.id),
            "paymentMethod": order.payment_method,
            "amount": command.amount,
            "paymentStatus": order.payment_status,
            "paidAt": order.paid_at,
        }
