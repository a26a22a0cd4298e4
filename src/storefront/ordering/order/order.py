"""Order aggregate: immutable snapshot of a placed cart plus its fulfilment state.

State Machine:
    Placed → Processing → Shipped → Delivered
    Placed, Processing → Cancelled

Sellers drive the forward transitions and may cancel before shipment.
Customers may cancel while the order is Placed or Processing. Delivered and
Cancelled are terminal.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import InvalidStateError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.domain import storefront
from storefront.ordering.order.events import (
    OrderCancelled,
    OrderPaid,
    OrderPlaced,
    OrderStatusChanged,
)

CUSTOMER_CANCEL_REASON = "Cancelled by customer"
SELLER_CANCEL_REASON = "Cancelled by seller"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PLACED = "Placed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


class PaymentStatus(Enum):
    PENDING = "Pending"
    PAID = "Paid"


class PaymentMethod(Enum):
    COD = "COD"
    ONLINE = "ONLINE"
    CARD = "CARD"
    UPI = "UPI"


class CancellationActor(Enum):
    CUSTOMER = "Customer"
    SELLER = "Seller"


# Seller-driven transition map
_SELLER_TRANSITIONS = {
    OrderStatus.PLACED: {OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}

# States from which the customer may still cancel
_CUSTOMER_CANCELLABLE = {OrderStatus.PLACED, OrderStatus.PROCESSING}

_STATUS_TIMESTAMPS = {
    OrderStatus.PROCESSING: "processing_at",
    OrderStatus.SHIPPED: "shipped_at",
    OrderStatus.DELIVERED: "delivered_at",
    OrderStatus.CANCELLED: "cancelled_at",
}

_TRACKING_MESSAGES = {
    OrderStatus.PLACED: "Order placed successfully by customer",
    OrderStatus.PROCESSING: "Seller is preparing your order",
    OrderStatus.SHIPPED: "Order shipped and on its way",
    OrderStatus.DELIVERED: "Order delivered successfully",
}


def parse_status(value) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in OrderStatus)
        raise ValidationError({"status": [f"Invalid status '{value}'. Allowed: {allowed}"]}) from None


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """Snapshot of a cart line at placement: name and price never follow later catalogue edits."""

    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    price = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    customer_id = Identifier(required=True)
    cart_id = Identifier(required=True)
    items = HasMany(OrderItem)
    total_amount = Float(required=True, min_value=0.0)
    shipping_address = Text(required=True)
    payment_method = String(choices=PaymentMethod, required=True)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_id = String(max_length=50)
    paid_at = DateTime()
    order_status = String(choices=OrderStatus, default=OrderStatus.PLACED.value)
    cancel_reason = String(max_length=500)
    cancelled_by = String(choices=CancellationActor)
    processing_at = DateTime()
    shipped_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, cart_id, lines, shipping_address, payment_method):
        """Create an order from priced cart lines.

        Args:
            lines: List of dicts with product_id, name, price, quantity.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})
        if not shipping_address or not shipping_address.strip():
            raise ValidationError({"shipping_address": ["Shipping address is required"]})

        now = datetime.now(UTC)
        items = [OrderItem(**line) for line in lines]
        order = cls(
            customer_id=customer_id,
            cart_id=cart_id,
            items=items,
            total_amount=sum(item.line_total for item in items),
            shipping_address=shipping_address.strip(),
            payment_method=payment_method,
            payment_status=PaymentStatus.PENDING.value,
            order_status=OrderStatus.PLACED.value,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                cart_id=str(cart_id),
                item_count=len(items),
                total_amount=order.total_amount,
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    @property
    def status(self) -> OrderStatus:
        return OrderStatus(self.order_status)

    def _stamp(self, status, now):
        attribute = _STATUS_TIMESTAMPS.get(status)
        if attribute:
            setattr(self, attribute, now)
        self.updated_at = now

    def advance_status(self, new_status):
        """Seller-driven transition along the state machine."""
        target = parse_status(new_status)
        current = self.status
        if target not in _SELLER_TRANSITIONS[current]:
            raise InvalidStateError({"order_status": [f"Cannot change status from {current.value} to {target.value}"]})

        now = datetime.now(UTC)
        if target == OrderStatus.CANCELLED:
            self._cancel(CancellationActor.SELLER, SELLER_CANCEL_REASON, now)
            return

        self.order_status = target.value
        self._stamp(target, now)
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=current.value,
                new_status=target.value,
                changed_by=CancellationActor.SELLER.value,
                changed_at=now,
            )
        )

    def cancel_by_customer(self, reason=None):
        current = self.status
        if current not in _CUSTOMER_CANCELLABLE:
            raise InvalidStateError({"order_status": [f"Order cannot be cancelled once it is {current.value}"]})

        reason = reason.strip() if reason and reason.strip() else CUSTOMER_CANCEL_REASON
        self._cancel(CancellationActor.CUSTOMER, reason, datetime.now(UTC))

    def _cancel(self, actor, reason, now):
        previous = self.order_status
        self.order_status = OrderStatus.CANCELLED.value
        self.cancel_reason = reason
        self.cancelled_by = actor.value
        self._stamp(OrderStatus.CANCELLED, now)
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=previous,
                reason=reason,
                cancelled_by=actor.value,
                cancelled_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    @property
    def is_paid(self) -> bool:
        return self.payment_status == PaymentStatus.PAID.value

    def assert_payable(self, amount):
        if self.is_paid:
            raise InvalidStateError({"payment_status": ["Order already paid"]})
        if self.status == OrderStatus.CANCELLED:
            raise InvalidStateError({"order_status": ["Cancelled orders cannot be paid"]})
        if amount != self.total_amount:
            raise ValidationError({"amount": [f"Payment amount mismatch. Expected {self.total_amount}"]})

    def record_payment(self, payment_id, payment_method, amount):
        self.assert_payable(amount)

        now = datetime.now(UTC)
        self.payment_status = PaymentStatus.PAID.value
        self.payment_method = payment_method
        self.payment_id = payment_id
        self.paid_at = now
        self.updated_at = now
        self.raise_(
            OrderPaid(
                order_id=str(self.id),
                payment_id=payment_id,
                payment_method=payment_method,
                amount=amount,
                paid_at=now,
            )
        )

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    def contains_any(self, product_ids) -> bool:
        wanted = {str(pid) for pid in product_ids}
        return any(str(item.product_id) in wanted for item in self.items)

    def tracking_steps(self) -> list[dict]:
        """Chronological history reconstructed from the status timestamps."""
        steps = [
            {
                "status": OrderStatus.PLACED.value,
                "message": _TRACKING_MESSAGES[OrderStatus.PLACED],
                "date": self.created_at,
            }
        ]
        for status in (OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.DELIVERED):
            reached_at = getattr(self, _STATUS_TIMESTAMPS[status])
            if reached_at:
                steps.append({"status": status.value, "message": _TRACKING_MESSAGES[status], "date": reached_at})
        if self.status == OrderStatus.CANCELLED:
            steps.append(
                {
                    "status": OrderStatus.CANCELLED.value,
                    "message": self.cancel_reason or CUSTOMER_CANCEL_REASON,
                    "date": self.cancelled_at,
                }
            )
        return steps

    def item_lines(self) -> list[dict]:
        return [
            {
                "itemId": str(item.id),
                "productId": str(item.product_id),
                "name": item.name,
                "price": item.price,
                "quantity": item.quantity,
                "lineTotal": item.line_total,
            }
            for item in self.items
        ]

    def to_summary(self) -> dict:
        return {
            "orderId": str(self.id),
            "customerId": str(self.customer_id),
            "totalAmount": self.total_amount,
            "shippingAddress": self.shipping_address,
            "paymentMethod": self.payment_method,
            "paymentStatus": self.payment_status,
            "paymentId": self.payment_id,
            "paidAt": self.paid_at,
            "orderStatus": self.order_status,
            "cancelReason": self.cancel_reason,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
