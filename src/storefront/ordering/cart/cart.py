"""Shopping Cart aggregate: one per customer, drained into an order at placement.

Line items are kept in insertion order. Adding a product that already has a
line increases that line's quantity. No stock is reserved while items sit in
the cart.
"""

from datetime import UTC, datetime

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.domain import storefront
from storefront.ordering.cart.events import (
    CartEmptied,
    CartItemAdded,
    CartItemRemoved,
    CartQuantityUpdated,
)


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime()


@storefront.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    @property
    def ordered_items(self) -> list[CartItem]:
        """Line items in the order they were first added."""
        return sorted(self.items, key=lambda i: i.added_at or self.created_at)

    def _find_item(self, item_id) -> CartItem:
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError({"_entity": "Item not found in cart"})
        return item

    def add_item(self, product_id, quantity):
        """Add a product to the cart, or increase its quantity if already present."""
        if quantity is None or quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be greater than zero"]})

        existing = next((i for i in self.items if str(i.product_id) == str(product_id)), None)
        now = datetime.now(UTC)

        if existing:
            existing.quantity += quantity
            item_id = str(existing.id)
        else:
            item = CartItem(product_id=product_id, quantity=quantity, added_at=now)
            self.add_items(item)
            item_id = str(item.id)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                item_id=item_id,
                product_id=str(product_id),
                quantity=quantity,
            )
        )
        return item_id

    def update_item_quantity(self, item_id, new_quantity):
        if new_quantity is None or new_quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be greater than zero"]})

        item = self._find_item(item_id)
        previous_quantity = item.quantity
        item.quantity = new_quantity
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartQuantityUpdated(
                cart_id=str(self.id),
                item_id=str(item_id),
                previous_quantity=previous_quantity,
                new_quantity=new_quantity,
            )
        )

    def remove_item(self, item_id):
        item = self._find_item(item_id)
        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), item_id=str(item_id)))

    def empty(self):
        """Drop every line; the cart itself is kept for the customer's next order."""
        removed = 0
        for item in list(self.items):
            self.remove_items(item)
            removed += 1
        self.updated_at = datetime.now(UTC)

        self.raise_(CartEmptied(cart_id=str(self.id), items_removed=removed))

    @property
    def is_empty(self) -> bool:
        return not self.items


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def find_for_customer(self, customer_id) -> ShoppingCart | None:
        """The customer's single cart, if one has been created."""
        carts = self._dao.query.filter(customer_id=str(customer_id)).all().items
        return carts[0] if carts else None
