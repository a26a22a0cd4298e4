"""Cart item management: commands and handler.

Commands address the cart through its owner: a customer has at most one cart,
created on the first add.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.ordering.cart.cart import ShoppingCart
from storefront.ordering.cart.views import cart_view


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class RemoveCartItem:
    customer_id = Identifier(required=True)
    item_id = Identifier(required=True)


def _existing_cart(repo, customer_id) -> ShoppingCart:
    cart = repo.find_for_customer(customer_id)
    if cart is None:
        raise ObjectNotFoundError({"_entity": "Cart not found"})
    return cart


@storefront.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.find_for_customer(command.customer_id) or ShoppingCart.create(command.customer_id)
        cart.add_item(product_id=command.product_id, quantity=command.quantity)
        repo.add(cart)
        return cart_view(cart)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(repo, command.customer_id)
        cart.update_item_quantity(item_id=command.item_id, new_quantity=command.quantity)
        repo.add(cart)
        return cart_view(cart)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(repo, command.customer_id)
        cart.remove_item(item_id=command.item_id)
        repo.add(cart)
        return cart_view(cart)
