"""Cart read model, priced from the live catalogue at read time."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.ordering.cart.cart import ShoppingCart


def _live_product(product_id) -> Product | None:
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        return None


def empty_cart_view(customer_id) -> dict:
    return {"customerId": str(customer_id), "items": [], "totalItems": 0, "totalAmount": 0}


def cart_view(cart) -> dict:
    """Lines with current product name, price and images; deleted products show no name and zero price."""
    lines = []
    total_items = 0
    total_amount = 0.0

    for item in cart.ordered_items:
        product = _live_product(item.product_id)
        price = product.price if product else 0
        lines.append(
            {
                "itemId": str(item.id),
                "productId": str(item.product_id),
                "name": product.name if product else None,
                "price": price,
                "quantity": item.quantity,
                "images": product.image_urls if product else [],
            }
        )
        total_items += item.quantity
        total_amount += price * item.quantity

    return {
        "cartId": str(cart.id),
        "customerId": str(cart.customer_id),
        "items": lines,
        "totalItems": total_items,
        "totalAmount": total_amount,
        "updatedAt": cart.updated_at,
    }


def get_cart(customer_id) -> dict:
    """The customer's cart, or the empty-cart shape when none exists yet."""
    cart = current_domain.repository_for(ShoppingCart).find_for_customer(customer_id)
    if cart is None:
        return empty_cart_view(customer_id)
    return cart_view(cart)
