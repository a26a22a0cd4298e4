"""Domain events for the Product aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductAdded:
    """A seller listed a new product."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    category_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    stock = Integer(required=True)


@storefront.event(part_of="Product")
class ProductDetailsUpdated:
    __version__ = "v1"

    product_id = Identifier(required=True)
    name = String(required=True)
    price = Float(required=True)
    category_id = Identifier()


@storefront.event(part_of="Product")
class StockAdjusted:
    """Available stock changed through a seller update, an order or a compensation."""

    __version__ = "v1"

    product_id = Identifier(required=True)
    previous_stock = Integer(required=True)
    new_stock = Integer(required=True)
    reason = String(required=True)


@storefront.event(part_of="Product")
class ProductReviewed:
    __version__ = "v1"

    product_id = Identifier(required=True)
    review_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    rating = Integer(required=True)
    new_average = Float(required=True)
    reviewed_at = DateTime(required=True)
