"""Seller product management: commands and handler.

Every command is scoped to the acting seller: a product owned by someone else
is reported as not found rather than forbidden.
"""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.product import Product
from storefront.catalogue.product.write_lock import serialize_product_writes
from storefront.domain import storefront
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    seller_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    description = Text()
    price = Float(required=True, min_value=0.0)
    stock = Integer(required=True, min_value=0)
    category_id = Identifier(required=True)
    images = Text()  # JSON array of image URLs


@storefront.command(part_of="Product")
class UpdateProduct:
    seller_id = Identifier(required=True)
    product_id = Identifier(required=True)
    name = String(max_length=200)
    description = Text()
    price = Float(min_value=0.0)
    stock = Integer(min_value=0)
    category_id = Identifier()
    images = Text()  # JSON array of image URLs


@storefront.command(part_of="Product")
class UpdateProductStock:
    seller_id = Identifier(required=True)
    product_id = Identifier(required=True)
    stock = Integer(required=True, min_value=0)


@storefront.command(part_of="Product")
class DeleteProduct:
    product_id = Identifier(required=True)
    seller_id = Identifier()  # Omitted when an admin deletes


def _parse_images(raw):
    if raw is None:
        return None
    images = raw
    if isinstance(raw, str):
        try:
            images = json.loads(raw)
        except json.JSONDecodeError:
            raise ValidationError({"images": ["Images must be a JSON list of URLs"]}) from None
    if not isinstance(images, list) or not all(isinstance(url, str) and url.strip() for url in images):
        raise ValidationError({"images": ["Images must be a list of URLs"]})
    return images


def load_owned_product(product_id, seller_id) -> Product:
    """Fetch a product, hiding it from sellers who do not own it."""
    product = current_domain.repository_for(Product).get(product_id)
    if seller_id is not None and str(product.seller_id) != str(seller_id):
        raise ObjectNotFoundError({"_entity": "Product not found"})
    return product


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        current_domain.repository_for(Category).get(command.category_id)

        product = Product.create(
            name=command.name,
            description=command.description,
            price=command.price,
            stock=command.stock,
            category_id=command.category_id,
            seller_id=command.seller_id,
            images=_parse_images(command.images),
        )
        current_domain.repository_for(Product).add(product)

        logger.info("Product created", product_id=str(product.id), seller_id=str(command.seller_id))
        return str(product.id)

    @serialize_product_writes
    @handle(UpdateProduct)
    def update_product(self, command):
        product = load_owned_product(command.product_id, command.seller_id)
        if command.category_id:
            current_domain.repository_for(Category).get(command.category_id)

        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            category_id=command.category_id,
            images=_parse_images(command.images),
        )
        if command.stock is not None and command.stock != product.stock:
            product.set_stock(command.stock)

        current_domain.repository_for(Product).add(product)
        return product.to_summary()

    @serialize_product_writes
    @handle(UpdateProductStock)
    def update_product_stock(self, command):
        product = load_owned_product(command.product_id, command.seller_id)
        product.set_stock(command.stock)
        current_domain.repository_for(Product).add(product)

        logger.info("Product stock updated", product_id=str(product.id), stock=product.stock)
        return {"productId": str(product.id), "stock": product.stock, "updatedAt": product.updated_at}

    @serialize_product_writes
    @handle(DeleteProduct)
    def delete_product(self, command):
        product = load_owned_product(command.product_id, command.seller_id)
        current_domain.repository_for(Product)._dao.delete(product)

        logger.info("Product deleted", product_id=str(product.id), seller_id=command.seller_id)
        return str(product.id)
