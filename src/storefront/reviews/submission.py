"""AddProductReview: append a customer's review to a product.

The product's rating is recomputed as the mean over all its reviews. The cached
review list is refreshed from ``ProductReviewed`` once the review is committed.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product, review_to_dict
from storefront.catalogue.product.write_lock import serialize_product_writes
from storefront.domain import storefront
from storefront.identity.account import Account, AccountRole
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class AddProductReview:
    product_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text(required=True)


@storefront.command_handler(part_of=Product)
class AddProductReviewHandler:
    @serialize_product_writes
    @handle(AddProductReview)
    def add_product_review(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        try:
            customer = current_domain.repository_for(Account).get(command.customer_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError({"_entity": "Customer not found"}) from None
        if not customer.has_role(AccountRole.CUSTOMER):
            raise ObjectNotFoundError({"_entity": "Customer not found"})

        review = product.add_review(
            customer_id=command.customer_id,
            rating=command.rating,
            comment=command.comment,
            customer_name=customer.name,
        )
        repo.add(product)

        logger.info(
            "Review added",
            product_id=str(product.id),
            customer_id=str(command.customer_id),
            rating=command.rating,
            average=product.rating,
        )
        return {**review_to_dict(review), "productId": str(product.id), "productRating": product.rating}
