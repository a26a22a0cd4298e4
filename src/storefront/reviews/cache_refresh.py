"""Keeps the cached review list in step with committed reviews.

``ProductReviewed`` is dispatched only after the unit of work that added the
review has committed, so a rolled-back review never reaches the cache.
"""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.catalogue.product.events import ProductReviewed
from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.reviews.queries import refresh_cached_reviews
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.event_handler(part_of=Product)
class ReviewCacheEventHandler:
    @handle(ProductReviewed)
    def on_product_reviewed(self, event: ProductReviewed) -> None:
        try:
            product = current_domain.repository_for(Product).get(event.product_id)
        except ObjectNotFoundError:
            logger.warning("Reviewed product vanished before cache refresh", product_id=str(event.product_id))
            return

        refresh_cached_reviews(product)
        logger.debug("Review cache refreshed", product_id=str(product.id), reviews=len(product.reviews))
