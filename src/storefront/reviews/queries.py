"""Product review reads, served through the optional cache."""

from protean.utils.globals import current_domain

from storefront.cache import get_cache
from storefront.catalogue.product.product import Product, review_to_dict
from storefront.utils import settings
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def reviews_cache_key(product_id) -> str:
    return f"product:{product_id}:reviews"


def _reviews_payload(product: Product) -> dict:
    reviews = sorted(product.reviews, key=lambda r: r.created_at, reverse=True)
    return {
        "productId": str(product.id),
        "rating": product.rating,
        "totalReviews": len(reviews),
        "reviews": [review_to_dict(r) for r in reviews],
    }


def _cache_read(key):
    cache = get_cache()
    if cache is None:
        return None
    try:
        return cache.get(key)
    except Exception as exc:  # A broken cache degrades to a miss
        logger.warning("Cache read failed", key=key, error=str(exc))
        return None


def _cache_write(key, value):
    cache = get_cache()
    if cache is None:
        return
    try:
        cache.set(key, value, settings.review_cache_ttl_seconds())
    except Exception as exc:
        logger.warning("Cache write failed", key=key, error=str(exc))


def refresh_cached_reviews(product: Product) -> None:
    _cache_write(reviews_cache_key(product.id), _reviews_payload(product))


def get_product_reviews(product_id) -> dict:
    key = reviews_cache_key(product_id)
    cached = _cache_read(key)
    if cached is not None:
        logger.debug("Review cache hit", product_id=str(product_id))
        return cached

    product = current_domain.repository_for(Product).get(product_id)
    payload = _reviews_payload(product)
    _cache_write(key, payload)
    return payload
