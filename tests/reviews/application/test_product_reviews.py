"""Application tests for review submission and cached review reads."""

import pytest
from protean import current_domain
from protean.adapters.repository.memory import MemorySession
from protean.exceptions import ObjectNotFoundError, TransactionError, ValidationError
from support.factories import make_account, make_product

from storefront.cache import MemoryCache, set_cache
from storefront.catalogue.product.product import Product
from storefront.identity.account import AccountRole
from storefront.reviews.queries import get_product_reviews, reviews_cache_key
from storefront.reviews.submission import AddProductReview


def _review(product_id, customer_id, rating=5, comment="Great"):
    return current_domain.process(
        AddProductReview(product_id=product_id, customer_id=customer_id, rating=rating, comment=comment),
        asynchronous=False,
    )


@pytest.fixture
def cache():
    memory = MemoryCache()
    set_cache(memory)
    return memory


@pytest.fixture
def customer():
    return make_account(AccountRole.CUSTOMER, name="Asha")


class TestAddProductReview:
    def test_rating_is_the_mean(self, customer):
        product = make_product()
        other = make_account(AccountRole.CUSTOMER)

        first = _review(str(product.id), str(customer.id), rating=5)
        assert first["productRating"] == 5.0
        assert first["customerName"] == "Asha"

        second = _review(str(product.id), str(other.id), rating=4)
        assert second["productRating"] == 4.5

        third = _review(str(product.id), str(customer.id), rating=3)
        assert third["productRating"] == 4.0
        assert current_domain.repository_for(Product).get(product.id).rating == 4.0

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, customer, rating):
        product = make_product()
        with pytest.raises(ValidationError):
            _review(str(product.id), str(customer.id), rating=rating)

    def test_blank_comment(self, customer):
        product = make_product()
        with pytest.raises(ValidationError):
            _review(str(product.id), str(customer.id), comment="   ")
        assert current_domain.repository_for(Product).get(product.id).reviews == []

    def test_unknown_product(self, customer):
        with pytest.raises(ObjectNotFoundError):
            _review("missing", str(customer.id))

    def test_unknown_customer(self):
        product = make_product()
        with pytest.raises(ObjectNotFoundError):
            _review(str(product.id), "nobody")

    def test_seller_cannot_review(self):
        product = make_product()
        seller = make_account(AccountRole.SELLER)
        with pytest.raises(ObjectNotFoundError):
            _review(str(product.id), str(seller.id))


class TestCachedReviewReads:
    def test_read_through_populates_cache(self, cache):
        product = make_product()
        key = reviews_cache_key(product.id)
        assert cache.get(key) is None

        payload = get_product_reviews(str(product.id))
        assert payload["totalReviews"] == 0
        assert cache.get(key) == payload

    def test_cached_payload_is_served(self, cache):
        product = make_product()
        cache.set(reviews_cache_key(product.id), {"productId": str(product.id), "reviews": ["cached"]}, 600)

        assert get_product_reviews(str(product.id))["reviews"] == ["cached"]

    def test_new_review_refreshes_cache(self, cache, customer):
        product = make_product()
        get_product_reviews(str(product.id))

        _review(str(product.id), str(customer.id), rating=4, comment="Solid")

        cached = cache.get(reviews_cache_key(product.id))
        assert cached["totalReviews"] == 1
        assert cached["rating"] == 4.0
        assert cached["reviews"][0]["comment"] == "Solid"

    def test_review_lost_at_commit_never_reaches_cache(self, cache, customer, monkeypatch):
        product = make_product()
        before = get_product_reviews(str(product.id))

        def failing_commit(session):
            raise RuntimeError("storage unavailable")

        monkeypatch.setattr(MemorySession, "commit", failing_commit)
        with pytest.raises(TransactionError):
            _review(str(product.id), str(customer.id), rating=1, comment="Never saved")
        monkeypatch.undo()

        assert cache.get(reviews_cache_key(product.id)) == before
        assert current_domain.repository_for(Product).get(product.id).reviews == []
        assert get_product_reviews(str(product.id))["totalReviews"] == 0

    def test_newest_first(self, cache, customer):
        product = make_product()
        _review(str(product.id), str(customer.id), comment="First")
        _review(str(product.id), str(customer.id), comment="Second")

        comments = [r["comment"] for r in get_product_reviews(str(product.id))["reviews"]]
        assert comments == ["Second", "First"]

    def test_works_without_cache(self, customer):
        set_cache(None)
        product = make_product()
        _review(str(product.id), str(customer.id), rating=2)

        payload = get_product_reviews(str(product.id))
        assert payload["rating"] == 2.0
        assert payload["totalReviews"] == 1

    def test_unknown_product_is_not_found(self, cache):
        with pytest.raises(ObjectNotFoundError):
            get_product_reviews("missing")
