"""Product aggregate root with Image and Review entities.

Stock only moves through ``set_stock``, ``withdraw_stock`` and ``restock``.
``withdraw_stock`` is the conditional decrement used at order placement: it
applies only when the stock on hand covers the requested quantity.
"""

from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.catalogue.product.events import (
    ProductAdded,
    ProductDetailsUpdated,
    ProductReviewed,
    StockAdjusted,
)
from storefront.domain import storefront
from storefront.shared.errors import InsufficientStockError

MAX_IMAGES = 10


class StockChangeReason:
    SELLER_UPDATE = "SellerUpdate"
    ORDER_PLACED = "OrderPlaced"
    COMPENSATION = "Compensation"


@storefront.entity(part_of="Product")
class ProductImage:
    url = String(required=True, max_length=500)
    display_order = Integer(default=0)


@storefront.entity(part_of="Product")
class ProductReview:
    """A customer's rating and comment. Reviews are append-only."""

    customer_id = Identifier(required=True)
    customer_name = String(max_length=100)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text(required=True)
    created_at = DateTime()


@storefront.aggregate
class Product:
    name = String(required=True, max_length=200)
    description = Text()
    price = Float(required=True, min_value=0.0)
    stock = Integer(default=0, min_value=0)
    category_id = Identifier(required=True)
    seller_id = Identifier(required=True)
    images = HasMany(ProductImage)
    reviews = HasMany(ProductReview)
    rating = Float(default=0.0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def images_cannot_exceed_maximum(self):
        if len(self.images) > MAX_IMAGES:
            raise ValidationError({"images": [f"Cannot have more than {MAX_IMAGES} images"]})

    @invariant.post
    def rating_is_the_mean_of_reviews(self):
        expected = _mean_rating(self.reviews)
        if abs((self.rating or 0.0) - expected) > 1e-9:
            raise ValidationError({"rating": ["Rating must equal the mean of review ratings"]})

    @classmethod
    def create(cls, name, price, stock, category_id, seller_id, description=None, images=None):
        now = datetime.now(UTC)
        product = cls(
            name=name.strip(),
            description=description,
            price=price,
            stock=stock,
            category_id=category_id,
            seller_id=seller_id,
            rating=0.0,
            created_at=now,
            updated_at=now,
        )
        if images:
            product.replace_images(images)

        product.raise_(
            ProductAdded(
                product_id=str(product.id),
                seller_id=str(seller_id),
                category_id=str(category_id),
                name=product.name,
                price=price,
                stock=stock,
            )
        )
        return product

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    def update_details(self, name=None, description=None, price=None, category_id=None, images=None):
        if name is not None:
            if not name.strip():
                raise ValidationError({"name": ["Name cannot be blank"]})
            self.name = name.strip()
        if description is not None:
            self.description = description
        if price is not None:
            self.price = price
        if category_id is not None:
            self.category_id = category_id
        if images is not None:
            self.replace_images(images)

        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductDetailsUpdated(
                product_id=str(self.id),
                name=self.name,
                price=self.price,
                category_id=self.category_id,
            )
        )

    def replace_images(self, urls):
        if len(urls) > MAX_IMAGES:
            raise ValidationError({"images": [f"Cannot have more than {MAX_IMAGES} images"]})
        with atomic_change(self):
            for image in list(self.images):
                self.remove_images(image)
            for position, url in enumerate(urls):
                self.add_images(ProductImage(url=url, display_order=position))

    @property
    def image_urls(self) -> list[str]:
        return [image.url for image in sorted(self.images, key=lambda i: i.display_order or 0)]

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def _adjust_stock(self, new_stock, reason):
        previous = self.stock
        self.stock = new_stock
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockAdjusted(
                product_id=str(self.id),
                previous_stock=previous,
                new_stock=new_stock,
                reason=reason,
            )
        )

    def set_stock(self, stock):
        if stock is None or stock < 0:
            raise ValidationError({"stock": ["Stock cannot be negative"]})
        self._adjust_stock(stock, StockChangeReason.SELLER_UPDATE)

    def has_stock_for(self, quantity) -> bool:
        return (self.stock or 0) >= quantity

    def withdraw_stock(self, quantity):
        """Decrement stock by ``quantity`` only if enough is on hand."""
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be greater than zero"]})
        if not self.has_stock_for(quantity):
            raise InsufficientStockError(self.id, self.name, requested=quantity, available=self.stock or 0)
        self._adjust_stock(self.stock - quantity, StockChangeReason.ORDER_PLACED)

    def restock(self, quantity, reason=StockChangeReason.COMPENSATION):
        if quantity <= 0:
            raise ValidationError({"quantity": ["Quantity must be greater than zero"]})
        self._adjust_stock((self.stock or 0) + quantity, reason)

    # -------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------
    def add_review(self, customer_id, rating, comment, customer_name=None):
        if comment is None or not comment.strip():
            raise ValidationError({"comment": ["Comment is required"]})
        if rating is None or not 1 <= rating <= 5:
            raise ValidationError({"rating": ["Rating must be between 1 and 5"]})

        now = datetime.now(UTC)
        review = ProductReview(
            customer_id=customer_id,
            customer_name=customer_name,
            rating=rating,
            comment=comment.strip(),
            created_at=now,
        )
        with atomic_change(self):
            self.add_reviews(review)
            self.rating = _mean_rating(self.reviews)

        self.updated_at = now
        self.raise_(
            ProductReviewed(
                product_id=str(self.id),
                review_id=str(review.id),
                customer_id=str(customer_id),
                rating=rating,
                new_average=self.rating,
                reviewed_at=now,
            )
        )
        return review

    def to_summary(self) -> dict:
        return {
            "id": str(self.id),
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "stock": self.stock,
            "categoryId": self.category_id,
            "sellerId": self.seller_id,
            "images": self.image_urls,
            "rating": self.rating,
            "reviewCount": len(self.reviews),
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


def _mean_rating(reviews) -> float:
    if not reviews:
        return 0.0
    return sum(r.rating for r in reviews) / len(reviews)


def review_to_dict(review) -> dict:
    return {
        "id": str(review.id),
        "customerId": review.customer_id,
        "customerName": review.customer_name,
        "rating": review.rating,
        "comment": review.comment,
        "createdAt": review.created_at,
    }
