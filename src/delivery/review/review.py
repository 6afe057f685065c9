"""Review aggregate: a customer's rating of a delivered order."""

from datetime import UTC, datetime

from protean.fields import DateTime, HasMany, Identifier, Integer, String, Text

from delivery.domain import delivery
from delivery.review.events import ReviewSubmitted
from delivery.shared.errors import InvalidRequestError

MIN_RATING = 1
MAX_RATING = 5


def check_rating(rating, code="REVIEW_001"):
    if rating is None or not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRequestError(code, f"Rating must be between {MIN_RATING} and {MAX_RATING}")


@delivery.entity(part_of="Review")
class ProductRating:
    product_id = Identifier(required=True)
    product_name = String(max_length=255)
    rating = Integer(required=True, min_value=MIN_RATING, max_value=MAX_RATING)
    comment = Text()


@delivery.aggregate
class Review:
    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    rating = Integer(required=True, min_value=MIN_RATING, max_value=MAX_RATING)
    comment = Text()
    product_ratings = HasMany(ProductRating)
    created_at = DateTime()

    @classmethod
    def submit(cls, order, rating, comment=None, product_ratings=None):
        """Build a review for ``order``.

        ``product_ratings`` is a list of dicts with product_id, product_name,
        rating and comment; the caller has already checked them against the
        order's items.
        """
        check_rating(rating)
        now = datetime.now(UTC)
        review = cls(
            order_id=order.id,
            customer_id=order.customer_id,
            shop_id=order.shop_id,
            rating=rating,
            comment=comment,
            product_ratings=[ProductRating(**pr) for pr in product_ratings or []],
            created_at=now,
        )

        review.raise_(
            ReviewSubmitted(
                review_id=str(review.id),
                order_id=str(order.id),
                shop_id=str(order.shop_id),
                rating=rating,
                product_count=len(product_ratings or []),
                submitted_at=now,
            )
        )
        return review
