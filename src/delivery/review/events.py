"""Domain events for the Review aggregate."""

from protean.fields import DateTime, Identifier, Integer

from delivery.domain import delivery


@delivery.event(part_of="Review")
class ReviewSubmitted:
    """A customer rated a delivered order, and optionally its products."""

    __version__ = 1

    review_id = Identifier(required=True)
    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    rating = Integer(required=True)
    product_count = Integer(default=0)
    submitted_at = DateTime(required=True)
