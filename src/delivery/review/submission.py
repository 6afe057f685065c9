"""SubmitReview: rate a delivered order and, optionally, its products.

The review, the link on the order and the running averages on the shop and
the reviewed products are written in one unit of work.
"""

import json

from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from delivery.catalogue.lookup import find_product, find_shop
from delivery.catalogue.product import Product
from delivery.catalogue.shop import Shop
from delivery.domain import delivery
from delivery.order.order import Order, OrderStatus
from delivery.review.review import Review, check_rating
from delivery.shared.actor import Role, actor_from
from delivery.shared.errors import ConflictError, ForbiddenError, InvalidRequestError, NotFoundError
from delivery.utils.logging import get_logger

logger = get_logger(__name__)


@delivery.command(part_of="Review")
class SubmitReview:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)
    rating = Integer(required=True)
    comment = Text()
    product_ratings = Text()  # JSON array of {product_id, rating, comment}


def _product_ratings(raw, order) -> list[dict]:
    entries = json.loads(raw) if isinstance(raw, str) and raw else (raw or [])
    names = {str(item.product_id): item.product_name for item in order.items}

    seen = set()
    ratings = []
    for entry in entries:
        product_id = str(entry.get("product_id"))
        if product_id in seen:
            raise InvalidRequestError("REVIEW_008", f"Product {product_id} is rated more than once")
        if product_id not in names:
            raise InvalidRequestError("REVIEW_009", f"Product {product_id} is not part of this order")
        check_rating(entry.get("rating"))
        seen.add(product_id)
        ratings.append(
            {
                "product_id": product_id,
                "product_name": names[product_id],
                "rating": entry["rating"],
                "comment": entry.get("comment"),
            }
        )
    return ratings


@delivery.command_handler(part_of=Review)
class SubmitReviewHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        actor = actor_from(command)
        actor.require(Role.CUSTOMER)
        check_rating(command.rating)

        order_repo = current_domain.repository_for(Order)
        try:
            order = order_repo.get(command.order_id)
        except ObjectNotFoundError:
            raise NotFoundError("REVIEW_002", "Order not found") from None

        if str(order.customer_id) != str(actor.user_id):
            raise ForbiddenError("REVIEW_003", "You can only review your own orders")
        if order.status != OrderStatus.DELIVERED.value:
            raise ConflictError("REVIEW_004", "Only delivered orders can be reviewed")
        if order.review_id is not None:
            raise ConflictError("REVIEW_005", "This order has already been reviewed")

        product_ratings = _product_ratings(command.product_ratings, order)

        review = Review.submit(
            order,
            rating=command.rating,
            comment=command.comment,
            product_ratings=product_ratings,
        )
        current_domain.repository_for(Review).add(review)

        order.link_review(review.id)
        order_repo.add(order)

        shop = find_shop(order.shop_id)
        if shop is not None:
            shop.record_rating(command.rating)
            current_domain.repository_for(Shop).add(shop)

        for entry in product_ratings:
            product = find_product(entry["product_id"])
            if product is not None:
                product.record_rating(entry["rating"])
                current_domain.repository_for(Product).add(product)

        logger.info(
            "review_submitted",
            review_id=str(review.id),
            order_id=str(order.id),
            rating=command.rating,
            product_count=len(product_ratings),
        )
        return str(review.id)
