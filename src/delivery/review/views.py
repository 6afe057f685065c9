"""Read model for reviews."""

from protean.utils.globals import current_domain

from delivery.review.review import Review


def review_view(review) -> dict:
    return {
        "id": str(review.id),
        "order_id": str(review.order_id),
        "customer_id": str(review.customer_id),
        "shop_id": str(review.shop_id),
        "rating": review.rating,
        "comment": review.comment,
        "product_ratings": [
            {
                "product_id": str(pr.product_id),
                "product_name": pr.product_name,
                "rating": pr.rating,
                "comment": pr.comment,
            }
            for pr in review.product_ratings
        ],
        "created_at": review.created_at,
    }


def review_detail(review_id) -> dict:
    return review_view(current_domain.repository_for(Review).get(review_id))
