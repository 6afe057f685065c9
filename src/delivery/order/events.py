"""Domain events for the Order aggregate.

One event per status change, plus the post-delivery facts (review linked,
payout recorded). Events carry identifiers and the actor, not full state.
"""

from protean.fields import DateTime, Float, Identifier, String

from delivery.domain import delivery


@delivery.event(part_of="Order")
class OrderPlaced:
    """A customer turned one shop's cart group into an order."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    total = Float(required=True)
    payment_method = String(required=True)
    voucher_code = String()
    placed_at = DateTime(required=True)


@delivery.event(part_of="Order")
class OrderStatusChanged:
    """The order moved from one status to another."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    status = String(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)
    changed_at = DateTime(required=True)


@delivery.event(part_of="Order")
class OrderCancelled:
    __version__ = 1

    order_id = Identifier(required=True)
    cancelled_by = String(required=True)
    reason = String(required=True)
    cancelled_at = DateTime(required=True)


@delivery.event(part_of="Order")
class OrderAccepted:
    """A shipper took a READY order; it is now out for delivery."""

    __version__ = 1

    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    shipper_id = Identifier(required=True)
    accepted_at = DateTime(required=True)


@delivery.event(part_of="Order")
class OrderDelivered:
    __version__ = 1

    order_id = Identifier(required=True)
    shipper_id = Identifier(required=True)
    payment_status = String(required=True)
    delivered_at = DateTime(required=True)


@delivery.event(part_of="Order")
class OrderReviewed:
    __version__ = 1

    order_id = Identifier(required=True)
    review_id = Identifier(required=True)
    reviewed_at = DateTime(required=True)


@delivery.event(part_of="Order")
class OrderPaidOut:
    __version__ = 1

    order_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    total = Float(required=True)
    paid_out_at = DateTime(required=True)
