"""Shipper transitions: accept, shipping confirmation and delivery.

Accepting is a conditional write: the order must still be READY and
unassigned when it is saved. Two shippers racing for the same order both
pass the in-memory checks, but only the first save matches the stored
version; the other surfaces as a Conflict.
"""

from protean import handle
from protean.exceptions import ExpectedVersionError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from delivery.catalogue.lookup import find_product, find_shipper
from delivery.catalogue.product import Product
from delivery.domain import delivery
from delivery.order.order import Order
from delivery.shared.actor import Role, actor_from
from delivery.shared.errors import ConflictError, NotFoundError
from delivery.utils.logging import get_logger

logger = get_logger(__name__)


@delivery.command(part_of="Order")
class AcceptOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)


@delivery.command(part_of="Order")
class MarkShipping:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)


@delivery.command(part_of="Order")
class MarkDelivered:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)


@delivery.command_handler(part_of=Order)
class ShipperTransitionsHandler:
    @handle(AcceptOrder)
    def accept_order(self, command):
        actor = actor_from(command)
        actor.require(Role.SHIPPER)

        profile = find_shipper(actor.user_id)
        if profile is None:
            raise NotFoundError("ORDER_017", "Shipper profile not found")
        if not profile.can_accept_orders:
            raise ConflictError("ORDER_018", f"Shipper is {profile.status} and cannot accept orders")

        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        order.accept(actor, shipper_shop_id=profile.shop_id)
        repo.add(order)
        logger.info("order_accepted", order_id=str(order.id), shipper_id=str(actor.user_id))

    @handle(MarkShipping)
    def mark_shipping(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        order.mark_shipping(actor_from(command))
        repo.add(order)

    @handle(MarkDelivered)
    def mark_delivered(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        order.mark_delivered(actor_from(command))
        sold = order.claim_sold_quantities()
        repo.add(order)

        # Sold counts commit together with the delivery
        product_repo = current_domain.repository_for(Product)
        for product_id, quantity in sold.items():
            product = find_product(product_id)
            if product is None:
                logger.warning("sold_count_product_missing", order_id=str(order.id), product_id=product_id)
                continue
            product.record_sale(quantity)
            product_repo.add(product)

        logger.info(
            "order_delivered",
            order_id=str(order.id),
            shipper_id=str(command.actor_id),
            payment_status=order.payment_status,
        )


def accept_order(order_id, actor) -> None:
    """Accept ``order_id`` for ``actor``; losing a concurrent accept is a Conflict."""
    command = AcceptOrder(order_id=order_id, actor_id=actor.user_id, actor_role=actor.role)
    try:
        current_domain.process(command, asynchronous=False)
    except ExpectedVersionError:
        logger.warning("order_accept_lost_race", order_id=str(order_id), shipper_id=str(actor.user_id))
        raise ConflictError("ORDER_020", "Order has already been assigned to a shipper") from None
