"""Shop owner transitions: confirm, prepare, mark ready and cancel."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from delivery.catalogue.lookup import find_shop
from delivery.domain import delivery
from delivery.order.order import Order
from delivery.shared.actor import actor_from
from delivery.utils.logging import get_logger

logger = get_logger(__name__)


@delivery.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)


@delivery.command(part_of="Order")
class MarkPreparing:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)


@delivery.command(part_of="Order")
class MarkReady:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)


@delivery.command(part_of="Order")
class OwnerCancelOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)
    reason = String(max_length=500)


def _shop_owner_id(order):
    shop = find_shop(order.shop_id)
    return shop.owner_id if shop is not None else None


@delivery.command_handler(part_of=Order)
class OwnerTransitionsHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        order.confirm(actor_from(command), shop_owner_id=_shop_owner_id(order))
        repo.add(order)
        logger.info("order_confirmed", order_id=str(order.id), owner_id=str(command.actor_id))

    @handle(MarkPreparing)
    def mark_preparing(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        order.mark_preparing(actor_from(command), shop_owner_id=_shop_owner_id(order))
        repo.add(order)
        logger.info("order_preparing", order_id=str(order.id))

    @handle(MarkReady)
    def mark_ready(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        order.mark_ready(actor_from(command), shop_owner_id=_shop_owner_id(order))
        repo.add(order)
        logger.info("order_ready", order_id=str(order.id))

    @handle(OwnerCancelOrder)
    def owner_cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        order.owner_cancel(actor_from(command), shop_owner_id=_shop_owner_id(order), reason=command.reason)
        repo.add(order)
        logger.info("order_cancelled", order_id=str(order.id), cancelled_by=order.cancelled_by)
