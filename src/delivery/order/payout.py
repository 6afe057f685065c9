"""Payout bookkeeping: an admin marks a delivered order as settled with the shop."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from delivery.domain import delivery
from delivery.order.order import Order
from delivery.shared.actor import actor_from
from delivery.utils.logging import get_logger

logger = get_logger(__name__)


@delivery.command(part_of="Order")
class RecordPayout:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)


@delivery.command_handler(part_of=Order)
class RecordPayoutHandler:
    @handle(RecordPayout)
    def record_payout(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        order.record_payout(actor_from(command))
        repo.add(order)
        logger.info("order_paid_out", order_id=str(order.id), shop_id=str(order.shop_id), total=order.total)
