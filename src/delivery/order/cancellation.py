"""Customer cancellation command and handler."""

from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from delivery.domain import delivery
from delivery.order.order import Order
from delivery.shared.actor import actor_from
from delivery.utils.logging import get_logger

logger = get_logger(__name__)


@delivery.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    actor_id = Identifier(required=True)
    actor_role = String(required=True)
    reason = String(max_length=500)


@delivery.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.fetch(command.order_id)
        order.cancel(actor_from(command), reason=command.reason)
        repo.add(order)
        logger.info("order_cancelled", order_id=str(order.id), cancelled_by=order.cancelled_by)
