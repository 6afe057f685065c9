"""Repository for the Order aggregate."""

from protean.exceptions import ObjectNotFoundError

from delivery.domain import delivery
from delivery.order.order import Order
from delivery.shared.errors import NotFoundError


@delivery.repository(part_of=Order)
class OrderRepository:
    def fetch(self, order_id) -> Order:
        """Load an order, raising the domain's NotFound when it does not exist."""
        try:
            return self.get(order_id)
        except ObjectNotFoundError:
            raise NotFoundError("ORDER_006", "Order not found") from None
