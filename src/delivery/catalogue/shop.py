"""Shop aggregate: the seller whose products customers order."""

from enum import Enum

from protean.fields import Boolean, Float, Identifier, Integer, String

from delivery.catalogue.ratings import running_average
from delivery.domain import delivery


class ShopStatus(Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"
    SUSPENDED = "SUSPENDED"


@delivery.aggregate
class Shop:
    name = String(required=True, max_length=255)
    owner_id = Identifier(required=True)
    address = String(max_length=500)
    is_open = Boolean(default=True)
    status = String(choices=ShopStatus, default=ShopStatus.OPEN.value)
    ship_fee_per_order = Float(default=0.0, min_value=0.0)
    rating = Float(default=0.0)
    total_ratings = Integer(default=0)

    @property
    def accepts_orders(self) -> bool:
        """A shop takes cart additions and orders only while open and not suspended."""
        return bool(self.is_open) and self.status == ShopStatus.OPEN.value

    def open(self):
        self.is_open = True
        self.status = ShopStatus.OPEN.value

    def close(self):
        self.is_open = False
        self.status = ShopStatus.CLOSED.value

    def record_rating(self, rating):
        self.rating = running_average(self.rating, self.total_ratings, rating)
        self.total_ratings = (self.total_ratings or 0) + 1
