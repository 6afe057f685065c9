"""Shipper profile: which shop a shipper serves and whether they can take work."""

from enum import Enum

from protean.fields import Identifier, String

from delivery.domain import delivery


class ShipperStatus(Enum):
    AVAILABLE = "AVAILABLE"
    ACTIVE = "ACTIVE"
    BUSY = "BUSY"
    OFFLINE = "OFFLINE"


_ACCEPTING_STATUSES = {ShipperStatus.AVAILABLE.value, ShipperStatus.ACTIVE.value}


@delivery.aggregate
class ShipperProfile:
    # Same value as the shipper's user id
    user_id = Identifier(identifier=True)
    shop_id = Identifier()
    name = String(max_length=255)
    status = String(choices=ShipperStatus, default=ShipperStatus.AVAILABLE.value)

    @property
    def can_accept_orders(self) -> bool:
        return self.status in _ACCEPTING_STATUSES

    def change_status(self, status):
        self.status = status
