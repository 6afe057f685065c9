"""Delivery bounded context: shops, carts, orders, vouchers and reviews.

Customers build per-shop carts and turn one shop's group into an order.
Owners and shippers then drive the order through its lifecycle. The domain
is constructed here and initialized explicitly by the app or the test
session, never on import.
"""

from protean.domain import Domain

from delivery.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

delivery = Domain(name="delivery")
