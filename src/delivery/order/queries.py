"""Order queries scoped to the calling actor.

Customers see their own orders, owners the orders of their shop, shippers the
orders assigned to them plus the READY, unassigned orders of the shop they
serve. Lists are newest first and paginated by page number.
"""

from protean.utils.globals import current_domain

from delivery.catalogue.lookup import find_shipper, shop_owned_by
from delivery.config import CUSTOMER_PAGE_LIMIT, SCAN_BATCH_SIZE, SHIPPER_PAGE_LIMIT, SHOP_PAGE_LIMIT
from delivery.order.order import Order, OrderStatus
from delivery.order.views import order_detail, order_page
from delivery.shared.actor import Actor, Role
from delivery.shared.errors import ForbiddenError, InvalidRequestError, NotFoundError
from delivery.shared.pagination import fetch_page, page_of
from delivery.utils.logging import get_logger

logger = get_logger(__name__)


def _status_filter(status) -> dict:
    if not status:
        return {}
    try:
        return {"status": OrderStatus(status.upper()).value}
    except ValueError:
        raise InvalidRequestError("ORDER_INVALID_STATUS", f"Unknown order status: {status}") from None


def _owned_shop(actor: Actor):
    shop = shop_owned_by(actor.user_id)
    if shop is None:
        raise NotFoundError("ORDER_010", "No shop found for this owner")
    return shop


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------
def get_my_orders(actor: Actor, status=None, page=None, limit=None) -> dict:
    actor.require(Role.CUSTOMER)
    repo = current_domain.repository_for(Order)
    result = fetch_page(
        repo, page, limit, CUSTOMER_PAGE_LIMIT, customer_id=str(actor.user_id), **_status_filter(status)
    )
    return order_page(result)


def get_shop_orders(actor: Actor, status=None, page=None, limit=None) -> dict:
    actor.require(Role.OWNER)
    shop = _owned_shop(actor)
    repo = current_domain.repository_for(Order)
    result = fetch_page(repo, page, limit, SHOP_PAGE_LIMIT, shop_id=str(shop.id), **_status_filter(status))
    return order_page(result)


def get_shipper_orders(actor: Actor, status=None, page=None, limit=None) -> dict:
    actor.require(Role.SHIPPER)
    repo = current_domain.repository_for(Order)
    result = fetch_page(
        repo, page, limit, SHIPPER_PAGE_LIMIT, shipper_id=str(actor.user_id), **_status_filter(status)
    )
    return order_page(result)


def _ready_orders(shop_id) -> list[Order]:
    """Every READY order of a shop, newest first, read in batches of ``SCAN_BATCH_SIZE``."""
    query = (
        current_domain.repository_for(Order)
        ._dao.query.filter(shop_id=shop_id, status=OrderStatus.READY.value)
        .order_by("-created_at")
    )
    orders: list[Order] = []
    while True:
        batch = query.offset(len(orders)).limit(SCAN_BATCH_SIZE).all()
        orders.extend(batch.items)
        if not batch.items or len(orders) >= batch.total:
            return orders


def get_shipper_orders_available(actor: Actor, page=None, limit=None) -> dict:
    """READY orders of the shipper's shop that nobody has accepted yet."""
    actor.require(Role.SHIPPER)
    profile = find_shipper(actor.user_id)
    if profile is None or profile.shop_id is None:
        return order_page(page_of([], page, limit, SHIPPER_PAGE_LIMIT))

    ready = _ready_orders(str(profile.shop_id))
    unassigned = [order for order in ready if order.shipper_id is None]
    if ready and not unassigned:
        logger.warning(
            "ready_orders_all_assigned",
            shop_id=str(profile.shop_id),
            ready_count=len(ready),
        )

    return order_page(page_of(unassigned, page, limit, SHIPPER_PAGE_LIMIT))


# ---------------------------------------------------------------------------
# Detail
# ---------------------------------------------------------------------------
def get_order_detail(actor: Actor, order_id) -> dict:
    actor.require(Role.CUSTOMER)
    order = current_domain.repository_for(Order).fetch(order_id)
    if str(order.customer_id) != str(actor.user_id):
        raise ForbiddenError("ORDER_007", "You do not have access to this order")
    return order_detail(order)


def get_shop_order_detail(actor: Actor, order_id) -> dict:
    actor.require(Role.OWNER)
    shop = _owned_shop(actor)
    order = current_domain.repository_for(Order).fetch(order_id)
    if str(order.shop_id) != str(shop.id):
        raise ForbiddenError("ORDER_ACCESS_DENIED", "This order does not belong to your shop")
    return order_detail(order)


def get_shipper_order_detail(actor: Actor, order_id) -> dict:
    """Assigned shippers see their orders; a READY, unassigned order is visible to
    shippers of its shop so they can decide whether to accept it."""
    actor.require(Role.SHIPPER)
    order = current_domain.repository_for(Order).fetch(order_id)

    if order.shipper_id is not None and str(order.shipper_id) == str(actor.user_id):
        return order_detail(order)

    if order.shipper_id is None and order.status == OrderStatus.READY.value:
        profile = find_shipper(actor.user_id)
        if profile is not None and str(profile.shop_id) == str(order.shop_id):
            return order_detail(order)

    raise ForbiddenError("ORDER_016", "You are not assigned to this order")
