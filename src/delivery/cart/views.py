"""Grouped cart view: the cart partitioned by shop.

Groups are derived on read and never stored. A group whose shop no longer
resolves is skipped without error.
"""

from datetime import UTC, datetime

from protean.utils.globals import current_domain

from delivery.cart.cart import ShoppingCart
from delivery.catalogue.lookup import shops_by_id

_EPOCH = datetime.min.replace(tzinfo=UTC)


def load_cart(customer_id) -> ShoppingCart | None:
    return current_domain.repository_for(ShoppingCart).for_customer(customer_id)


def _item_view(item) -> dict:
    return {
        "product_id": str(item.product_id),
        "shop_id": str(item.shop_id),
        "product_name": item.product_name,
        "product_image": item.product_image,
        "quantity": item.quantity,
        "price": item.price_at_add,
        "subtotal": item.subtotal,
        "added_at": item.added_at,
        "updated_at": item.updated_at,
    }


def _group_view(shop, items) -> dict:
    activity = [i.last_activity_at for i in items if i.last_activity_at is not None]
    return {
        "shop_id": str(shop.id),
        "shop_name": shop.name,
        "is_open": shop.accepts_orders,
        "ship_fee": 0.0,
        "items": [_item_view(i) for i in items],
        "subtotal": sum(i.subtotal for i in items),
        "last_activity_at": max(activity) if activity else None,
    }


def group_cart(cart: ShoppingCart | None) -> list[dict]:
    """Partition the cart by shop, most recently touched group first."""
    if cart is None or cart.is_empty:
        return []

    items_by_shop: dict[str, list] = {}
    for item in cart.items:
        items_by_shop.setdefault(str(item.shop_id), []).append(item)

    shops = shops_by_id(items_by_shop.keys())
    groups = [_group_view(shops[shop_id], items) for shop_id, items in items_by_shop.items() if shop_id in shops]

    # Stable sorts: name ascending first, then activity descending on top of it
    groups.sort(key=lambda g: g["shop_name"] or "")
    groups.sort(key=lambda g: g["last_activity_at"] or _EPOCH, reverse=True)
    return groups


def cart_view(customer_id) -> dict:
    groups = group_cart(load_cart(customer_id))
    return {
        "groups": groups,
        "total_items": sum(len(g["items"]) for g in groups),
        "total_amount": sum(g["subtotal"] for g in groups),
    }


def cart_group(customer_id, shop_id) -> dict | None:
    return next((g for g in group_cart(load_cart(customer_id)) if g["shop_id"] == str(shop_id)), None)
