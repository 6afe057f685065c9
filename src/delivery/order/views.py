"""Read models for orders: full detail and the compact list entry."""

from delivery.config import ORDER_ITEMS_PREVIEW


def _item_view(item) -> dict:
    return {
        "product_id": str(item.product_id),
        "product_name": item.product_name,
        "product_image": item.product_image,
        "quantity": item.quantity,
        "price": item.price,
        "subtotal": item.subtotal,
    }


def _address_view(address) -> dict | None:
    if address is None:
        return None
    return {
        "label": address.label,
        "full_address": address.full_address,
        "building": address.building,
        "room": address.room,
        "note": address.note,
    }


def _id(value) -> str | None:
    return str(value) if value is not None else None


def order_detail(order) -> dict:
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "shop_id": str(order.shop_id),
        "shop_name": order.shop_name,
        "shipper_id": _id(order.shipper_id),
        "items": [_item_view(i) for i in order.items],
        "subtotal": order.subtotal,
        "ship_fee": order.ship_fee,
        "discount": order.discount,
        "total": order.total,
        "voucher_code": order.voucher_code,
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "delivery_address": _address_view(order.delivery_address),
        "delivery_note": order.delivery_note,
        "cancel_reason": order.cancel_reason,
        "cancelled_by": order.cancelled_by,
        "cancelled_at": order.cancelled_at,
        "confirmed_at": order.confirmed_at,
        "preparing_at": order.preparing_at,
        "ready_at": order.ready_at,
        "shipping_at": order.shipping_at,
        "delivered_at": order.delivered_at,
        "review_id": _id(order.review_id),
        "reviewed_at": order.reviewed_at,
        "paid_out": bool(order.paid_out),
        "paid_out_at": order.paid_out_at,
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def order_list_item(order) -> dict:
    items = list(order.items)
    return {
        "id": str(order.id),
        "order_number": order.order_number,
        "customer_id": str(order.customer_id),
        "shop_id": str(order.shop_id),
        "shop_name": order.shop_name,
        "shipper_id": _id(order.shipper_id),
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "total": order.total,
        "item_count": sum(i.quantity for i in items),
        "items_preview": [_item_view(i) for i in items[:ORDER_ITEMS_PREVIEW]],
        "created_at": order.created_at,
    }


def order_page(page) -> dict:
    return {
        "orders": [order_list_item(o) for o in page.items],
        "page": page.page,
        "limit": page.limit,
        "total": page.total,
        "total_pages": page.total_pages,
    }
