"""FastAPI routes for the delivery domain: cart, orders, reviews and payouts."""

import json

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain

from delivery.api import dependencies
from delivery.api.responses import success
from delivery.api.schemas import (
    AddToCartRequest,
    CancelOrderRequest,
    CartGroupSchema,
    CartSchema,
    ClearCartByShopResponse,
    ClearCartResponse,
    CreateOrderRequest,
    OrderDetailSchema,
    OrderPageSchema,
    ReviewSchema,
    SubmitReviewRequest,
    UpdateCartItemRequest,
)
from delivery.cart.clearing import ClearCart, ClearCartByShop
from delivery.cart.items import RemoveCartItem, UpdateCartItem, add_to_cart
from delivery.cart.views import cart_group, cart_view
from delivery.order import queries
from delivery.order.cancellation import CancelOrder
from delivery.order.order import Order
from delivery.order.owner import ConfirmOrder, MarkPreparing, MarkReady, OwnerCancelOrder
from delivery.order.payout import RecordPayout
from delivery.order.placement import PlaceOrder
from delivery.order.shipper import MarkDelivered, MarkShipping, accept_order
from delivery.order.views import order_detail
from delivery.review.submission import SubmitReview
from delivery.review.views import review_detail
from delivery.shared.actor import Actor


def _order_response(order_id, status_code=200):
    order = current_domain.repository_for(Order).fetch(order_id)
    return success(OrderDetailSchema.model_validate(order_detail(order)), status_code=status_code)


def _transition(command_cls, order_id, actor: Actor, **extra):
    command = command_cls(order_id=order_id, actor_id=actor.user_id, actor_role=actor.role, **extra)
    current_domain.process(command, asynchronous=False)
    return _order_response(order_id)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.post("")
async def add_cart_item(body: AddToCartRequest, actor: Actor = Depends(dependencies.customer)):
    view = add_to_cart(actor.user_id, body.product_id, body.quantity)
    return success(CartSchema.model_validate(view))


@cart_router.get("")
async def get_cart(actor: Actor = Depends(dependencies.customer)):
    return success(CartSchema.model_validate(cart_view(actor.user_id)))


@cart_router.get("/shop/{shop_id}")
async def get_cart_group(shop_id: str, actor: Actor = Depends(dependencies.customer)):
    group = cart_group(actor.user_id, shop_id)
    return success(CartGroupSchema.model_validate(group) if group is not None else None)


@cart_router.put("/{product_id}")
async def update_cart_item(
    product_id: str, body: UpdateCartItemRequest, actor: Actor = Depends(dependencies.customer)
):
    command = UpdateCartItem(customer_id=actor.user_id, product_id=product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return success(CartSchema.model_validate(cart_view(actor.user_id)))


@cart_router.delete("/shop/{shop_id}")
async def clear_cart_by_shop(shop_id: str, actor: Actor = Depends(dependencies.customer)):
    command = ClearCartByShop(customer_id=actor.user_id, shop_id=shop_id)
    result = current_domain.process(command, asynchronous=False)
    return success(ClearCartByShopResponse.model_validate(result))


@cart_router.delete("/{product_id}")
async def remove_cart_item(product_id: str, actor: Actor = Depends(dependencies.customer)):
    command = RemoveCartItem(customer_id=actor.user_id, product_id=product_id)
    current_domain.process(command, asynchronous=False)
    return success(CartSchema.model_validate(cart_view(actor.user_id)))


@cart_router.delete("")
async def clear_cart(actor: Actor = Depends(dependencies.customer)):
    removed = current_domain.process(ClearCart(customer_id=actor.user_id), asynchronous=False)
    return success(ClearCartResponse(removed_count=removed or 0))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
# Fixed paths (/shop, /shipper) are declared before /{order_id}.
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201)
async def create_order(body: CreateOrderRequest, actor: Actor = Depends(dependencies.customer)):
    command = PlaceOrder(
        customer_id=actor.user_id,
        shop_id=body.shop_id,
        delivery_address=json.dumps(body.delivery_address.model_dump()),
        payment_method=body.payment_method,
        voucher_code=body.voucher_code,
        delivery_note=body.delivery_note,
    )
    order_id = current_domain.process(command, asynchronous=False)
    return _order_response(order_id, status_code=201)


@order_router.get("")
async def get_my_orders(
    status: str | None = None,
    page: int | None = None,
    limit: int | None = None,
    actor: Actor = Depends(dependencies.customer),
):
    result = queries.get_my_orders(actor, status=status, page=page, limit=limit)
    return success(OrderPageSchema.model_validate(result))


@order_router.get("/shop")
async def get_shop_orders(
    status: str | None = None,
    page: int | None = None,
    limit: int | None = None,
    actor: Actor = Depends(dependencies.owner),
):
    result = queries.get_shop_orders(actor, status=status, page=page, limit=limit)
    return success(OrderPageSchema.model_validate(result))


@order_router.get("/shop/{order_id}")
async def get_shop_order_detail(order_id: str, actor: Actor = Depends(dependencies.owner)):
    return success(OrderDetailSchema.model_validate(queries.get_shop_order_detail(actor, order_id)))


@order_router.get("/shipper")
async def get_shipper_orders(
    status: str | None = None,
    page: int | None = None,
    limit: int | None = None,
    actor: Actor = Depends(dependencies.shipper),
):
    result = queries.get_shipper_orders(actor, status=status, page=page, limit=limit)
    return success(OrderPageSchema.model_validate(result))


@order_router.get("/shipper/available")
async def get_shipper_orders_available(
    page: int | None = None,
    limit: int | None = None,
    actor: Actor = Depends(dependencies.shipper),
):
    result = queries.get_shipper_orders_available(actor, page=page, limit=limit)
    return success(OrderPageSchema.model_validate(result))


@order_router.get("/shipper/{order_id}")
async def get_shipper_order_detail(order_id: str, actor: Actor = Depends(dependencies.shipper)):
    return success(OrderDetailSchema.model_validate(queries.get_shipper_order_detail(actor, order_id)))


@order_router.get("/{order_id}")
async def get_order_detail(order_id: str, actor: Actor = Depends(dependencies.customer)):
    return success(OrderDetailSchema.model_validate(queries.get_order_detail(actor, order_id)))


@order_router.put("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    actor: Actor = Depends(dependencies.customer),
):
    return _transition(CancelOrder, order_id, actor, reason=body.reason if body else None)


@order_router.put("/{order_id}/confirm")
async def confirm_order(order_id: str, actor: Actor = Depends(dependencies.owner)):
    return _transition(ConfirmOrder, order_id, actor)


@order_router.put("/{order_id}/preparing")
async def mark_preparing(order_id: str, actor: Actor = Depends(dependencies.owner)):
    return _transition(MarkPreparing, order_id, actor)


@order_router.put("/{order_id}/ready")
async def mark_ready(order_id: str, actor: Actor = Depends(dependencies.owner)):
    return _transition(MarkReady, order_id, actor)


@order_router.put("/{order_id}/owner-cancel")
async def owner_cancel_order(
    order_id: str,
    body: CancelOrderRequest | None = None,
    actor: Actor = Depends(dependencies.owner),
):
    return _transition(OwnerCancelOrder, order_id, actor, reason=body.reason if body else None)


@order_router.put("/{order_id}/accept")
async def accept(order_id: str, actor: Actor = Depends(dependencies.shipper)):
    accept_order(order_id, actor)
    return _order_response(order_id)


@order_router.put("/{order_id}/shipping")
async def mark_shipping(order_id: str, actor: Actor = Depends(dependencies.shipper)):
    return _transition(MarkShipping, order_id, actor)


@order_router.put("/{order_id}/delivered")
async def mark_delivered(order_id: str, actor: Actor = Depends(dependencies.shipper)):
    return _transition(MarkDelivered, order_id, actor)


@order_router.post("/{order_id}/review", status_code=201)
async def submit_review(order_id: str, body: SubmitReviewRequest, actor: Actor = Depends(dependencies.customer)):
    command = SubmitReview(
        order_id=order_id,
        actor_id=actor.user_id,
        actor_role=actor.role,
        rating=body.rating,
        comment=body.comment,
        product_ratings=json.dumps([pr.model_dump() for pr in body.product_reviews]),
    )
    review_id = current_domain.process(command, asynchronous=False)
    return success(ReviewSchema.model_validate(review_detail(review_id)), status_code=201)


# ---------------------------------------------------------------------------
# Admin Router
# ---------------------------------------------------------------------------
admin_router = APIRouter(prefix="/admin", tags=["admin"])


@admin_router.put("/orders/{order_id}/payout")
async def record_payout(order_id: str, actor: Actor = Depends(dependencies.admin)):
    return _transition(RecordPayout, order_id, actor)
