"""Order placement: one shop's cart group becomes an order.

The handler runs in a single unit of work: the order write, the voucher
redemption and the removal of that shop's items from the cart commit together
or not at all. Items of other shops stay in the cart.
"""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from delivery.cart.cart import ShoppingCart
from delivery.cart.views import load_cart
from delivery.catalogue.lookup import find_product, find_shop
from delivery.domain import delivery
from delivery.order.order import Order, PaymentMethod
from delivery.shared.errors import ConflictError, InvalidRequestError, NotFoundError
from delivery.utils.logging import get_logger
from delivery.voucher.voucher import Voucher

logger = get_logger(__name__)

_ADDRESS_FIELDS = ("label", "full_address", "building", "room", "note")


@delivery.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    delivery_address = Text(required=True)  # JSON: address dict
    payment_method = String(required=True, choices=PaymentMethod)
    voucher_code = String(max_length=50)
    delivery_note = Text()


def _address(raw) -> dict:
    data = json.loads(raw) if isinstance(raw, str) else (raw or {})
    return {key: data.get(key) for key in _ADDRESS_FIELDS}


@delivery.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = load_cart(command.customer_id)
        if cart is None or cart.is_empty:
            raise NotFoundError("ORDER_001", "Cart is empty")

        cart_items = cart.items_for_shop(command.shop_id)
        if not cart_items:
            raise NotFoundError("ORDER_002", "No items from this shop in the cart")

        shop = find_shop(command.shop_id)
        if shop is None:
            raise NotFoundError("ORDER_003", "Shop not found")
        if not shop.accepts_orders:
            raise ConflictError("ORDER_004", "Shop is currently closed")

        unavailable = []
        for item in cart_items:
            product = find_product(item.product_id)
            if product is None or not product.is_orderable:
                unavailable.append(str(item.product_id))
        if unavailable:
            raise ConflictError(
                "ORDER_005",
                "Some products are no longer available",
                details={"product_ids": unavailable},
            )

        subtotal = sum(item.subtotal for item in cart_items)

        voucher_repo = current_domain.repository_for(Voucher)
        voucher = None
        discount = 0.0
        if command.voucher_code:
            voucher = voucher_repo.find_by_code(command.voucher_code)
            if voucher is None:
                raise InvalidRequestError("VOUCHER_NOT_FOUND", f"Voucher {command.voucher_code} does not exist")
            discount = voucher.discount_for(shop.id, subtotal)

        order = Order.place(
            customer_id=command.customer_id,
            shop=shop,
            items_data=[
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "product_image": item.product_image,
                    "quantity": item.quantity,
                    "price": item.price_at_add,
                }
                for item in cart_items
            ],
            delivery_address=_address(command.delivery_address),
            payment_method=command.payment_method,
            discount=discount,
            voucher=voucher,
            delivery_note=command.delivery_note,
        )
        current_domain.repository_for(Order).add(order)

        if voucher is not None:
            voucher.redeem()
            voucher_repo.add(voucher)

        cart.clear_shop(shop.id)
        current_domain.repository_for(ShoppingCart).store(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            customer_id=str(command.customer_id),
            shop_id=str(shop.id),
            total=order.total,
        )
        return str(order.id)
