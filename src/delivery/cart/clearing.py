"""Cart clearing, of the whole cart or of one shop's group."""

from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from delivery.cart.cart import ShoppingCart
from delivery.cart.views import group_cart, load_cart
from delivery.domain import delivery


@delivery.command(part_of="ShoppingCart")
class ClearCartByShop:
    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)


@delivery.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


@delivery.command_handler(part_of=ShoppingCart)
class ClearCartHandler:
    @handle(ClearCartByShop)
    def clear_by_shop(self, command):
        """Returns ``{"removed_count", "groups"}`` with the groups left behind."""
        cart = load_cart(command.customer_id)
        if cart is None:
            return {"removed_count": 0, "groups": []}

        removed = cart.clear_shop(command.shop_id)
        if removed:
            current_domain.repository_for(ShoppingCart).store(cart)

        return {"removed_count": removed, "groups": group_cart(cart)}

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = load_cart(command.customer_id)
        if cart is None:
            return 0

        removed = cart.clear()
        current_domain.repository_for(ShoppingCart).store(cart)
        return removed
