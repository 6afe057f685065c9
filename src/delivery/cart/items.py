"""Cart item management commands and handler."""

from protean import handle
from protean.exceptions import ExpectedVersionError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from delivery.cart.cart import ShoppingCart
from delivery.cart.views import cart_view, load_cart
from delivery.catalogue.lookup import find_product, find_shop
from delivery.config import ADD_TO_CART_ATTEMPTS, MAX_CART_ITEM_QUANTITY
from delivery.domain import delivery
from delivery.shared.errors import ConflictError, NotFoundError
from delivery.utils.logging import get_logger

logger = get_logger(__name__)


class StaleCartError(ConflictError):
    """The cart was saved by another request after it was loaded; nothing was written."""

    def __init__(self):
        super().__init__("CONCURRENT_MODIFICATION", "The cart was modified by another request, please retry")


@delivery.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@delivery.command(part_of="ShoppingCart")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1, max_value=MAX_CART_ITEM_QUANTITY)


@delivery.command(part_of="ShoppingCart")
class RemoveCartItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@delivery.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        product = find_product(command.product_id)
        if product is None or not product.is_orderable:
            raise NotFoundError("CART_001", "Product not found or unavailable")

        shop = find_shop(product.shop_id)
        if shop is None:
            raise NotFoundError("CART_001", "Shop not found")
        if not shop.accepts_orders:
            raise ConflictError("CART_002", "Shop is currently closed")

        repo = current_domain.repository_for(ShoppingCart)
        cart = load_cart(command.customer_id) or ShoppingCart.create(command.customer_id)
        cart.add_item(product, command.quantity)
        try:
            repo.store(cart)
        except ExpectedVersionError:
            # The version check runs before the unit of work commits
            raise StaleCartError() from None

        logger.info(
            "cart_item_added",
            customer_id=str(command.customer_id),
            product_id=str(command.product_id),
            quantity=command.quantity,
        )

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        cart = load_cart(command.customer_id)
        if cart is None:
            raise NotFoundError("CART_003", "Cart not found")

        cart.update_quantity(command.product_id, command.quantity)
        current_domain.repository_for(ShoppingCart).store(cart)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        cart = load_cart(command.customer_id)
        if cart is None:
            raise NotFoundError("CART_004", "Cart not found")

        cart.remove_item(command.product_id)
        current_domain.repository_for(ShoppingCart).store(cart)


def add_to_cart(customer_id, product_id, quantity) -> dict:
    """Add to the cart and return the grouped view.

    The quantity increment is a read-modify-write against the cart version.
    When another request saved the cart in between, the version check rejects
    the save before anything is committed and the add is replayed against the
    fresh cart. Errors raised while committing are not retried.
    """
    command = AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity)
    for attempt in range(1, ADD_TO_CART_ATTEMPTS + 1):
        try:
            current_domain.process(command, asynchronous=False)
            break
        except StaleCartError:
            if attempt == ADD_TO_CART_ATTEMPTS:
                raise
            logger.warning("cart_add_retry", customer_id=str(customer_id), attempt=attempt)
    return cart_view(customer_id)
