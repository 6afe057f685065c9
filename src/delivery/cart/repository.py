"""Repository for the ShoppingCart aggregate."""

from delivery.cart.cart import ShoppingCart
from delivery.domain import delivery


@delivery.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    """Persists carts, discarding a cart once its last item is gone."""

    def for_customer(self, customer_id) -> ShoppingCart | None:
        return self._dao.query.filter(customer_id=str(customer_id)).all().first

    def store(self, cart: ShoppingCart) -> None:
        # Item removals are flushed first so no orphaned items outlive the cart
        self.add(cart)
        if cart.is_empty:
            self._dao.delete(cart)
