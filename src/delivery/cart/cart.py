"""Shopping cart aggregate: one per customer, items grouped by shop.

A cart holds at most one item per product across all shops. Adding a product
that is already present accumulates its quantity up to a ceiling; updating
overwrites it. The cart record only exists while it has items: the handlers
delete it as soon as the last item leaves. Each cart gets its own generated
identity and is located by ``customer_id``, so a cart created after an order
or a clear never reuses the identity of the one that was deleted.
"""

from datetime import UTC, datetime

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String

from delivery.cart.events import (
    CartItemAdded,
    CartItemQuantityChanged,
    CartItemRemoved,
    CartShopCleared,
)
from delivery.config import MAX_CART_ITEM_QUANTITY
from delivery.domain import delivery
from delivery.shared.errors import ConflictError, InvalidRequestError, NotFoundError


@delivery.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    product_name = String(max_length=255)
    product_image = String(max_length=1000)
    quantity = Integer(required=True, min_value=1, max_value=MAX_CART_ITEM_QUANTITY)
    price_at_add = Float(required=True, min_value=0.0)
    added_at = DateTime()
    updated_at = DateTime()

    @property
    def subtotal(self) -> float:
        return self.price_at_add * self.quantity

    @property
    def last_activity_at(self):
        return self.updated_at or self.added_at


@delivery.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def is_empty(self) -> bool:
        return not self.items

    def item_for(self, product_id) -> CartItem | None:
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    def items_for_shop(self, shop_id) -> list[CartItem]:
        return [i for i in self.items if str(i.shop_id) == str(shop_id)]

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product, quantity):
        """Add ``quantity`` of ``product``, accumulating onto an existing entry.

        Snapshot fields (name, image, unit price) are refreshed from the
        product on every add. ``added_at`` is kept from the first add.
        """
        if quantity < 1:
            raise InvalidRequestError("CART_005", "Quantity must be at least 1")

        existing = self.item_for(product.id)
        current = existing.quantity if existing else 0
        new_quantity = current + quantity
        if new_quantity > MAX_CART_ITEM_QUANTITY:
            raise ConflictError(
                "CART_006",
                f"Quantity cannot exceed {MAX_CART_ITEM_QUANTITY} "
                f"(currently {current} in cart, tried to add {quantity})",
                details={"current": current, "requested": quantity, "max": MAX_CART_ITEM_QUANTITY},
            )

        now = datetime.now(UTC)
        if existing:
            existing.quantity = new_quantity
            existing.product_name = product.name
            existing.product_image = product.image_url
            existing.price_at_add = product.price
            existing.updated_at = now
        else:
            self.add_items(
                CartItem(
                    product_id=product.id,
                    shop_id=product.shop_id,
                    product_name=product.name,
                    product_image=product.image_url,
                    quantity=new_quantity,
                    price_at_add=product.price,
                    added_at=now,
                    updated_at=now,
                )
            )

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                customer_id=str(self.customer_id),
                product_id=str(product.id),
                shop_id=str(product.shop_id),
                quantity_added=quantity,
                quantity=new_quantity,
                price_at_add=product.price,
            )
        )

    def update_quantity(self, product_id, quantity):
        """Overwrite the quantity of an item already in the cart."""
        if not 1 <= quantity <= MAX_CART_ITEM_QUANTITY:
            raise InvalidRequestError(
                "CART_005",
                f"Quantity must be between 1 and {MAX_CART_ITEM_QUANTITY}",
            )

        item = self.item_for(product_id)
        if item is None:
            raise NotFoundError("CART_003", "Item not found in cart")

        previous = item.quantity
        now = datetime.now(UTC)
        item.quantity = quantity
        item.updated_at = now
        self.updated_at = now

        self.raise_(
            CartItemQuantityChanged(
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                previous_quantity=previous,
                quantity=quantity,
            )
        )

    def remove_item(self, product_id):
        item = self.item_for(product_id)
        if item is None:
            raise NotFoundError("CART_004", "Item not found in cart")

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemRemoved(
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                shop_id=str(item.shop_id),
            )
        )

    def clear_shop(self, shop_id) -> int:
        """Remove every item of one shop. Returns how many items were removed."""
        items = self.items_for_shop(shop_id)
        if not items:
            return 0

        for item in items:
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartShopCleared(
                customer_id=str(self.customer_id),
                shop_id=str(shop_id),
                removed_count=len(items),
            )
        )
        return len(items)

    def clear(self) -> int:
        removed = len(self.items)
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)
        return removed
