"""Domain events for the ShoppingCart aggregate."""

from protean.fields import Float, Identifier, Integer

from delivery.domain import delivery


@delivery.event(part_of="ShoppingCart")
class CartItemAdded:
    """A product was added to the cart, or its quantity was accumulated."""

    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    quantity_added = Integer(required=True)
    quantity = Integer(required=True)
    price_at_add = Float(required=True)


@delivery.event(part_of="ShoppingCart")
class CartItemQuantityChanged:
    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    previous_quantity = Integer(required=True)
    quantity = Integer(required=True)


@delivery.event(part_of="ShoppingCart")
class CartItemRemoved:
    __version__ = 1

    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    shop_id = Identifier(required=True)


@delivery.event(part_of="ShoppingCart")
class CartShopCleared:
    """All items of one shop left the cart, either explicitly or by ordering them."""

    __version__ = 1

    customer_id = Identifier(required=True)
    shop_id = Identifier(required=True)
    removed_count = Integer(required=True)
