"""Tests for the ShoppingCart aggregate: accumulation, ceiling, snapshots and shop groups."""

import pytest
from delivery.cart.cart import ShoppingCart
from delivery.cart.events import CartItemAdded, CartItemQuantityChanged, CartItemRemoved, CartShopCleared
from delivery.catalogue.product import Product
from delivery.shared.errors import ConflictError, InvalidRequestError, NotFoundError


def _product(product_id="prod-001", shop_id="shop-001", price=50000.0, name="Com suon"):
    return Product(id=product_id, shop_id=shop_id, name=name, price=price, image_url="https://img/1.jpg")


def _cart():
    return ShoppingCart.create(customer_id="cust-001")


class TestAddItem:
    def test_first_add_creates_item_with_snapshot(self):
        cart = _cart()
        cart.add_item(_product(), 2)

        assert len(cart.items) == 1
        item = cart.items[0]
        assert item.product_id == "prod-001"
        assert item.shop_id == "shop-001"
        assert item.product_name == "Com suon"
        assert item.price_at_add == 50000.0
        assert item.quantity == 2
        assert item.subtotal == 100000.0
        assert item.added_at is not None

    def test_adding_same_product_accumulates(self):
        cart = _cart()
        cart.add_item(_product(), 2)
        cart.add_item(_product(), 3)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5

    def test_accumulation_keeps_added_at(self):
        cart = _cart()
        cart.add_item(_product(), 1)
        first_added_at = cart.items[0].added_at

        cart.add_item(_product(), 1)

        assert cart.items[0].added_at == first_added_at
        assert cart.items[0].updated_at >= first_added_at

    def test_accumulation_refreshes_price_and_name(self):
        cart = _cart()
        cart.add_item(_product(price=50000.0), 1)
        cart.add_item(_product(price=55000.0, name="Com suon (lon)"), 1)

        item = cart.items[0]
        assert item.price_at_add == 55000.0
        assert item.product_name == "Com suon (lon)"
        assert item.subtotal == 110000.0

    def test_products_of_different_shops_coexist(self):
        cart = _cart()
        cart.add_item(_product(), 1)
        cart.add_item(_product(product_id="prod-101", shop_id="shop-002"), 1)

        assert len(cart.items) == 2
        assert len(cart.items_for_shop("shop-001")) == 1
        assert len(cart.items_for_shop("shop-002")) == 1

    def test_quantity_below_one_is_rejected(self):
        cart = _cart()
        with pytest.raises(InvalidRequestError) as exc:
            cart.add_item(_product(), 0)
        assert exc.value.code == "CART_005"

    def test_reaching_the_ceiling_is_allowed(self):
        cart = _cart()
        cart.add_item(_product(), 998)
        cart.add_item(_product(), 1)
        assert cart.items[0].quantity == 999

    def test_exceeding_the_ceiling_is_a_conflict(self):
        cart = _cart()
        cart.add_item(_product(), 998)

        with pytest.raises(ConflictError) as exc:
            cart.add_item(_product(), 2)

        assert exc.value.code == "CART_006"
        assert exc.value.details == {"current": 998, "requested": 2, "max": 999}
        assert cart.items[0].quantity == 998

    def test_single_add_over_ceiling_is_a_conflict(self):
        cart = _cart()
        with pytest.raises(ConflictError):
            cart.add_item(_product(), 1000)
        assert cart.is_empty

    def test_add_raises_event(self):
        cart = _cart()
        cart.add_item(_product(), 2)
        cart.add_item(_product(), 1)

        events = [e for e in cart._events if isinstance(e, CartItemAdded)]
        assert len(events) == 2
        assert events[-1].quantity_added == 1
        assert events[-1].quantity == 3


class TestUpdateQuantity:
    def test_update_overwrites_quantity(self):
        cart = _cart()
        cart.add_item(_product(), 2)
        cart.update_quantity("prod-001", 7)
        assert cart.items[0].quantity == 7

    def test_update_can_lower_quantity(self):
        cart = _cart()
        cart.add_item(_product(), 10)
        cart.update_quantity("prod-001", 1)
        assert cart.items[0].quantity == 1

    @pytest.mark.parametrize("quantity", [0, -1, 1000])
    def test_update_out_of_range(self, quantity):
        cart = _cart()
        cart.add_item(_product(), 2)

        with pytest.raises(InvalidRequestError) as exc:
            cart.update_quantity("prod-001", quantity)

        assert exc.value.code == "CART_005"
        assert cart.items[0].quantity == 2

    def test_update_missing_item(self):
        cart = _cart()
        with pytest.raises(NotFoundError) as exc:
            cart.update_quantity("prod-404", 1)
        assert exc.value.code == "CART_003"

    def test_update_raises_event(self):
        cart = _cart()
        cart.add_item(_product(), 2)
        cart.update_quantity("prod-001", 4)

        event = next(e for e in cart._events if isinstance(e, CartItemQuantityChanged))
        assert event.previous_quantity == 2
        assert event.quantity == 4


class TestRemoveAndClear:
    def test_remove_item(self):
        cart = _cart()
        cart.add_item(_product(), 1)
        cart.remove_item("prod-001")

        assert cart.is_empty
        assert any(isinstance(e, CartItemRemoved) for e in cart._events)

    def test_remove_missing_item(self):
        cart = _cart()
        with pytest.raises(NotFoundError) as exc:
            cart.remove_item("prod-404")
        assert exc.value.code == "CART_004"

    def test_clear_shop_removes_only_that_shop(self):
        cart = _cart()
        cart.add_item(_product(), 1)
        cart.add_item(_product(product_id="prod-002"), 1)
        cart.add_item(_product(product_id="prod-101", shop_id="shop-002"), 1)

        removed = cart.clear_shop("shop-001")

        assert removed == 2
        assert [i.product_id for i in cart.items] == ["prod-101"]
        event = next(e for e in cart._events if isinstance(e, CartShopCleared))
        assert event.removed_count == 2

    def test_clear_shop_without_items_is_a_no_op(self):
        cart = _cart()
        cart.add_item(_product(), 1)

        assert cart.clear_shop("shop-999") == 0
        assert len(cart.items) == 1
        assert not any(isinstance(e, CartShopCleared) for e in cart._events)

    def test_clear_empties_the_cart(self):
        cart = _cart()
        cart.add_item(_product(), 1)
        cart.add_item(_product(product_id="prod-101", shop_id="shop-002"), 3)

        assert cart.clear() == 2
        assert cart.is_empty
