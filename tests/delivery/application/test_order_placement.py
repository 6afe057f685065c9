"""Application tests for PlaceOrder: one shop's cart group becomes an order atomically."""

from unittest import mock

import pytest
from delivery.cart.cart import ShoppingCart
from delivery.cart.items import add_to_cart
from delivery.cart.views import load_cart
from delivery.catalogue.registration import CloseShop, SetProductAvailability
from delivery.order.order import Order
from delivery.order.views import order_detail
from delivery.shared.errors import ConflictError, InvalidRequestError, NotFoundError
from delivery.voucher.management import CreateVoucher, DeactivateVoucher
from delivery.voucher.voucher import Voucher
from protean import current_domain

CUSTOMER_ID = "cust-001"


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _orders():
    return current_domain.repository_for(Order)._dao.query.all().items


@pytest.fixture(autouse=True)
def _seeded(catalogue):
    return catalogue


class TestPlaceOrder:
    def test_order_from_single_item(self, checkout):
        add_to_cart(CUSTOMER_ID, "prod-001", 1)

        order_id = checkout()
        order = current_domain.repository_for(Order).get(order_id)

        assert order.subtotal == 50000.0
        assert order.ship_fee == 15000.0
        assert order.total == 65000.0
        assert order.status == "PENDING"
        assert order.payment_status == "UNPAID"
        assert order.payment_method == "COD"
        assert order.shop_name == "Com Tam Ba Ghien"
        assert order.delivery_address.full_address == "KTX Khu B, Linh Trung, Thu Duc"
        assert order.shipper_id is None

    def test_detail_always_carries_shipper_id(self, checkout):
        add_to_cart(CUSTOMER_ID, "prod-001", 1)
        order = current_domain.repository_for(Order).get(checkout())

        detail = order_detail(order)
        assert "shipper_id" in detail
        assert detail["shipper_id"] is None

    def test_line_items_snapshot_cart(self, checkout):
        add_to_cart(CUSTOMER_ID, "prod-001", 2)
        add_to_cart(CUSTOMER_ID, "prod-002", 1)

        order = current_domain.repository_for(Order).get(checkout())

        lines = {i.product_id: (i.product_name, i.quantity, i.price, i.subtotal) for i in order.items}
        assert lines == {
            "prod-001": ("Com suon bi cha", 2, 50000.0, 100000.0),
            "prod-002": ("Canh chua", 1, 20000.0, 20000.0),
        }
        assert order.total == 135000.0

    def test_only_that_shops_items_leave_the_cart(self, checkout):
        add_to_cart(CUSTOMER_ID, "prod-001", 1)
        add_to_cart(CUSTOMER_ID, "prod-101", 2)

        checkout(shop_id="shop-001")

        cart = load_cart(CUSTOMER_ID)
        assert [(i.product_id, i.quantity) for i in cart.items] == [("prod-101", 2)]

    def test_ordering_last_group_deletes_cart(self, checkout):
        add_to_cart(CUSTOMER_ID, "prod-001", 1)
        checkout()
        assert load_cart(CUSTOMER_ID) is None

    def test_prepaid_method_is_recorded(self, checkout):
        add_to_cart(CUSTOMER_ID, "prod-001", 1)
        order = current_domain.repository_for(Order).get(checkout(payment_method="MOMO"))
        assert order.payment_method == "MOMO"
        assert order.payment_status == "UNPAID"


class TestPlacementRejections:
    def test_empty_cart(self, checkout):
        with pytest.raises(NotFoundError) as exc:
            checkout()
        assert exc.value.code == "ORDER_001"

    def test_no_items_from_shop(self, checkout):
        add_to_cart(CUSTOMER_ID, "prod-101", 1)
        with pytest.raises(NotFoundError) as exc:
            checkout(shop_id="shop-001")
        assert exc.value.code == "ORDER_002"

    def test_closed_shop(self, checkout):
        add_to_cart(CUSTOMER_ID, "prod-001", 1)
        _process(CloseShop(shop_id="shop-001"))

        with pytest.raises(ConflictError) as exc:
            checkout()

        assert exc.value.code == "ORDER_004"
        assert len(load_cart(CUSTOMER_ID).items) == 1

    def test_product_became_unavailable(self, checkout):
        add_to_cart(CUSTOMER_ID, "prod-001", 1)
        add_to_cart(CUSTOMER_ID, "prod-002", 1)
        _process(SetProductAvailability(product_id="prod-002", is_available=False))

        with pytest.raises(ConflictError) as exc:
            checkout()

        assert exc.value.code == "ORDER_005"
        assert exc.value.details == {"product_ids": ["prod-002"]}
        assert _orders() == []


class TestAtomicity:
    def test_failure_after_order_write_leaves_nothing_behind(self, checkout):
        add_to_cart(CUSTOMER_ID, "prod-001", 1)
        add_to_cart(CUSTOMER_ID, "prod-101", 1)

        with mock.patch.object(ShoppingCart, "clear_shop", side_effect=RuntimeError("cart store unavailable")):
            with pytest.raises(RuntimeError):
                checkout()

        assert _orders() == []
        cart = load_cart(CUSTOMER_ID)
        assert sorted(i.product_id for i in cart.items) == ["prod-001", "prod-101"]

    def test_voucher_redemption_rolls_back_with_the_order(self, checkout):
        _process(CreateVoucher(code="GIAM10K", value=10000.0, usage_limit=5))
        add_to_cart(CUSTOMER_ID, "prod-001", 1)

        with mock.patch.object(ShoppingCart, "clear_shop", side_effect=RuntimeError("cart store unavailable")):
            with pytest.raises(RuntimeError):
                checkout(voucher_code="GIAM10K")

        voucher = current_domain.repository_for(Voucher).find_by_code("GIAM10K")
        assert voucher.used_count == 0


class TestVouchers:
    def test_voucher_discount_is_applied_and_redeemed(self, checkout):
        _process(CreateVoucher(code="giam10k", value=10000.0))
        add_to_cart(CUSTOMER_ID, "prod-001", 1)

        order = current_domain.repository_for(Order).get(checkout(voucher_code="GIAM10K"))

        assert order.discount == 10000.0
        assert order.total == 55000.0
        assert order.voucher_code == "GIAM10K"
        voucher = current_domain.repository_for(Voucher).find_by_code("GIAM10K")
        assert voucher.used_count == 1

    def test_percent_voucher_for_the_shop(self, checkout):
        _process(CreateVoucher(code="SALE20", shop_id="shop-001", discount_type="PERCENT", value=20.0))
        add_to_cart(CUSTOMER_ID, "prod-001", 1)

        order = current_domain.repository_for(Order).get(checkout(voucher_code="sale20"))
        assert order.discount == 10000.0
        assert order.total == 55000.0

    def test_unknown_voucher(self, checkout):
        add_to_cart(CUSTOMER_ID, "prod-001", 1)
        with pytest.raises(InvalidRequestError) as exc:
            checkout(voucher_code="NOPE")
        assert exc.value.code == "VOUCHER_NOT_FOUND"
        assert _orders() == []

    def test_deactivated_voucher(self, checkout):
        _process(CreateVoucher(code="GIAM10K", value=10000.0))
        _process(DeactivateVoucher(code="GIAM10K"))
        add_to_cart(CUSTOMER_ID, "prod-001", 1)

        with pytest.raises(InvalidRequestError) as exc:
            checkout(voucher_code="GIAM10K")
        assert exc.value.code == "VOUCHER_INACTIVE"

    def test_duplicate_voucher_code(self):
        _process(CreateVoucher(code="GIAM10K", value=10000.0))
        with pytest.raises(ConflictError) as exc:
            _process(CreateVoucher(code="giam10k", value=5000.0))
        assert exc.value.code == "VOUCHER_EXISTS"
