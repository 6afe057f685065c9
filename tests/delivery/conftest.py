"""Shared fixtures for the delivery domain: a seeded catalogue and the actors that use it."""

import json

import pytest
from delivery.catalogue.registration import RegisterProduct, RegisterShipper, RegisterShop
from delivery.cart.items import add_to_cart
from delivery.order.cancellation import CancelOrder
from delivery.order.owner import ConfirmOrder, MarkPreparing, MarkReady
from delivery.order.placement import PlaceOrder
from delivery.order.shipper import MarkDelivered, accept_order
from delivery.shared.actor import Actor, Role
from protean import current_domain

CUSTOMER_ID = "cust-001"
OTHER_CUSTOMER_ID = "cust-002"
OWNER_ID = "owner-001"
OTHER_OWNER_ID = "owner-002"
SHIPPER_ID = "shipper-001"
OTHER_SHIPPER_ID = "shipper-002"
ADMIN_ID = "admin-001"

SHOP_ID = "shop-001"
OTHER_SHOP_ID = "shop-002"
PRODUCT_ID = "prod-001"
SECOND_PRODUCT_ID = "prod-002"
OTHER_SHOP_PRODUCT_ID = "prod-101"

ADDRESS = {
    "label": "Dorm",
    "full_address": "KTX Khu B, Linh Trung, Thu Duc",
    "building": "B3",
    "room": "402",
}


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------
@pytest.fixture()
def customer():
    return Actor(user_id=CUSTOMER_ID, role=Role.CUSTOMER.value)


@pytest.fixture()
def other_customer():
    return Actor(user_id=OTHER_CUSTOMER_ID, role=Role.CUSTOMER.value)


@pytest.fixture()
def owner():
    return Actor(user_id=OWNER_ID, role=Role.OWNER.value)


@pytest.fixture()
def other_owner():
    return Actor(user_id=OTHER_OWNER_ID, role=Role.OWNER.value)


@pytest.fixture()
def shipper():
    return Actor(user_id=SHIPPER_ID, role=Role.SHIPPER.value)


@pytest.fixture()
def other_shipper():
    return Actor(user_id=OTHER_SHIPPER_ID, role=Role.SHIPPER.value)


@pytest.fixture()
def admin():
    return Actor(user_id=ADMIN_ID, role=Role.ADMIN.value)


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
def register_shop(shop_id=SHOP_ID, name="Com Tam Ba Ghien", owner_id=OWNER_ID, ship_fee=15000.0, is_open=True):
    command = RegisterShop(
        shop_id=shop_id,
        name=name,
        owner_id=owner_id,
        address="84 Dang Van Ngu, Phu Nhuan",
        ship_fee_per_order=ship_fee,
        is_open=is_open,
    )
    return current_domain.process(command, asynchronous=False)


def register_product(product_id=PRODUCT_ID, shop_id=SHOP_ID, name="Com suon bi cha", price=50000.0):
    command = RegisterProduct(
        product_id=product_id,
        shop_id=shop_id,
        name=name,
        price=price,
        image_url=f"https://img.example.com/{product_id}.jpg",
    )
    return current_domain.process(command, asynchronous=False)


def register_shipper(user_id=SHIPPER_ID, shop_id=SHOP_ID, status="AVAILABLE"):
    command = RegisterShipper(user_id=user_id, shop_id=shop_id, name=f"Shipper {user_id}", status=status)
    return current_domain.process(command, asynchronous=False)


@pytest.fixture()
def catalogue():
    """Two shops. The first sells two products and has two shippers."""
    register_shop()
    register_product()
    register_product(product_id=SECOND_PRODUCT_ID, name="Canh chua", price=20000.0)
    register_shop(shop_id=OTHER_SHOP_ID, name="Banh Mi Huynh Hoa", owner_id=OTHER_OWNER_ID, ship_fee=10000.0)
    register_product(product_id=OTHER_SHOP_PRODUCT_ID, shop_id=OTHER_SHOP_ID, name="Banh mi dac biet", price=35000.0)
    register_shipper()
    register_shipper(user_id=OTHER_SHIPPER_ID)
    return {"shop_id": SHOP_ID, "other_shop_id": OTHER_SHOP_ID}


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
def place_order(customer_id=CUSTOMER_ID, shop_id=SHOP_ID, payment_method="COD", voucher_code=None):
    command = PlaceOrder(
        customer_id=customer_id,
        shop_id=shop_id,
        delivery_address=json.dumps(ADDRESS),
        payment_method=payment_method,
        voucher_code=voucher_code,
    )
    return current_domain.process(command, asynchronous=False)


def order_from_cart(customer_id=CUSTOMER_ID, product_id=PRODUCT_ID, quantity=1, shop_id=SHOP_ID, **kwargs):
    add_to_cart(customer_id, product_id, quantity)
    return place_order(customer_id=customer_id, shop_id=shop_id, **kwargs)


def _as(command_cls, order_id, user_id, role, **extra):
    command = command_cls(order_id=order_id, actor_id=user_id, actor_role=role.value, **extra)
    current_domain.process(command, asynchronous=False)


def advance(order_id, to_status, owner_id=OWNER_ID, shipper_id=SHIPPER_ID):
    """Drive an order forward from PENDING to ``to_status`` along the happy path."""
    if to_status == "CANCELLED":
        _as(CancelOrder, order_id, CUSTOMER_ID, Role.CUSTOMER)
        return

    path = ["CONFIRMED", "PREPARING", "READY", "SHIPPING", "DELIVERED"]
    for status in path[: path.index(to_status) + 1]:
        if status == "CONFIRMED":
            _as(ConfirmOrder, order_id, owner_id, Role.OWNER)
        elif status == "PREPARING":
            _as(MarkPreparing, order_id, owner_id, Role.OWNER)
        elif status == "READY":
            _as(MarkReady, order_id, owner_id, Role.OWNER)
        elif status == "SHIPPING":
            accept_order(order_id, Actor(user_id=shipper_id, role=Role.SHIPPER.value))
        elif status == "DELIVERED":
            _as(MarkDelivered, order_id, shipper_id, Role.SHIPPER)


@pytest.fixture()
def make_order(catalogue):
    """Fill the cart and place an order from it; returns the order id."""
    return order_from_cart


@pytest.fixture()
def advance_order():
    return advance


@pytest.fixture()
def checkout():
    """Place an order from whatever is already in the cart."""
    return place_order


@pytest.fixture()
def placed_order(make_order):
    """A PENDING COD order for one 'Com suon bi cha' at 50,000 from the first shop."""
    return make_order()
