"""Shared BDD fixtures and step definitions for the delivery domain."""

import pytest
from delivery.cart.items import add_to_cart
from delivery.cart.views import cart_view, load_cart
from delivery.catalogue.registration import CloseShop
from delivery.order.order import Order
from protean import current_domain
from pytest_bdd import given, parsers, then


@pytest.fixture()
def error():
    """Container for the error raised by the last When step."""
    return {"exc": None}


@pytest.fixture()
def context():
    """Identifiers carried between steps of one scenario."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("the catalogue has two open shops")
def _(catalogue):
    return catalogue


@given(parsers.cfparse('the customer has {qty:d} of "{product_id}" in the cart'))
def _(qty, product_id):
    add_to_cart("cust-001", product_id, qty)


@given(parsers.cfparse('the shop "{shop_id}" is closed'))
def _(shop_id):
    current_domain.process(CloseShop(shop_id=shop_id), asynchronous=False)


@given(parsers.cfparse('a placed order from "{shop_id}"'))
def _(make_order, context, shop_id):
    product_id = "prod-001" if shop_id == "shop-001" else "prod-101"
    context["order_id"] = make_order(product_id=product_id, shop_id=shop_id)


@given(parsers.cfparse('the order was moved to "{status}"'))
def _(advance_order, context, status):
    advance_order(context["order_id"], status)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the request fails with "{code}"'))
def _(error, code):
    assert error["exc"] is not None, "expected the request to fail"
    assert error["exc"].code == code


@then(parsers.cfparse("the cart has {count:d} shop group"))
@then(parsers.cfparse("the cart has {count:d} shop groups"))
def _(count):
    assert len(cart_view("cust-001")["groups"]) == count


@then(parsers.cfparse('the first group is "{shop_id}"'))
def _(shop_id):
    assert cart_view("cust-001")["groups"][0]["shop_id"] == shop_id


@then(parsers.cfparse('the cart holds {qty:d} of "{product_id}"'))
def _(qty, product_id):
    item = load_cart("cust-001").item_for(product_id)
    assert item is not None
    assert item.quantity == qty


@then(parsers.cfparse('the order is "{status}" and "{payment_status}"'))
def _(context, status, payment_status):
    order = current_domain.repository_for(Order).get(context["order_id"])
    assert order.status == status
    assert order.payment_status == payment_status
