import pytest
from delivery.api.errors import install_error_handlers
from delivery.api.routes import admin_router, cart_router, order_router
from fastapi import FastAPI
from fastapi.testclient import TestClient


@pytest.fixture()
def client(catalogue):
    app = FastAPI()
    install_error_handlers(app)
    app.include_router(cart_router)
    app.include_router(order_router)
    app.include_router(admin_router)
    return TestClient(app)


def _headers(user_id, role):
    return {"X-User-Id": user_id, "X-User-Role": role}


@pytest.fixture()
def as_customer():
    return _headers("cust-001", "CUSTOMER")


@pytest.fixture()
def as_other_customer():
    return _headers("cust-002", "CUSTOMER")


@pytest.fixture()
def as_owner():
    return _headers("owner-001", "OWNER")


@pytest.fixture()
def as_shipper():
    return _headers("shipper-001", "SHIPPER")


@pytest.fixture()
def as_admin():
    return _headers("admin-001", "ADMIN")
