"""Integration tests for the cart endpoints via TestClient."""

from delivery.cart.views import load_cart


def _add(client, headers, product_id="prod-001", quantity=1):
    return client.post("/cart", json={"productId": product_id, "quantity": quantity}, headers=headers)


class TestEnvelope:
    def test_success_envelope(self, client, as_customer):
        response = _add(client, as_customer, quantity=2)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert "timestamp" in body
        data = body["data"]
        assert data["totalItems"] == 1
        assert data["totalAmount"] == 100000.0
        group = data["groups"][0]
        assert group["shopId"] == "shop-001"
        assert group["shopName"] == "Com Tam Ba Ghien"
        assert group["isOpen"] is True
        assert group["items"][0]["productId"] == "prod-001"

    def test_error_envelope(self, client, as_customer):
        response = _add(client, as_customer, product_id="prod-404")

        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["data"]["errorCode"] == "CART_001"
        assert body["data"]["message"]
        assert "timestamp" in body

    def test_error_details_are_included(self, client, as_customer):
        _add(client, as_customer, quantity=998)
        response = _add(client, as_customer, quantity=5)

        assert response.status_code == 409
        data = response.json()["data"]
        assert data["errorCode"] == "CART_006"
        assert data["details"] == {"current": 998, "requested": 5, "max": 999}


class TestAuth:
    def test_missing_headers(self, client):
        response = client.get("/cart")
        assert response.status_code == 401
        assert response.json()["data"]["errorCode"] == "AUTH_REQUIRED"

    def test_unknown_role(self, client):
        response = client.get("/cart", headers={"X-User-Id": "u-1", "X-User-Role": "ROOT"})
        assert response.status_code == 401

    def test_wrong_role(self, client, as_owner):
        response = client.get("/cart", headers=as_owner)
        assert response.status_code == 403
        assert response.json()["data"]["errorCode"] == "ROLE_FORBIDDEN"


class TestCartEndpoints:
    def test_get_empty_cart(self, client, as_customer):
        response = client.get("/cart", headers=as_customer)
        assert response.status_code == 200
        assert response.json()["data"] == {"groups": [], "totalItems": 0, "totalAmount": 0.0}

    def test_get_shop_group(self, client, as_customer):
        _add(client, as_customer)
        _add(client, as_customer, product_id="prod-101")

        response = client.get("/cart/shop/shop-002", headers=as_customer)

        assert response.status_code == 200
        assert response.json()["data"]["shopName"] == "Banh Mi Huynh Hoa"

    def test_get_missing_shop_group(self, client, as_customer):
        response = client.get("/cart/shop/shop-002", headers=as_customer)
        assert response.status_code == 200
        assert response.json()["data"] is None

    def test_update_quantity(self, client, as_customer):
        _add(client, as_customer)
        response = client.put("/cart/prod-001", json={"quantity": 4}, headers=as_customer)

        assert response.status_code == 200
        assert response.json()["data"]["groups"][0]["items"][0]["quantity"] == 4

    def test_update_quantity_out_of_range(self, client, as_customer):
        _add(client, as_customer)
        response = client.put("/cart/prod-001", json={"quantity": 1000}, headers=as_customer)

        assert response.status_code == 400
        data = response.json()["data"]
        assert data["errorCode"] == "VALIDATION_ERROR"
        assert data["details"][0]["field"] == "quantity"

    def test_remove_item(self, client, as_customer):
        _add(client, as_customer)
        response = client.delete("/cart/prod-001", headers=as_customer)

        assert response.status_code == 200
        assert response.json()["data"]["groups"] == []
        assert load_cart("cust-001") is None

    def test_clear_by_shop(self, client, as_customer):
        _add(client, as_customer)
        _add(client, as_customer, product_id="prod-101")

        response = client.delete("/cart/shop/shop-001", headers=as_customer)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["removedCount"] == 1
        assert [g["shopId"] for g in data["groups"]] == ["shop-002"]

    def test_clear_cart(self, client, as_customer):
        _add(client, as_customer)
        _add(client, as_customer, product_id="prod-101")

        response = client.delete("/cart", headers=as_customer)

        assert response.status_code == 200
        assert response.json()["data"] == {"removedCount": 2}
