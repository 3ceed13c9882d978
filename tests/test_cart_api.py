"""
Component tests for the cart API.

Requests go through the real app (routes, auth gate, services, SQLite),
with the client authenticated by the cookies set at login.
"""
from fastapi.testclient import TestClient

from conftest import API


class TestCartRequiresLogin:

    def test_view_without_token(self, client: TestClient):
        response = client.get(f"{API}/cart")

        assert response.status_code == 401
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "No token provided"

    def test_add_without_token(self, client: TestClient, create_product):
        product = create_product()

        response = client.post(f"{API}/cart/add", json={"productId": product["id"]})

        assert response.status_code == 401


class TestCartFlow:
    """Full add / update / adjust / remove / clear flow through HTTP."""

    def test_empty_cart(self, auth_client: TestClient):
        response = auth_client.get(f"{API}/cart")

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Cart is empty"
        assert body["data"] == {"items": [], "totalAmount": 0}

    def test_add_then_view(self, auth_client: TestClient, create_product):
        # Arrange
        product = create_product()
        variant = next(v for v in product["variants"] if v["stock"] > 0)

        # Act
        response = auth_client.post(
            f"{API}/cart/add",
            json={"productId": product["id"], "quantity": 2, "variantId": variant["id"]},
        )

        # Assert
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["statusCode"] == 200
        cart = body["data"]
        assert len(cart["items"]) == 1
        assert cart["items"][0]["quantity"] == 2
        assert cart["items"][0]["variant"] == variant["id"]
        assert cart["items"][0]["product"]["name"] == product["name"]
        assert cart["totalAmount"] == 39.98

        view = auth_client.get(f"{API}/cart").json()
        assert view["message"] == "Cart retrieved successfully"
        assert view["data"]["items"][0]["product"]["category"] == "apparel"
        assert view["data"]["totalAmount"] == 39.98

    def test_update_adjust_remove_clear(self, auth_client: TestClient, create_product):
        tee = create_product()
        mug = create_product(name="Mug", category="home", price=7.5, variants=[])
        auth_client.post(f"{API}/cart/add", json={"productId": tee["id"]})
        cart = auth_client.post(f"{API}/cart/add", json={"productId": mug["id"]}).json()["data"]
        tee_line = next(it for it in cart["items"] if it["product"]["id"] == tee["id"])

        updated = auth_client.put(f"{API}/cart/update", json={"itemId": tee_line["id"], "quantity": 3})
        assert updated.status_code == 200
        assert updated.json()["data"]["totalAmount"] == 67.47

        adjusted = auth_client.patch(f"{API}/cart/item/{tee_line['id']}/adjust", json={"action": "decrease"})
        assert adjusted.status_code == 200
        assert adjusted.json()["message"] == "Item quantity decreased successfully"
        assert adjusted.json()["data"]["totalAmount"] == 47.48

        removed = auth_client.delete(f"{API}/cart/product/{mug['id']}")
        assert removed.status_code == 200
        assert removed.json()["data"]["totalAmount"] == 39.98

        removed = auth_client.delete(f"{API}/cart/item/{tee_line['id']}")
        assert removed.json()["data"]["items"] == []

        cleared = auth_client.delete(f"{API}/cart/clear")
        assert cleared.status_code == 200
        assert cleared.json()["data"]["totalAmount"] == 0

    def test_check_product(self, auth_client: TestClient, create_product):
        product = create_product()
        auth_client.post(f"{API}/cart/add", json={"productId": product["id"], "quantity": 2})

        response = auth_client.get(f"{API}/cart/check/{product['id']}")

        assert response.status_code == 200
        assert response.json()["data"] == {"isInCart": True, "quantity": 2}


class TestCartErrors:

    def test_unknown_product(self, auth_client: TestClient):
        response = auth_client.post(f"{API}/cart/add", json={"productId": 999})

        assert response.status_code == 404
        assert response.json()["message"] == "Product not found"

    def test_insufficient_stock(self, auth_client: TestClient, create_product):
        product = create_product()
        variant = next(v for v in product["variants"] if v["stock"] == 5)

        response = auth_client.post(
            f"{API}/cart/add",
            json={"productId": product["id"], "quantity": 6, "variantId": variant["id"]},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Not enough stock available"

    def test_zero_quantity_rejected(self, auth_client: TestClient, create_product):
        product = create_product()

        response = auth_client.post(f"{API}/cart/add", json={"productId": product["id"], "quantity": 0})

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_update_without_cart(self, auth_client: TestClient):
        response = auth_client.put(f"{API}/cart/update", json={"itemId": 1, "quantity": 2})

        assert response.status_code == 404
        assert response.json()["message"] == "Cart not found"

    def test_invalid_adjust_action(self, auth_client: TestClient, create_product):
        product = create_product()
        cart = auth_client.post(f"{API}/cart/add", json={"productId": product["id"]}).json()["data"]

        response = auth_client.patch(
            f"{API}/cart/item/{cart['items'][0]['id']}/adjust", json={"action": "triple"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Action must be either increase or decrease"

    def test_carts_are_per_user(self, client: TestClient, register_user, login, create_product):
        product = create_product()
        register_user(email="one@parushop.io")
        register_user(email="two@parushop.io")

        login(email="one@parushop.io")
        client.post(f"{API}/cart/add", json={"productId": product["id"]})

        login(email="two@parushop.io")
        response = client.get(f"{API}/cart")

        assert response.json()["data"]["items"] == []
