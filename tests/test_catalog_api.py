"""
Component tests for the product catalog API.
"""
from fastapi.testclient import TestClient

from conftest import API, product_payload


class TestCreateAndRead:

    def test_create_product(self, client: TestClient):
        response = client.post(f"{API}/products", json=product_payload())

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Product created successfully"
        product = body["data"]
        assert product["price"] == 19.99
        assert product["images"] == ["/images/tee.jpg"]
        assert [v["color"] for v in product["variants"]] == ["Black", "White"]

    def test_get_product(self, client: TestClient, create_product):
        created = create_product(reviews=[{"user": "Sam", "rating": 5, "comment": "Great"}])

        response = client.get(f"{API}/products/{created['id']}")

        assert response.status_code == 200
        product = response.json()["data"]
        assert product["name"] == created["name"]
        assert product["reviews"][0]["user"] == "Sam"

    def test_get_missing_product(self, client: TestClient):
        response = client.get(f"{API}/products/9999")

        assert response.status_code == 404
        assert response.json() == {
            "statusCode": 404,
            "success": False,
            "message": "Product not found",
            "errors": [],
        }

    def test_negative_price_rejected(self, client: TestClient):
        response = client.post(f"{API}/products", json=product_payload(price=-1))

        assert response.status_code == 400

    def test_bulk_create(self, client: TestClient):
        response = client.post(
            f"{API}/products/bulk",
            json=[product_payload(name="A"), product_payload(name="B")],
        )

        assert response.status_code == 201
        assert [p["name"] for p in response.json()["data"]] == ["A", "B"]

    def test_bulk_create_empty(self, client: TestClient):
        response = client.post(f"{API}/products/bulk", json=[])

        assert response.status_code == 400
        assert response.json()["message"] == "Valid products array is required"


class TestListing:

    def test_filter_sort_paginate(self, client: TestClient, create_product):
        create_product(name="Cheap", price=5, rating=3.0)
        create_product(name="Mid", price=20, rating=4.0)
        create_product(name="Pricey", price=80, rating=4.8)
        create_product(name="Mug", category="home", price=9, rating=4.9)

        response = client.get(
            f"{API}/products",
            params={"category": "apparel", "minPrice": 10, "sortBy": "price", "sortOrder": "asc", "limit": 1},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert [p["name"] for p in data["products"]] == ["Mid"]
        assert data["pagination"] == {"total": 2, "page": 1, "limit": 1, "totalPages": 2}

    def test_min_rating(self, client: TestClient, create_product):
        create_product(name="Low", rating=2.0)
        create_product(name="High", rating=4.6)

        response = client.get(f"{API}/products", params={"minRating": 4})

        assert [p["name"] for p in response.json()["data"]["products"]] == ["High"]

    def test_unknown_sort_field(self, client: TestClient):
        response = client.get(f"{API}/products", params={"sortBy": "password"})

        assert response.status_code == 400

    def test_empty_catalog(self, client: TestClient):
        data = client.get(f"{API}/products").json()["data"]

        assert data["products"] == []
        assert data["pagination"]["totalPages"] == 0


class TestUpdateAndDelete:

    def test_partial_update(self, client: TestClient, create_product):
        product = create_product()

        response = client.put(f"{API}/products/{product['id']}", json={"price": 24.5})

        assert response.status_code == 200
        updated = response.json()["data"]
        assert updated["price"] == 24.5
        assert updated["name"] == product["name"]
        assert len(updated["variants"]) == 2

    def test_empty_update_rejected(self, client: TestClient, create_product):
        product = create_product()

        response = client.put(f"{API}/products/{product['id']}", json={})

        assert response.status_code == 400
        assert response.json()["message"] == "Update data is required"

    def test_delete_removes_from_carts(self, auth_client: TestClient, create_product):
        tee = create_product()
        mug = create_product(name="Mug", price=7.5, variants=[])
        auth_client.post(f"{API}/cart/add", json={"productId": tee["id"]})
        auth_client.post(f"{API}/cart/add", json={"productId": mug["id"]})

        response = auth_client.delete(f"{API}/products/{tee['id']}")

        assert response.status_code == 200
        assert auth_client.get(f"{API}/products/{tee['id']}").status_code == 404
        cart = auth_client.get(f"{API}/cart").json()["data"]
        assert [it["product"]["id"] for it in cart["items"]] == [mug["id"]]
        assert cart["totalAmount"] == 7.5


class TestAppSurface:

    def test_health(self, client: TestClient):
        assert client.get("/health").json()["status"] == "ok"

    def test_api_root(self, client: TestClient):
        body = client.get(API).json()

        assert body["success"] is True
        assert body["data"]["endpoints"]["products"] == f"{API}/products"

    def test_unknown_route_uses_envelope(self, client: TestClient):
        response = client.get(f"{API}/nowhere")

        assert response.status_code == 404
        assert response.json()["success"] is False
