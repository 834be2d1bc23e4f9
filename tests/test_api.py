"""HTTP-level tests for the order API and dashboard."""

from pizzeria.core.errors import StoreError
from pizzeria.main import app
from pizzeria.services import get_order_store

ORDER_BODY = {
    "orderItems": [
        {"itemId": "P1", "itemQuantity": 2},
        {"itemId": "P2", "itemQuantity": 1},
    ],
    "customerAddress": "123 Main St",
}


class TestCatalogEndpoint:
    async def test_products_grouped_by_category(self, client):
        response = await client.get("/api/products")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        categories = body["data"]["categories"]
        assert list(categories) == ["Drinks", "Pizzas", "Sides"]
        assert [p["itemId"] for p in categories["Pizzas"]] == ["P2", "P1"]
        assert categories["Drinks"][0] == {
            "itemId": "D1",
            "name": "Lemonade",
            "price": 3.25,
            "description": "Fresh",
            "category": "Drinks",
        }


class TestCalculateEndpoint:
    async def test_prices_order(self, client):
        response = await client.post("/api/orders/calculate", json=ORDER_BODY)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["subtotal"] == 31.00
        assert data["delivery_fee"] == 5.00
        assert data["total"] == 36.00
        assert data["customerAddress"] == "123 Main St"
        first = data["orderItems"][0]
        assert first["itemQuantity"] == 2
        assert first["subtotal"] == 19.00
        assert first["product"]["itemId"] == "P1"

    async def test_missing_fields(self, client):
        response = await client.post("/api/orders/calculate", json={"customerAddress": "x"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "Missing required fields"
        assert "timestamp" in body

    async def test_unknown_product(self, client):
        body = {"orderItems": [{"itemId": "NOPE", "itemQuantity": 1}], "customerAddress": "x"}

        response = await client.post("/api/orders/calculate", json=body)

        assert response.status_code == 400
        assert response.json()["error"] == "Product NOPE not found"

    async def test_zero_quantity_is_schema_error(self, client):
        body = {"orderItems": [{"itemId": "P1", "itemQuantity": 0}], "customerAddress": "x"}

        response = await client.post("/api/orders/calculate", json=body)

        assert response.status_code == 422


class TestOrderEndpoints:
    async def test_create_then_fetch(self, client):
        created = await client.post("/api/orders", json=ORDER_BODY)

        assert created.status_code == 200
        data = created.json()["data"]
        tracking_id = data["orderTrackingId"]
        assert data["order"]["orderTrackingId"] == tracking_id
        assert data["order"]["status"] == "new"
        assert data["order"]["estimated_delivery_time"] == "30-45 minutes"

        fetched = await client.get(f"/api/orders/{tracking_id}")

        assert fetched.status_code == 200
        order = fetched.json()["data"]["order"]
        assert order == data["order"]
        assert order["total"] == 36.00
        assert [(i["product"]["itemId"], i["itemQuantity"], i["subtotal"]) for i in order["orderItems"]] == [
            ("P1", 2, 19.00),
            ("P2", 1, 12.00),
        ]

    async def test_create_with_unknown_product_stores_nothing(self, client):
        body = {"orderItems": [{"itemId": "NOPE", "itemQuantity": 1}], "customerAddress": "x"}

        response = await client.post("/api/orders", json=body)
        dashboard = await client.get("/dashboard")

        assert response.status_code == 400
        assert dashboard.status_code == 200
        assert 'class="hover:bg-gray-50"' not in dashboard.text

    async def test_missing_order(self, client):
        response = await client.get("/api/orders/unknown-id")

        assert response.status_code == 404
        assert response.json()["error"] == "Order not found"
        assert response.json()["success"] is False


class TestDashboard:
    async def test_lists_orders(self, client):
        created = await client.post("/api/orders", json=ORDER_BODY)
        tracking_id = created.json()["data"]["orderTrackingId"]

        for path in ("/", "/dashboard"):
            response = await client.get(path)

            assert response.status_code == 200
            assert response.headers["content-type"].startswith("text/html")
            assert tracking_id[:8] in response.text
            assert "2x Margherita" in response.text
            assert "$36.00" in response.text
            assert "bg-blue-100 text-blue-800" in response.text


class TestCors:
    async def test_preflight(self, client):
        response = await client.options(
            "/api/orders",
            headers={
                "Origin": "http://shop.example",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "Content-Type",
            },
        )

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "healthy"


class BrokenStore:
    """Order store whose every call fails like a dead database."""

    async def list_orders(self):
        raise StoreError("database is locked")

    async def get_order(self, tracking_id):
        raise StoreError("database is locked")


class TestStoreFailures:
    async def test_dashboard_error_page(self, client):
        app.dependency_overrides[get_order_store] = BrokenStore

        response = await client.get("/dashboard")

        assert response.status_code == 500
        assert "<h1>Error</h1>" in response.text

    async def test_order_lookup_maps_to_500(self, client):
        app.dependency_overrides[get_order_store] = BrokenStore

        response = await client.get("/api/orders/anything")

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "error": "database is locked",
            "timestamp": response.json()["timestamp"],
        }
