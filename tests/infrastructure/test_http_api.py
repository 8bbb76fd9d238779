"""End-to-end tests for the HTTP API over in-memory SQLite."""

import pyotp
import pytest
from fastapi.testclient import TestClient

from orderdesk.application.list_products import ListProductsHandler
from orderdesk.infrastructure.bootstrap import build_container
from orderdesk.infrastructure.config import Settings
from orderdesk.infrastructure.http.app import create_app
from orderdesk.infrastructure.http.schemas import optional_code
from orderdesk.infrastructure.persistence.sql_order_repository import SqlOrderRepository

EMAIL = "alice@example.com"
PASSWORD = "correct horse"


@pytest.fixture
def container():
    c = build_container(
        Settings(database_url="sqlite://", secret_key="test-secret", bcrypt_rounds=4)
    )
    yield c
    c.engine.dispose()


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as test_client:
        yield test_client


def _login(client, email=EMAIL, password=PASSWORD) -> dict:
    client.post("/api/register", json={"email": email, "password": password})
    response = client.post("/api/login", json={"email": email, "password": password})
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def auth(client):
    return _login(client)


def _order_body(**overrides) -> dict:
    body = {
        "customerName": "Alice",
        "orderItems": [
            {"quantity": 2, "product": {"name": "Widget", "price": "15.00"}},
        ],
    }
    body.update(overrides)
    return body


class TestHealth:

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


class TestRegisterAndLogin:

    def test_register(self, client):
        response = client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})
        assert response.status_code == 201
        assert response.json() == {"message": "User created successfully"}

    def test_register_twice(self, client):
        client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})
        response = client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})
        assert response.status_code == 409

    def test_register_missing_password(self, client):
        response = client.post("/api/register", json={"email": EMAIL})
        assert response.status_code == 400
        assert response.json()["message"] == "Missing email or password"

    def test_login_returns_session_token(self, client):
        client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})
        response = client.post("/api/login", json={"email": EMAIL, "password": PASSWORD})
        assert response.status_code == 200
        assert set(response.json()) == {"token"}

    def test_bad_credentials(self, client):
        client.post("/api/register", json={"email": EMAIL, "password": PASSWORD})
        wrong = client.post("/api/login", json={"email": EMAIL, "password": "nope"})
        unknown = client.post("/api/login", json={"email": "bob@example.com", "password": "x"})
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json() == unknown.json() == {"message": "Invalid credentials"}
        assert wrong.headers["www-authenticate"] == "Bearer"


class TestAuthRequired:

    @pytest.mark.parametrize("method,path", [
        ("get", "/api/orders"),
        ("get", "/api/orders/1"),
        ("post", "/api/orders"),
        ("delete", "/api/orders/1"),
        ("get", "/api/products"),
        ("post", "/api/2fa/setup"),
        ("post", "/api/2fa/disable"),
    ])
    def test_no_token(self, client, method, path):
        assert getattr(client, method)(path).status_code == 401

    def test_forged_token(self, client):
        response = client.get("/api/orders", headers={"Authorization": "Bearer nonsense"})
        assert response.status_code == 401
        assert response.json() == {"message": "Invalid token"}


class TestOrders:

    def test_create(self, client, auth):
        response = client.post("/api/orders", json=_order_body(
            orderNumber="ORD-1",
            orderDate="2024-05-01T10:30:00",
            description="gift",
        ), headers=auth)

        assert response.status_code == 201
        body = response.json()
        assert body["orderNumber"] == "ORD-1"
        assert body["orderDate"] == "2024-05-01T10:30:00+00:00"
        assert body["status"] == "Pending"
        assert body["totalAmount"] == "30.00"
        item = body["orderItems"][0]
        assert item["quantity"] == 2
        assert item["priceAtPurchase"] == "15.00"
        assert item["subtotal"] == "30.00"
        assert item["product"]["name"] == "Widget"
        assert isinstance(item["product"]["id"], int)

    def test_numeric_prices_accepted(self, client, auth):
        body = _order_body(orderItems=[
            {"quantity": 3, "priceAtPurchase": 1.1, "product": {"name": "Widget", "price": 2}},
        ])
        response = client.post("/api/orders", json=body, headers=auth)
        assert response.status_code == 201
        assert response.json()["totalAmount"] == "3.30"

    def test_products_reused_by_name(self, client, auth):
        first = client.post("/api/orders", json=_order_body(), headers=auth).json()
        second = client.post("/api/orders", json=_order_body(), headers=auth).json()
        assert first["orderItems"][0]["product"]["id"] == second["orderItems"][0]["product"]["id"]
        assert len(client.get("/api/products", headers=auth).json()) == 1

    def test_empty_order_rejected(self, client, auth):
        response = client.post("/api/orders", json=_order_body(orderItems=[]), headers=auth)
        assert response.status_code == 400
        assert "orderItems" in response.json()["violations"]
        assert client.get("/api/orders", headers=auth).json() == []

    def test_violations_reported_per_field(self, client, auth):
        response = client.post("/api/orders", json=_order_body(
            customerName="",
            status="Lost",
            orderItems=[{"quantity": 0, "product": {"name": "Widget", "price": "1.00"}}],
        ), headers=auth)
        assert response.status_code == 400
        assert set(response.json()["violations"]) == {
            "customerName",
            "status",
            "orderItems[0].quantity",
        }

    def test_blank_order_number_rejected(self, client, auth):
        response = client.post("/api/orders", json=_order_body(orderNumber=""), headers=auth)
        assert response.status_code == 400
        assert "orderNumber" in response.json()["violations"]
        assert client.get("/api/orders", headers=auth).json() == []

    def test_quantity_beyond_storage_rejected(self, client, auth):
        response = client.post("/api/orders", json=_order_body(orderItems=[
            {"quantity": 2**31, "product": {"name": "Widget", "price": "1.00"}},
        ]), headers=auth)
        assert response.status_code == 400
        assert "orderItems[0].quantity" in response.json()["violations"]

    def test_malformed_json(self, client, auth):
        response = client.post(
            "/api/orders",
            content="{not json",
            headers={**auth, "Content-Type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid request body"

    def test_wrong_json_type(self, client, auth):
        body = _order_body(orderItems=[{"quantity": "many", "product": {"name": "W1", "price": "1"}}])
        response = client.post("/api/orders", json=body, headers=auth)
        assert response.status_code == 400
        assert "orderItems.0.quantity" in response.json()["violations"]

    def test_duplicate_order_number(self, client, auth):
        client.post("/api/orders", json=_order_body(orderNumber="ORD-1"), headers=auth)
        response = client.post("/api/orders", json=_order_body(orderNumber="ORD-1"), headers=auth)
        assert response.status_code == 409

    def test_show_and_not_found(self, client, auth):
        created = client.post("/api/orders", json=_order_body(), headers=auth).json()
        assert client.get(f"/api/orders/{created['id']}", headers=auth).json() == created
        missing = client.get("/api/orders/999", headers=auth)
        assert missing.status_code == 404
        assert missing.json() == {"message": "Order #999 not found"}

    def test_partial_update(self, client, auth):
        created = client.post("/api/orders", json=_order_body(), headers=auth).json()
        response = client.put(
            f"/api/orders/{created['id']}",
            json={"status": "Shipped", "orderItems": [
                {"quantity": 1, "product": {"name": "Gadget", "price": "5.00"}},
            ]},
            headers=auth,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "Shipped"
        assert body["customerName"] == "Alice"
        assert body["totalAmount"] == "5.00"
        assert [i["product"]["name"] for i in body["orderItems"]] == ["Gadget"]

    def test_invalid_update_changes_nothing(self, client, auth):
        created = client.post("/api/orders", json=_order_body(), headers=auth).json()
        response = client.put(
            f"/api/orders/{created['id']}",
            json={"customerName": "Bob", "orderItems": []},
            headers=auth,
        )
        assert response.status_code == 400
        assert client.get(f"/api/orders/{created['id']}", headers=auth).json() == created

    def test_update_unknown(self, client, auth):
        response = client.put("/api/orders/999", json={"status": "Shipped"}, headers=auth)
        assert response.status_code == 404

    def test_delete(self, client, auth):
        created = client.post("/api/orders", json=_order_body(), headers=auth).json()
        response = client.delete(f"/api/orders/{created['id']}", headers=auth)
        assert response.status_code == 204
        assert client.get(f"/api/orders/{created['id']}", headers=auth).status_code == 404
        assert client.delete(f"/api/orders/{created['id']}", headers=auth).status_code == 404
        # products outlive the order
        assert len(client.get("/api/products", headers=auth).json()) == 1

    def test_list_filters(self, client, auth):
        for number, customer, when in [
            ("ORD-A1", "Alice Smith", "2024-05-01T08:00:00"),
            ("ORD-B2", "Bob Jones", "2024-05-01T20:00:00"),
            ("ORD-C3", "Carol Smith", "2024-05-02T09:00:00"),
        ]:
            client.post("/api/orders", json=_order_body(
                orderNumber=number, customerName=customer, orderDate=when,
            ), headers=auth)

        def numbers(**params):
            response = client.get("/api/orders", params=params, headers=auth)
            assert response.status_code == 200
            return [o["orderNumber"] for o in response.json()]

        assert numbers() == ["ORD-C3", "ORD-B2", "ORD-A1"]
        assert numbers(orderDate="2024-05-01") == ["ORD-B2", "ORD-A1"]
        assert numbers(q="smith") == ["ORD-C3", "ORD-A1"]
        assert numbers(orderDate="2024-05-01", q="smith") == ["ORD-A1"]
        assert numbers(orderDate="garbage") == ["ORD-C3", "ORD-B2", "ORD-A1"]


class TestProducts:

    def test_catalog_crud(self, client, auth):
        created = client.post(
            "/api/products",
            json={"name": "Widget", "price": "9.5", "description": "blue"},
            headers=auth,
        )
        assert created.status_code == 201
        product = created.json()
        assert product["price"] == "9.50"

        updated = client.put(f"/api/products/{product['id']}", json={"price": 12}, headers=auth)
        assert updated.json()["price"] == "12.00"
        assert updated.json()["description"] == "blue"

        assert client.get(f"/api/products/{product['id']}", headers=auth).json() == updated.json()
        assert client.get("/api/products/999", headers=auth).status_code == 404

    def test_duplicate_name(self, client, auth):
        client.post("/api/products", json={"name": "Widget", "price": "1"}, headers=auth)
        response = client.post("/api/products", json={"name": "Widget", "price": "2"}, headers=auth)
        assert response.status_code == 409

    def test_price_change_does_not_touch_orders(self, client, auth):
        order = client.post("/api/orders", json=_order_body(), headers=auth).json()
        product_id = order["orderItems"][0]["product"]["id"]
        client.put(f"/api/products/{product_id}", json={"price": "99.00"}, headers=auth)
        reloaded = client.get(f"/api/orders/{order['id']}", headers=auth).json()
        assert reloaded["orderItems"][0]["priceAtPurchase"] == "15.00"
        assert reloaded["totalAmount"] == "30.00"
        assert reloaded["orderItems"][0]["product"]["price"] == "99.00"


class TestTwoFactor:

    def _enable(self, client, auth) -> str:
        secret = client.post("/api/2fa/setup", headers=auth).json()["secret"]
        response = client.post(
            "/api/2fa/enable",
            json={"secret": secret, "code": pyotp.TOTP(secret).now()},
            headers=auth,
        )
        assert response.status_code == 200
        return secret

    def test_setup_returns_provisioning_uri(self, client, auth):
        body = client.post("/api/2fa/setup", headers=auth).json()
        assert body["qrCode"].startswith("otpauth://totp/")
        assert body["secret"] in body["qrCode"]
        assert "issuer=OrderDesk" in body["qrCode"]

    def test_enable_with_wrong_code(self, client, auth):
        secret = client.post("/api/2fa/setup", headers=auth).json()["secret"]
        response = client.post(
            "/api/2fa/enable", json={"secret": secret, "code": "abcdef"}, headers=auth
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Invalid code"

    def test_full_login_flow(self, client, auth):
        secret = self._enable(client, auth)

        first = client.post("/api/login", json={"email": EMAIL, "password": PASSWORD}).json()
        assert first["2fa_required"] is True
        temp_token = first["temp_token"]

        # the pending token opens nothing
        pending = {"Authorization": f"Bearer {temp_token}"}
        assert client.get("/api/orders", headers=pending).status_code == 401

        wrong = client.post("/api/2fa/login", json={"temp_token": temp_token, "code": "abcdef"})
        assert wrong.status_code == 401
        assert wrong.json() == {"message": "Invalid 2FA code"}

        response = client.post(
            "/api/2fa/login",
            json={"temp_token": temp_token, "code": pyotp.TOTP(secret).now()},
        )
        assert response.status_code == 200
        session = {"Authorization": f"Bearer {response.json()['token']}"}
        assert client.get("/api/orders", headers=session).status_code == 200

    def test_numeric_code_accepted(self, client, auth):
        secret = client.post("/api/2fa/setup", headers=auth).json()["secret"]
        response = client.post(
            "/api/2fa/enable",
            json={"secret": secret, "code": int(pyotp.TOTP(secret).now())},
            headers=auth,
        )
        assert response.status_code == 200

    def test_session_token_rejected_as_pending_token(self, client, auth):
        token = auth["Authorization"].split()[1]
        response = client.post("/api/2fa/login", json={"temp_token": token, "code": "123456"})
        assert response.status_code == 401

    def test_missing_code(self, client):
        response = client.post("/api/2fa/login", json={"temp_token": "x"})
        assert response.status_code == 400

    def test_disable(self, client, auth):
        self._enable(client, auth)
        assert client.post("/api/2fa/disable", headers=auth).status_code == 200
        response = client.post("/api/login", json={"email": EMAIL, "password": PASSWORD})
        assert set(response.json()) == {"token"}


class TestCodeNormalisation:

    def test_number_is_zero_padded(self):
        assert optional_code(12345) == "012345"
        assert optional_code(0) == "000000"

    def test_string_kept_as_sent(self):
        assert optional_code("012345") == "012345"

    def test_missing_code(self):
        assert optional_code(None) is None


class TestInternalErrors:

    @pytest.fixture
    def lenient_client(self, container):
        with TestClient(create_app(container), raise_server_exceptions=False) as test_client:
            yield test_client

    def test_unexpected_error_is_redacted(self, lenient_client, monkeypatch):
        auth = _login(lenient_client)

        def boom(self):
            raise RuntimeError("connection string with password")

        monkeypatch.setattr(ListProductsHandler, "handle", boom)
        response = lenient_client.get("/api/products", headers=auth)
        assert response.status_code == 500
        assert response.json() == {"message": "Internal server error"}

    def test_failed_order_write_leaves_no_new_product(self, lenient_client, monkeypatch):
        auth = _login(lenient_client)

        def broken_write(self, order):
            raise RuntimeError("disk full")

        monkeypatch.setattr(SqlOrderRepository, "_write", broken_write)
        body = _order_body(orderItems=[{"quantity": 1, "product": {"name": "Gizmo", "price": "1"}}])
        response = lenient_client.post("/api/orders", json=body, headers=auth)

        assert response.status_code == 500
        assert lenient_client.get("/api/products", headers=auth).json() == []
