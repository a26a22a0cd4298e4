"""Envelope, error mapping and auth guards across the assembled application."""

import pytest
from fastapi.testclient import TestClient
from protean.exceptions import ExpectedVersionError
from support.api import auth_header, make_client
from support.factories import make_account

from storefront.api import create_app
from storefront.domain import storefront
from storefront.identity.account import AccountRole
from storefront.identity.tokens import issue_token


@pytest.fixture()
def client():
    return make_client()


class TestEnvelope:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "errorCode": 0,
            "statusFlag": 1,
            "message": "ok",
            "data": {"status": "ok", "domain": "storefront"},
        }

    def test_unknown_route_is_enveloped(self, client):
        response = client.get("/api/nowhere")

        assert response.status_code == 404
        body = response.json()
        assert body["errorCode"] == 302
        assert body["statusFlag"] == 0

    def test_request_validation_is_422(self, client):
        customer = make_account(AccountRole.CUSTOMER)
        response = client.post("/api/customer/cart", json={"quantity": 1}, headers=auth_header(customer))

        assert response.status_code == 422
        body = response.json()
        assert body["errorCode"] == 655
        assert "productId" in body["data"]["errors"]

    def test_unhandled_errors_hide_details(self):
        app = create_app(storefront)

        @app.get("/boom")
        async def boom():
            raise RuntimeError("database password is hunter2")

        response = TestClient(app, raise_server_exceptions=False).get("/boom")

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Internal server error"
        assert "hunter2" not in response.text

    def test_version_conflict_is_409(self):
        app = create_app(storefront)

        @app.post("/stale")
        async def stale():
            raise ExpectedVersionError("Wrong expected version: 0 (Aggregate: Product(p-1), Version: 1)")

        response = TestClient(app, raise_server_exceptions=False).post("/stale")

        assert response.status_code == 409
        body = response.json()
        assert body["statusFlag"] == 0
        assert body["errorCode"] == 655
        assert body["message"] == "The resource was changed by another request, please retry"
        assert "Aggregate" not in response.text


class TestAuthGuards:
    def test_missing_token(self, client):
        response = client.get("/api/customer/profile")

        assert response.status_code == 401
        assert response.json()["errorCode"] == 302

    def test_garbage_token(self, client):
        response = client.get("/api/customer/profile", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid token"

    def test_token_for_deleted_account(self, client):
        token = issue_token("ghost", "Customer")
        response = client.get("/api/customer/profile", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_wrong_role_is_forbidden(self, client):
        seller = make_account(AccountRole.SELLER)
        response = client.get("/api/customer/cart", headers=auth_header(seller))

        assert response.status_code == 403
        assert response.json()["statusFlag"] == 0

    def test_admin_routes_reject_customers(self, client):
        customer = make_account(AccountRole.CUSTOMER)
        response = client.get("/api/admin/sellers", headers=auth_header(customer))
        assert response.status_code == 403

    def test_valid_token(self, client):
        customer = make_account(AccountRole.CUSTOMER, name="Asha")
        response = client.get("/api/customer/profile", headers=auth_header(customer))

        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Asha"
