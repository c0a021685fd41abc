"""Tests for the auth and cart HTTP endpoints."""

import pytest
from sqlmodel import Session

from conftest import product
from storefront.services.auth import AuthService

CART = "/api/v1/cart"


@pytest.fixture
def auth_headers(client):
    """Register a shopper and log in through the token endpoint."""
    resp = client.post("/api/v1/auth/register", json={
        "email": "wanjiru@example.com",
        "password": "SecurePassword123!",
        "name": "Wanjiru",
    })
    assert resp.status_code == 200

    resp = client.post("/api/v1/auth/token", data={
        "username": "wanjiru@example.com",
        "password": "SecurePassword123!",
    })
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}


class TestAuthEndpoints:
    """Tests for /api/v1/auth."""

    def test_register_twice_is_rejected(self, client, auth_headers):
        resp = client.post("/api/v1/auth/register", json={"email": "wanjiru@example.com", "password": "x"})
        assert resp.status_code == 400

    def test_wrong_password(self, client, auth_headers):
        resp = client.post("/api/v1/auth/token", data={"username": "wanjiru@example.com", "password": "nope"})
        assert resp.status_code == 401
        assert resp.json()["detail"] == "Incorrect password. Please try again."

    def test_me(self, client, auth_headers):
        resp = client.get("/api/v1/auth/me", headers=auth_headers)
        assert resp.status_code == 200
        assert resp.json()["email"] == "wanjiru@example.com"

    def test_me_requires_token(self, client):
        assert client.get("/api/v1/auth/me").status_code == 401

    def test_token_for_deactivated_user_is_ignored(self, engine):
        with Session(engine) as session:
            service = AuthService(session)
            user = service.register_user("gone@example.com", "pw")
            token = service.create_access_token({"sub": user.email})
            user.is_active = False
            session.add(user)
            session.commit()

            assert service.get_user_from_token(token) is None
            assert service.get_user_from_token("not-a-jwt") is None


class TestCartEndpoints:
    """Tests for /api/v1/cart."""

    def test_empty_cart(self, client):
        resp = client.get(f"{CART}/")

        assert resp.status_code == 200
        assert resp.json() == {"items": [], "total": 0, "itemCount": 0, "notifications": []}

    def test_add_requires_login(self, client):
        resp = client.post(f"{CART}/add", json={"product": product("p1"), "quantity": 2})

        body = resp.json()
        assert resp.status_code == 200
        assert body["items"] == []
        assert body["notifications"] == [{"level": "error", "message": "Please login to add items to the cart"}]

    def test_add_merges_and_persists(self, client, auth_headers):
        payload = {"product": product("p1", price=1000), "quantity": 2, "size": "M", "color": "Red"}
        client.post(f"{CART}/add", json=payload, headers=auth_headers)
        resp = client.post(f"{CART}/add", json={**payload, "quantity": 3}, headers=auth_headers)

        body = resp.json()
        assert [(item["id"], item["quantity"]) for item in body["items"]] == [("p1-M-Red-", 5)]
        assert body["items"][0]["product"]["_id"] == "p1"
        assert body["total"] == 5000
        assert body["itemCount"] == 5
        assert body["notifications"] == [{"level": "success", "message": "Silk Kaftan added to cart!"}]

        # A fresh request (new store) loads the same cart from storage
        again = client.get(f"{CART}/").json()
        assert again["items"] == body["items"]
        assert again["notifications"] == []

    def test_add_rejects_non_positive_quantity(self, client, auth_headers):
        resp = client.post(f"{CART}/add", json={"product": product("p1"), "quantity": 0}, headers=auth_headers)
        assert resp.status_code == 422

    def test_add_rejects_product_without_identifier(self, client, auth_headers):
        resp = client.post(f"{CART}/add", json={"product": {"name": "Mystery", "price": 10}}, headers=auth_headers)
        assert resp.status_code == 422

    def test_update_remove_and_clear(self, client, auth_headers):
        client.post(f"{CART}/add", json={"product": product("p1"), "quantity": 2, "size": "M"}, headers=auth_headers)
        client.post(f"{CART}/add", json={"product": product("p2", price=400), "quantity": 1}, headers=auth_headers)

        body = client.put(f"{CART}/update/p1-M--", json={"quantity": 4}).json()
        assert body["total"] == 4400

        body = client.put(f"{CART}/update/p1-M--", json={"quantity": 0}).json()
        assert [item["id"] for item in body["items"]] == ["p2---"]
        assert body["notifications"] == [{"level": "success", "message": "Item removed from cart"}]

        body = client.delete(f"{CART}/remove/missing---").json()
        assert body["itemCount"] == 1

        body = client.delete(f"{CART}/clear").json()
        assert body == {
            "items": [],
            "total": 0,
            "itemCount": 0,
            "notifications": [{"level": "success", "message": "Cart cleared"}],
        }

    def test_storage_origins_do_not_share_carts(self, client, auth_headers):
        client.post(
            f"{CART}/add",
            json={"product": product("p1")},
            headers={**auth_headers, "X-Storage-Origin": "phone"},
        )

        assert client.get(f"{CART}/", headers={"X-Storage-Origin": "phone"}).json()["itemCount"] == 1
        assert client.get(f"{CART}/", headers={"X-Storage-Origin": "laptop"}).json()["itemCount"] == 0

    def test_item_quantity_query(self, client, auth_headers):
        client.post(
            f"{CART}/add",
            json={"product": product("p1"), "quantity": 3, "size": "L", "fabric": "Silk"},
            headers=auth_headers,
        )

        resp = client.get(f"{CART}/quantity/p1", params={"size": "L", "fabric": "Silk"})
        assert resp.json() == {"product_id": "p1", "quantity": 3, "in_cart": True}

        resp = client.get(f"{CART}/quantity/p1", params={"size": "M"})
        assert resp.json() == {"product_id": "p1", "quantity": 0, "in_cart": False}

    def test_summary_and_checkout(self, client, auth_headers):
        client.post(f"{CART}/add", json={"product": product("p1", price=2500), "quantity": 2}, headers=auth_headers)

        summary = client.get(f"{CART}/summary").json()
        assert summary["shipping"] == 500
        assert summary["final_total"] == pytest.approx(5900)

        checkout = client.get(f"{CART}/checkout", params={"shipping_option": "express"}).json()
        assert checkout["total"] == 6000
        assert checkout["items"][0]["nameSnapshot"] == "Silk Kaftan"
        assert checkout["items"][0]["qty"] == 2
