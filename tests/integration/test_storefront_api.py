"""Integration tests for the account, product and inventory endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from storefront.api.accounts import router as account_router
from storefront.api.errors import register_storefront_exception_handlers
from storefront.api.inventory import router as inventory_router
from storefront.api.products import router as product_router
from storefront.identity.account import Account


@pytest.fixture()
def client():
    app = FastAPI()
    register_storefront_exception_handlers(app)
    app.include_router(account_router)
    app.include_router(product_router)
    app.include_router(inventory_router)
    return TestClient(app)


def _as(account):
    return {"X-User-Id": str(account.id)}


class TestAccountEndpoints:
    def test_register(self, client):
        response = client.post(
            "/accounts",
            json={"full_name": "Meera Iyer", "email": "meera@example.com", "address": {"city": "Chennai"}},
        )
        assert response.status_code == 201
        account = current_domain.repository_for(Account).get(response.json()["account_id"])
        assert account.address.city == "Chennai"

    def test_register_duplicate_email(self, client, customer):
        response = client.post("/accounts", json={"full_name": "Asha Again", "email": customer.email})
        assert response.status_code == 400

    def test_me(self, client, customer):
        response = client.get("/accounts/me", headers=_as(customer))
        assert response.status_code == 200
        assert response.json()["email"] == "asha@example.com"
        assert response.json()["role"] == "customer"

    def test_me_requires_caller(self, client):
        assert client.get("/accounts/me").status_code == 401

    def test_update_me(self, client, customer):
        response = client.put("/accounts/me", json={"phone": "+91-90000-11111"}, headers=_as(customer))
        assert response.status_code == 200
        assert response.json()["phone"] == "+91-90000-11111"
        assert response.json()["full_name"] == "Asha Rao"

    def test_grant_admin(self, client, admin, customer):
        assert client.put(f"/accounts/{customer.id}/admin", headers=_as(customer)).status_code == 403
        assert client.put(f"/accounts/{customer.id}/admin", headers=_as(admin)).status_code == 200
        assert current_domain.repository_for(Account).get(customer.id).is_admin


class TestAccountAdministrationEndpoints:
    def test_list_accounts_admin_only(self, client, admin, customer):
        assert client.get("/accounts", headers=_as(customer)).status_code == 403

        response = client.get("/accounts", headers=_as(admin))
        assert response.status_code == 200
        assert {a["email"] for a in response.json()} == {admin.email, customer.email}

    def test_get_account_by_id(self, client, admin, customer):
        assert client.get(f"/accounts/{admin.id}", headers=_as(customer)).status_code == 403

        response = client.get(f"/accounts/{customer.id}", headers=_as(admin))
        assert response.status_code == 200
        assert response.json()["full_name"] == "Asha Rao"

    def test_get_unknown_account(self, client, admin):
        assert client.get("/accounts/ghost", headers=_as(admin)).status_code == 404

    def test_me_is_not_an_account_id(self, client, customer):
        response = client.get("/accounts/me", headers=_as(customer))
        assert response.status_code == 200
        assert response.json()["account_id"] == str(customer.id)

    def test_update_account(self, client, admin, customer):
        response = client.put(
            f"/accounts/{customer.id}",
            json={"full_name": "Asha Menon", "email": "asha.menon@example.com"},
            headers=_as(admin),
        )
        assert response.status_code == 200
        assert response.json()["full_name"] == "Asha Menon"
        assert response.json()["email"] == "asha.menon@example.com"
        assert response.json()["role"] == "customer"

    def test_update_account_forbidden_for_customer(self, client, admin, customer):
        response = client.put(f"/accounts/{admin.id}", json={"role": "customer"}, headers=_as(customer))
        assert response.status_code == 403

    def test_update_account_duplicate_email(self, client, admin, customer):
        response = client.put(f"/accounts/{customer.id}", json={"email": admin.email}, headers=_as(admin))
        assert response.status_code == 400

    def test_remove_account(self, client, admin, customer):
        assert client.delete(f"/accounts/{customer.id}", headers=_as(customer)).status_code == 403

        assert client.delete(f"/accounts/{customer.id}", headers=_as(admin)).status_code == 200
        assert client.get(f"/accounts/{customer.id}", headers=_as(admin)).status_code == 404
        assert client.get("/accounts/me", headers=_as(customer)).status_code == 401


class TestProductEndpoints:
    def test_add_product(self, client, admin):
        response = client.post(
            "/products",
            json={"name": "Brass Lamp", "price": 799.0, "category": "Decor", "stock": 4},
            headers=_as(admin),
        )
        assert response.status_code == 201

        product = client.get(f"/products/{response.json()['product_id']}").json()
        assert product["name"] == "Brass Lamp"
        assert product["stock"] == 4

    def test_customer_cannot_add_product(self, client, customer):
        response = client.post("/products", json={"name": "Brass Lamp", "price": 799.0}, headers=_as(customer))
        assert response.status_code == 403

    def test_search(self, client, add_product):
        add_product(name="Brass Lamp", category="Decor")
        add_product(name="Copper Bottle", category="Kitchen")

        names = [p["name"] for p in client.get("/products", params={"keyword": "brass"}).json()]
        assert names == ["Brass Lamp"]

        names = [p["name"] for p in client.get("/products", params={"category": "kitchen"}).json()]
        assert names == ["Copper Bottle"]

    def test_unknown_product(self, client):
        assert client.get("/products/ghost").status_code == 404

    def test_update_product(self, client, admin, add_product):
        product_id = add_product(price=100.0)
        response = client.put(f"/products/{product_id}", json={"price": 120.0}, headers=_as(admin))
        assert response.status_code == 200
        assert client.get(f"/products/{product_id}").json()["price"] == 120.0

    def test_remove_product(self, client, admin, customer, add_product):
        product_id = add_product(stock=3)

        assert client.delete(f"/products/{product_id}", headers=_as(customer)).status_code == 403
        assert client.delete(f"/products/{product_id}", headers=_as(admin)).status_code == 200

        assert client.get(f"/products/{product_id}").status_code == 404
        assert client.get(f"/inventory/{product_id}").status_code == 404
        assert client.get("/products").json() == []

    def test_remove_unknown_product(self, client, admin):
        assert client.delete("/products/ghost", headers=_as(admin)).status_code == 404

    def test_review(self, client, customer, add_product):
        product_id = add_product()
        response = client.post(f"/products/{product_id}/reviews", json={"rating": 4}, headers=_as(customer))
        assert response.status_code == 201
        assert response.json()["rating"] == 4.0

        product = client.get(f"/products/{product_id}").json()
        assert product["reviews"][0]["reviewer_name"] == "Asha Rao"


class TestInventoryEndpoints:
    def test_check_availability(self, client, add_product):
        product_id = add_product(stock=3)

        response = client.get(f"/inventory/{product_id}", params={"quantity": 3})
        assert response.status_code == 200
        assert response.json() == {"product_id": product_id, "available": True, "current_stock": 3}

        response = client.get(f"/inventory/{product_id}", params={"quantity": 4})
        assert response.json()["available"] is False

    def test_check_unknown_product(self, client):
        assert client.get("/inventory/ghost").status_code == 404

    def test_adjust(self, client, admin, add_product):
        product_id = add_product(stock=3)
        response = client.post(f"/inventory/{product_id}/adjustments", json={"delta": -3}, headers=_as(admin))
        assert response.status_code == 200
        assert response.json()["current_stock"] == 0

    def test_adjust_below_zero(self, client, admin, add_product, stock_of):
        product_id = add_product(stock=3)
        response = client.post(f"/inventory/{product_id}/adjustments", json={"delta": -4}, headers=_as(admin))
        assert response.status_code == 400
        assert stock_of(product_id) == 3
