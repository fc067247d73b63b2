"""Integration tests for Order API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from storefront.api.errors import register_storefront_exception_handlers
from storefront.api.orders import router as order_router
from storefront.ordering.order import Order
from storefront.utils.lookup import fetch


@pytest.fixture()
def client():
    app = FastAPI()
    register_storefront_exception_handlers(app)
    app.include_router(order_router)
    return TestClient(app)


def _as(account):
    return {"X-User-Id": str(account.id)}


@pytest.fixture()
def product_id(add_product):
    return add_product(name="Steel Tiffin", price=100.0, stock=5)


@pytest.fixture()
def order_id(client, customer, product_id):
    response = client.post(
        "/orders",
        json={"items": [{"product_id": product_id, "quantity": 2, "price": 100.0}], "total_amount": 200.0},
        headers=_as(customer),
    )
    assert response.status_code == 201
    return response.json()["order_id"]


class TestPlaceOrderEndpoint:
    def test_place_order(self, client, customer, product_id, stock_of):
        response = client.post(
            "/orders",
            json={
                "items": [{"product_id": product_id, "quantity": 2, "price": 100.0}],
                "total_amount": 200.0,
                "payment_method": "upi",
                "delivery_address": {"street": "12 MG Road", "city": "Bengaluru", "postal_code": "560001"},
            },
            headers=_as(customer),
        )

        assert response.status_code == 201
        order = current_domain.repository_for(Order).get(response.json()["order_id"])
        assert order.status == "placed"
        assert order.payment_method == "upi"
        assert stock_of(product_id) == 3

    def test_missing_caller(self, client, product_id):
        response = client.post(
            "/orders",
            json={"items": [{"product_id": product_id, "quantity": 1}], "total_amount": 100.0},
        )
        assert response.status_code == 401

    def test_unknown_caller(self, client, product_id):
        response = client.post(
            "/orders",
            json={"items": [{"product_id": product_id, "quantity": 1}], "total_amount": 100.0},
            headers={"X-User-Id": "nobody"},
        )
        assert response.status_code == 401

    def test_insufficient_stock(self, client, customer, product_id, stock_of):
        response = client.post(
            "/orders",
            json={"items": [{"product_id": product_id, "quantity": 6}], "total_amount": 600.0},
            headers=_as(customer),
        )
        assert response.status_code == 400
        assert "stock" in response.json()["errors"]
        assert stock_of(product_id) == 5

    def test_empty_items(self, client, customer):
        response = client.post("/orders", json={"items": [], "total_amount": 0.0}, headers=_as(customer))
        assert response.status_code == 400

    def test_unknown_product(self, client, customer):
        response = client.post(
            "/orders",
            json={"items": [{"product_id": "ghost", "quantity": 1}], "total_amount": 10.0},
            headers=_as(customer),
        )
        assert response.status_code == 404


class TestOrderQueries:
    def test_my_orders(self, client, customer, order_id):
        response = client.get("/orders/mine", headers=_as(customer))
        assert response.status_code == 200
        orders = response.json()
        assert [o["order_id"] for o in orders] == [order_id]
        assert orders[0]["items"][0]["name"] == "Steel Tiffin"
        assert orders[0]["items"][0]["unit_price"] == 100.0

    def test_all_orders_admin_only(self, client, admin, customer, order_id):
        assert client.get("/orders", headers=_as(customer)).status_code == 403

        response = client.get("/orders", headers=_as(admin))
        assert response.status_code == 200
        assert len(response.json()) == 1

    def test_get_order_owner(self, client, customer, order_id):
        response = client.get(f"/orders/{order_id}", headers=_as(customer))
        assert response.status_code == 200
        assert response.json()["total_amount"] == 200.0

    def test_get_order_stranger(self, client, register_account, order_id):
        stranger = register_account("Ravi Kumar", email="ravi@example.com")
        assert client.get(f"/orders/{order_id}", headers=_as(stranger)).status_code == 403

    def test_get_unknown_order(self, client, customer):
        assert client.get("/orders/ghost", headers=_as(customer)).status_code == 404


class TestOrderLifecycleEndpoints:
    def test_pay(self, client, customer, order_id):
        response = client.put(f"/orders/{order_id}/pay", headers=_as(customer))
        assert response.status_code == 200
        assert response.json()["payment_status"] == "paid"

    def test_pay_with_method(self, client, customer, order_id):
        response = client.put(f"/orders/{order_id}/pay", json={"payment_method": "upi"}, headers=_as(customer))
        assert response.status_code == 200
        assert current_domain.repository_for(Order).get(order_id).payment_method == "upi"

    def test_cancel(self, client, customer, product_id, order_id, stock_of):
        response = client.put(f"/orders/{order_id}/cancel", headers=_as(customer))
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert stock_of(product_id) == 5

        again = client.put(f"/orders/{order_id}/cancel", headers=_as(customer))
        assert again.status_code == 400
        assert stock_of(product_id) == 5

    def test_cancel_by_stranger(self, client, register_account, order_id):
        stranger = register_account("Ravi Kumar", email="ravi@example.com")
        assert client.put(f"/orders/{order_id}/cancel", headers=_as(stranger)).status_code == 403

    def test_status_update(self, client, admin, order_id):
        response = client.put(f"/orders/{order_id}/status", json={"status": "shipped"}, headers=_as(admin))
        assert response.status_code == 200
        assert response.json()["status"] == "shipped"

    def test_status_update_by_customer(self, client, customer, order_id):
        response = client.put(f"/orders/{order_id}/status", json={"status": "shipped"}, headers=_as(customer))
        assert response.status_code == 403

    def test_backward_status_update(self, client, admin, order_id):
        client.put(f"/orders/{order_id}/status", json={"status": "delivered"}, headers=_as(admin))
        response = client.put(f"/orders/{order_id}/status", json={"status": "placed"}, headers=_as(admin))
        assert response.status_code == 400
        assert "status" in response.json()["errors"]


class TestVersionConflict:
    def test_stale_write_maps_to_409(self, client, admin, order_id, monkeypatch):
        def stale_fetch(aggregate_cls, identifier, label=None):
            # Another writer committed between this load and the save
            order = fetch(aggregate_cls, identifier, label=label)
            order._version -= 1
            return order

        monkeypatch.setattr("storefront.ordering.cancellation.fetch", stale_fetch)

        response = client.put(f"/orders/{order_id}/status", json={"status": "shipped"}, headers=_as(admin))

        assert response.status_code == 409
        assert "expected version" in response.json()["message"]
        assert current_domain.repository_for(Order).get(order_id).status == "placed"
