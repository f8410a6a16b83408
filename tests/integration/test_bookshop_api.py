"""Integration tests for the bookshop API endpoints via TestClient."""

from datetime import UTC, datetime, timedelta

import pytest
from bookshop.catalogue.item import Item
from bookshop.order.order import Order
from bookshop.payment.payment import Payment
from protean import current_domain


def _create_cart(client, customer_id, item_id, quantity=1):
    """Helper: POST /carts and return the cart_id."""
    response = client.post(
        "/carts",
        json={"customer_id": customer_id, "item_id": item_id, "quantity": quantity},
    )
    assert response.status_code == 201
    return response.json()["cart_id"]


def _pending(client, customer_id, item_id, quantity=1):
    cart_id = _create_cart(client, customer_id, item_id, quantity)
    assert client.post(f"/orders/{cart_id}/checkout").status_code == 200
    return cart_id


def _confirmed(client, customer_id, item_id, quantity=1):
    order_id = _pending(client, customer_id, item_id, quantity)
    response = client.post(f"/orders/{order_id}/confirm", json={"payment_type": "Card"})
    assert response.status_code == 200
    return order_id


class TestCartEndpoints:
    def test_create_and_view_cart(self, client, make_customer, make_item):
        customer_id = make_customer()
        item_id = make_item(name="Dune", price=12.5)
        cart_id = _create_cart(client, customer_id, item_id, 2)

        response = client.get(f"/carts/customer/{customer_id}")

        assert response.status_code == 200
        body = response.json()
        assert body["cart_id"] == cart_id
        assert body["total_price"] == pytest.approx(25.0)
        assert body["items"][0]["item"]["name"] == "Dune"
        assert body["items"][0]["quantity"] == 2

    def test_second_cart_is_rejected(self, client, make_customer, make_item):
        customer_id = make_customer()
        item_id = make_item()
        _create_cart(client, customer_id, item_id)

        response = client.post(
            "/carts",
            json={"customer_id": customer_id, "item_id": item_id, "quantity": 1},
        )
        assert response.status_code == 400

    def test_create_cart_for_unknown_customer(self, client, make_item):
        response = client.post(
            "/carts",
            json={"customer_id": "cust-missing", "item_id": make_item(), "quantity": 1},
        )
        assert response.status_code == 404

    def test_non_positive_quantity_is_rejected_at_the_boundary(self, client, make_customer, make_item):
        response = client.post(
            "/carts",
            json={"customer_id": make_customer(), "item_id": make_item(), "quantity": 0},
        )
        assert response.status_code == 422

    def test_add_update_and_remove_items(self, client, make_customer, make_item):
        customer_id = make_customer()
        first = make_item(name="Emma")
        second = make_item(name="Persuasion")
        cart_id = _create_cart(client, customer_id, first)

        assert client.post(f"/carts/{cart_id}/items", json={"item_id": second, "quantity": 2}).status_code == 200
        assert client.put(f"/carts/{cart_id}/items/{second}", json={"quantity": 4}).status_code == 200
        assert client.delete(f"/carts/{cart_id}/items/{first}").status_code == 200

        cart = current_domain.repository_for(Order).get(cart_id)
        assert [(str(line.item_id), line.quantity) for line in cart.items] == [(second, 4)]

    def test_adding_beyond_stock_is_rejected(self, client, make_customer, make_item):
        item_id = make_item(stock=3)
        cart_id = _create_cart(client, make_customer(), item_id, 2)

        response = client.post(f"/carts/{cart_id}/items", json={"item_id": item_id, "quantity": 2})

        assert response.status_code == 400

    def test_removing_an_item_not_in_the_cart(self, client, make_customer, make_item):
        cart_id = _create_cart(client, make_customer(), make_item())

        response = client.delete(f"/carts/{cart_id}/items/{make_item(name='Other')}")

        assert response.status_code == 404

    def test_missing_cart(self, client, make_customer):
        assert client.get(f"/carts/customer/{make_customer()}").status_code == 404


class TestOrderEndpoints:
    def test_checkout_and_confirm(self, client, make_customer, make_item):
        item_id = make_item(price=10.0, stock=5)
        order_id = _confirmed(client, make_customer(), item_id, 3)

        detail = client.get(f"/orders/{order_id}").json()
        assert detail["status"] == "Confirmed"
        assert detail["confirmed_at"] is not None

        assert current_domain.repository_for(Item).get(item_id).amount_in_stock == 2
        (payment,) = current_domain.repository_for(Payment).for_order(order_id)
        assert payment.amount == pytest.approx(30.0)
        assert payment.payment_type == "Card"

    def test_confirming_twice(self, client, make_customer, make_item):
        order_id = _confirmed(client, make_customer(), make_item())

        response = client.post(f"/orders/{order_id}/confirm", json={"payment_type": "Blik"})

        assert response.status_code == 400

    def test_unknown_payment_type(self, client, make_customer, make_item):
        order_id = _pending(client, make_customer(), make_item())

        response = client.post(f"/orders/{order_id}/confirm", json={"payment_type": "Cheque"})

        assert response.status_code == 422

    def test_fulfillment_and_illegal_jump(self, client, make_customer, make_item):
        order_id = _confirmed(client, make_customer(), make_item())

        assert client.put(f"/orders/{order_id}/status", json={"status": "Shipped"}).status_code == 400
        assert client.put(f"/orders/{order_id}/status", json={"status": "Preparation"}).status_code == 200
        assert client.get(f"/orders/{order_id}").json()["status"] == "Preparation"

    def test_cancel(self, client, make_customer, make_item):
        order_id = _confirmed(client, make_customer(), make_item())

        assert client.post(f"/orders/{order_id}/cancel").status_code == 200
        assert client.post(f"/orders/{order_id}/cancel").status_code == 400

    def test_list_by_status(self, client, make_customer, make_item):
        item_id = make_item(stock=20)
        pending = _pending(client, make_customer(username="ann"), item_id)
        _confirmed(client, make_customer(username="ben"), item_id)

        response = client.get("/orders", params={"status": "Pending"})

        assert response.status_code == 200
        assert [order["order_id"] for order in response.json()] == [pending]
        assert len(client.get("/orders").json()) == 2

    def test_items_of_order(self, client, make_customer, make_item):
        item_id = make_item(name="Ulysses")
        order_id = _pending(client, make_customer(), item_id)

        response = client.get(f"/orders/{order_id}/items")

        assert response.status_code == 200
        assert [item["name"] for item in response.json()] == ["Ulysses"]

    def test_unknown_order(self, client):
        assert client.get("/orders/order-missing").status_code == 404
        assert client.post("/orders/order-missing/checkout").status_code == 404


class TestCustomerEndpoints:
    def test_history_lists_placed_orders(self, client, make_customer, make_item):
        customer_id = make_customer()
        item_id = make_item(stock=20)
        confirmed = _confirmed(client, customer_id, item_id)
        _pending(client, customer_id, item_id)

        response = client.get(f"/customers/{customer_id}/orders")

        assert response.status_code == 200
        assert [order["order_id"] for order in response.json()] == [confirmed]

    def test_reassign(self, client, make_customer, make_item):
        customer_id = make_customer()
        item_id = make_item(stock=20)
        _confirmed(client, customer_id, item_id)
        _create_cart(client, customer_id, item_id)

        response = client.post(f"/customers/{customer_id}/orders/reassign")

        assert response.status_code == 200
        assert response.json() == {"moved": 1}
        assert client.get(f"/customers/{customer_id}/orders").json() == []


class TestMaintenanceEndpoints:
    def test_remove_expired_carts(self, client, make_customer, make_item):
        cart_id = _create_cart(client, make_customer(), make_item())
        cart = current_domain.repository_for(Order).get(cart_id)
        cart.created_at = datetime.now(UTC) - timedelta(days=40)
        current_domain.repository_for(Order).add(cart)

        response = client.post("/maintenance/expired-carts")

        assert response.status_code == 200
        assert response.json() == {"removed": 1}

    def test_retention_override(self, client, make_customer, make_item):
        _create_cart(client, make_customer(), make_item())

        response = client.post("/maintenance/expired-carts", json={"retention_days": 0})

        assert response.status_code == 200
        assert response.json() == {"removed": 1}
