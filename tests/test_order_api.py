import dataclasses

import pytest
from fastapi.testclient import TestClient

from services.order_service.main import create_app

ADDRESS = {"street": "1 Main St", "city": "Springfield", "zipCode": "12345"}


def order_body(*lines, user_id="user-1", payment_method="Credit Card"):
    return {
        "userId": user_id,
        "items": [{"pizzaId": pizza_id, "quantity": qty} for pizza_id, qty in lines],
        "deliveryAddress": ADDRESS,
        "paymentMethod": payment_method,
    }


@pytest.fixture
def client(settings, fake_menu):
    app = create_app(settings, catalog_transport=fake_menu.transport)
    with TestClient(app) as client:
        yield client


@pytest.fixture
def placed_order(client):
    resp = client.post("/api/orders", json=order_body(("margherita", 2), ("pepperoni", 1)))
    assert resp.status_code == 201
    return resp.json()["data"]


def test_create_order(client, placed_order):
    assert placed_order["totalAmount"] == 145
    assert placed_order["status"] == "Pending"
    assert placed_order["paymentStatus"] == "Pending"
    assert placed_order["paymentMethod"] == "Credit Card"
    assert placed_order["deliveryAddress"] == ADDRESS
    assert placed_order["items"] == [
        {"pizzaId": "margherita", "pizzaName": "Margherita", "quantity": 2, "price": 45.0},
        {"pizzaId": "pepperoni", "pizzaName": "Pepperoni", "quantity": 1, "price": 55.0},
    ]
    assert placed_order["id"]
    assert placed_order["createdAt"] and placed_order["updatedAt"]


def test_unknown_pizza_is_not_found_and_nothing_is_stored(client):
    resp = client.post("/api/orders", json=order_body(("margherita", 1), ("X", 1)))

    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Pizza with ID X not found"
    assert client.get("/api/orders").json()["count"] == 0


def test_unavailable_pizza_is_a_conflict(client):
    resp = client.post("/api/orders", json=order_body(("hawaiian", 1)))

    assert resp.status_code == 409
    assert resp.json()["message"] == "Hawaiian is currently unavailable"
    assert client.get("/api/orders").json()["count"] == 0


def test_menu_outage_is_service_unavailable(client, fake_menu):
    fake_menu.down = True

    resp = client.post("/api/orders", json=order_body(("margherita", 1)))

    assert resp.status_code == 503
    assert resp.json()["success"] is False
    assert "Connection refused" in resp.json()["error"]


@pytest.mark.parametrize(
    "body",
    [
        order_body(),
        order_body(("margherita", 0)),
        {**order_body(("margherita", 1)), "deliveryAddress": {"street": "1 Main St", "city": ""}},
        order_body(("margherita", 1), payment_method="Bitcoin"),
    ],
)
def test_malformed_orders_are_validation_errors(client, fake_menu, body):
    resp = client.post("/api/orders", json=body)

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["message"] == "Validation failed"
    assert fake_menu.requests == []


def test_get_and_list_orders(client, placed_order):
    client.post("/api/orders", json=order_body(("pepperoni", 1), user_id="user-2"))

    one = client.get(f"/api/orders/{placed_order['id']}")
    everything = client.get("/api/orders").json()
    mine = client.get("/api/orders/user/user-1").json()

    assert one.json()["data"]["id"] == placed_order["id"]
    assert everything["count"] == 2
    assert everything["data"][0]["userId"] == "user-2"
    assert mine["count"] == 1
    assert mine["data"][0]["id"] == placed_order["id"]


def test_collection_path_with_trailing_slash_is_served_directly(client):
    created = client.post("/api/orders/", json=order_body(("margherita", 1)), follow_redirects=False)
    listing = client.get("/api/orders/", follow_redirects=False)

    assert created.status_code == 201
    assert created.json()["data"]["totalAmount"] == 45
    assert listing.status_code == 200
    assert listing.json()["count"] == 1


def test_missing_order_is_404(client):
    resp = client.get("/api/orders/does-not-exist")

    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Order not found"}


@pytest.mark.parametrize("method", ["put", "patch"])
def test_status_update_is_unconditional(client, placed_order, method):
    url = f"/api/orders/{placed_order['id']}/status"

    delivered = getattr(client, method)(url, json={"status": "Delivered"})
    back = getattr(client, method)(url, json={"status": "Out for Delivery"})

    assert delivered.json()["data"]["status"] == "Delivered"
    assert back.status_code == 200
    assert back.json()["data"]["status"] == "Out for Delivery"


def test_unknown_status_is_rejected(client, placed_order):
    resp = client.put(f"/api/orders/{placed_order['id']}/status", json={"status": "Lost"})

    assert resp.status_code == 400


def test_cancel_pending_order(client, placed_order):
    resp = client.post(f"/api/orders/{placed_order['id']}/cancel")

    assert resp.status_code == 200
    assert resp.json()["message"] == "Order cancelled successfully"
    assert resp.json()["data"]["status"] == "Cancelled"


def test_cancel_delivered_order_is_refused(client, placed_order):
    order_id = placed_order["id"]
    client.put(f"/api/orders/{order_id}/status", json={"status": "Delivered"})

    resp = client.post(f"/api/orders/{order_id}/cancel")

    assert resp.status_code == 409
    assert "Cannot cancel order" in resp.json()["message"]
    assert client.get(f"/api/orders/{order_id}").json()["data"]["status"] == "Delivered"


def test_delete_removes_order(client, placed_order):
    resp = client.delete(f"/api/orders/{placed_order['id']}")

    assert resp.json() == {"success": True, "message": "Order deleted successfully"}
    assert client.get(f"/api/orders/{placed_order['id']}").status_code == 404


def test_delete_can_be_configured_to_cancel(settings, fake_menu):
    cancel_mode = dataclasses.replace(settings, order_delete_mode="cancel")

    with TestClient(create_app(cancel_mode, catalog_transport=fake_menu.transport)) as client:
        order_id = client.post("/api/orders", json=order_body(("margherita", 1))).json()["data"]["id"]
        resp = client.delete(f"/api/orders/{order_id}")
        stored = client.get(f"/api/orders/{order_id}")

    assert resp.json()["data"]["status"] == "Cancelled"
    assert stored.json()["data"]["status"] == "Cancelled"


def test_health(client):
    assert client.get("/health").json() == {"status": "OK", "service": "Order Service"}
