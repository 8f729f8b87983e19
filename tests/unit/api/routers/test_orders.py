"""
Tests for Orders API Router.

Covers:
- POST /orders (201, body shape, validation -> 400)
- GET /orders/{id} (found, 404, non-integer id -> 400)
- PUT /orders/{id} (update, 404 creates nothing)
- GET /orders/stats
- Blocking handlers served concurrently
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from fastapi import status

from src.domain.orders.entities.order import OrderStatus


# ============================================================================
# POST /orders
# ============================================================================


def test_create_order_returns_201_and_received(client, order_payload):
    response = client.post("/orders", json=order_payload)

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["id"] == 1
    assert data["item"] == "widget"
    assert data["amount"] == 9.99
    assert data["status"] == "RECEIVED"
    assert "createdAt" in data
    assert "created_at" not in data


def test_create_order_is_processed_in_background(client, components, order_payload):
    order_id = client.post("/orders", json=order_payload).json()["id"]

    assert components.dispatcher.wait_idle(timeout=5)

    data = client.get(f"/orders/{order_id}").json()
    assert data["status"] == OrderStatus.PROCESSED.value


@pytest.mark.parametrize(
    "body",
    [
        {"item": "", "amount": 1.0},
        {"item": "   ", "amount": 1.0},
        {"item": "widget", "amount": 0},
        {"item": "widget", "amount": -3.5},
        {"item": "widget", "amount": "lots"},
        {"item": "widget", "amount": True},
        {"item": "widget", "amount": "9.99"},
        {"item": "widget"},
        {"amount": 1.0},
        {},
    ],
)
def test_create_order_invalid_body_returns_400(client, components, body):
    response = client.post("/orders", json=body)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    data = response.json()
    assert data["code"] == "VALIDATION_ERROR"
    assert data["details"]["errors"]
    assert components.repository.count() == 0


def test_create_order_malformed_json_returns_400(client):
    response = client.post(
        "/orders", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == status.HTTP_400_BAD_REQUEST


# ============================================================================
# GET /orders/{id}
# ============================================================================


def test_get_order_returns_same_record(client, order_payload):
    created = client.post("/orders", json=order_payload).json()

    response = client.get(f"/orders/{created['id']}")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == created["id"]
    assert data["item"] == created["item"]
    assert data["amount"] == created["amount"]
    assert data["createdAt"] == created["createdAt"]


def test_get_unknown_order_returns_404(client):
    response = client.get("/orders/999")

    assert response.status_code == status.HTTP_404_NOT_FOUND
    data = response.json()
    assert data["code"] == "ORDER_NOT_FOUND"
    assert data["details"]["order_id"] == 999


def test_get_order_with_non_integer_id_returns_400(client):
    response = client.get("/orders/abc")

    assert response.status_code == status.HTTP_400_BAD_REQUEST


# ============================================================================
# PUT /orders/{id}
# ============================================================================


def test_update_order_changes_item_and_amount_only(client, components, order_payload):
    created = client.post("/orders", json=order_payload).json()
    assert components.dispatcher.wait_idle(timeout=5)

    response = client.put(f"/orders/{created['id']}", json={"item": "gadget", "amount": 19.5})

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["item"] == "gadget"
    assert data["amount"] == 19.5
    assert data["status"] == "PROCESSED"
    assert data["createdAt"] == created["createdAt"]


def test_update_unknown_order_returns_404_and_creates_nothing(client, components, order_payload):
    response = client.put("/orders/5", json=order_payload)

    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["code"] == "ORDER_NOT_FOUND"
    assert components.repository.count() == 0


@pytest.mark.parametrize("amount", [0, True, "9.99"])
def test_update_with_invalid_body_returns_400(client, order_payload, amount):
    created = client.post("/orders", json=order_payload).json()

    response = client.put(f"/orders/{created['id']}", json={"item": "gadget", "amount": amount})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert client.get(f"/orders/{created['id']}").json()["amount"] == 9.99


def test_create_order_accepts_integer_amount(client):
    response = client.post("/orders", json={"item": "widget", "amount": 3})

    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["amount"] == 3.0


# ============================================================================
# GET /orders/stats
# ============================================================================


def test_stats_initially_zero(client):
    response = client.get("/orders/stats")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["totalRequests"] == 0
    assert "timestamp" in data


def test_stats_counts_submissions_not_failures(client, order_payload):
    for _ in range(3):
        client.post("/orders", json=order_payload)
    client.post("/orders", json={"item": "", "amount": 1.0})
    client.put("/orders/1", json={"item": "gadget", "amount": 2.0})

    assert client.get("/orders/stats").json()["totalRequests"] == 3


# ============================================================================
# CONCURRENCY
# ============================================================================


def test_blocking_reads_are_served_concurrently(client, components, order_payload):
    order_id = client.post("/orders", json=order_payload).json()["id"]
    assert components.dispatcher.wait_idle(timeout=5)

    # Both requests must be inside the store at once to pass the barrier
    barrier = threading.Barrier(2, timeout=5)
    read = components.repository.get_by_id

    def get_by_id(requested_id):
        barrier.wait()
        return read(requested_id)

    components.repository.get_by_id = get_by_id

    with ThreadPoolExecutor(max_workers=2) as pool:
        responses = list(pool.map(lambda _: client.get(f"/orders/{order_id}"), range(2)))

    assert [r.status_code for r in responses] == [200, 200]
