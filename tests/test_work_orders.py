# tests/test_work_orders.py
"""
Tests for work orders: service lines, parts and the running total.
"""

import pytest


@pytest.fixture
def order(client, vehicle):
    r = client.post("/api/work-orders", json={"vehicle_id": vehicle["id"], "notes": "Cliente frecuente"})
    assert r.status_code == 201, r.text
    return r.json()


def _stock(client, item_id):
    return client.get(f"/api/inventory/{item_id}").json()["quantity"]


class TestOrders:

    def test_create(self, order):
        assert order["status"] == "pending"
        assert order["total_cost"] == 0
        assert order["license_plate"] == "ABC123"
        assert order["customer_name"] == "Juan Pérez"
        assert order["start_date"] is not None

    def test_unknown_vehicle(self, client):
        assert client.post("/api/work-orders", json={"vehicle_id": 5}).status_code == 404

    def test_status_completed_sets_completion_date(self, client, order):
        r = client.patch(f"/api/work-orders/{order['id']}/status", json={"status": "completed"})

        assert r.status_code == 200
        assert r.json()["status"] == "completed"
        assert r.json()["completion_date"] is not None

    def test_filters(self, client, order, vehicle):
        r = client.patch(f"/api/work-orders/{order['id']}/status", json={"status": "in_progress"})
        assert r.status_code == 200

        assert len(client.get("/api/work-orders/status/in_progress").json()) == 1
        assert client.get("/api/work-orders/status/pending").json() == []
        assert len(client.get(f"/api/work-orders/vehicle/{vehicle['id']}").json()) == 1

    def test_delete(self, client, order):
        assert client.delete(f"/api/work-orders/{order['id']}").status_code == 200
        assert client.get(f"/api/work-orders/{order['id']}").status_code == 404


class TestLines:

    def test_service_price_defaults_to_catalog(self, client, order, basic_wash):
        r = client.post(f"/api/work-orders/{order['id']}/services", json={"service_id": basic_wash["id"]})

        assert r.status_code == 201
        body = r.json()
        assert body["services"][0]["price"] == 150
        assert body["services"][0]["service_name"] == "Lavado Básico"
        assert body["total_cost"] == 150

    def test_part_moves_stock_and_total(self, client, order, basic_wash, item):
        client.post(f"/api/work-orders/{order['id']}/services", json={"service_id": basic_wash["id"]})

        r = client.post(f"/api/work-orders/{order['id']}/parts", json={"item_id": item["id"], "quantity": 2})

        assert r.status_code == 201
        assert r.json()["total_cost"] == 310
        assert r.json()["parts"][0]["price_per_unit"] == 80
        assert _stock(client, item["id"]) == 18

    def test_remove_part_restores_stock(self, client, order, item):
        part = client.post(
            f"/api/work-orders/{order['id']}/parts",
            json={"item_id": item["id"], "quantity": 3, "price_per_unit": 10},
        ).json()["parts"][0]

        r = client.delete(f"/api/work-orders/parts/{part['id']}")

        assert r.status_code == 200
        assert r.json()["parts"] == []
        assert r.json()["total_cost"] == 0
        assert _stock(client, item["id"]) == 20

    def test_part_over_stock_rejected(self, client, order, item):
        r = client.post(f"/api/work-orders/{order['id']}/parts", json={"item_id": item["id"], "quantity": 21})

        assert r.status_code == 409
        assert _stock(client, item["id"]) == 20
        assert client.get(f"/api/work-orders/{order['id']}").json()["parts"] == []

    def test_remove_service(self, client, order, basic_wash):
        line = client.post(
            f"/api/work-orders/{order['id']}/services",
            json={"service_id": basic_wash["id"], "price": 120},
        ).json()["services"][0]

        r = client.delete(f"/api/work-orders/services/{line['id']}")

        assert r.json()["services"] == []
        assert r.json()["total_cost"] == 0

    def test_history_includes_orders(self, client, order, vehicle, make_visit):
        make_visit()

        history = client.get(f"/api/vehicles/{vehicle['id']}/history").json()

        assert [o["id"] for o in history["work_orders"]] == [order["id"]]
        assert len(history["visits"]) == 1
