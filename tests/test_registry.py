# tests/test_registry.py
"""
Tests for customers, vehicles, employees and the service catalog.
"""


class TestCustomers:

    def test_crud(self, client, customer):
        cid = customer["id"]

        r = client.put(f"/api/customers/{cid}", json={"email": "juan@gmail.com"})
        assert r.status_code == 200
        assert r.json()["email"] == "juan@gmail.com"
        assert r.json()["name"] == "Juan Pérez"

        assert client.delete(f"/api/customers/{cid}").status_code == 200
        assert client.get(f"/api/customers/{cid}").status_code == 404

    def test_search(self, client, customer):
        client.post("/api/customers", json={"name": "Ana López", "phone": "5559876"})

        assert [c["id"] for c in client.get("/api/customers/search", params={"q": "juan"}).json()] == [customer["id"]]
        assert len(client.get("/api/customers/search", params={"q": "555"}).json()) == 2

    def test_invalid_email(self, client):
        r = client.post("/api/customers", json={"name": "X", "phone": "1", "email": "not-an-email"})
        assert r.status_code == 422

    def test_delete_with_vehicles_rejected(self, client, vehicle):
        r = client.delete(f"/api/customers/{vehicle['customer_id']}")

        assert r.status_code == 409
        assert client.get(f"/api/customers/{vehicle['customer_id']}").status_code == 200

    def test_customer_vehicles(self, client, vehicle):
        rows = client.get(f"/api/customers/{vehicle['customer_id']}/vehicles").json()
        assert [v["id"] for v in rows] == [vehicle["id"]]


class TestVehicles:

    def test_plate_is_normalized(self, client, customer):
        r = client.post("/api/vehicles", json={"customer_id": customer["id"], "license_plate": "abc-123"})

        assert r.status_code == 201
        assert r.json()["license_plate"] == "ABC123"
        assert r.json()["customer_name"] == "Juan Pérez"

    def test_duplicate_plate(self, client, vehicle):
        r = client.post("/api/vehicles", json={"customer_id": vehicle["customer_id"], "license_plate": "abc 123"})

        assert r.status_code == 409
        assert r.json()["code"] == "DUPLICATE"

    def test_unknown_customer(self, client):
        r = client.post("/api/vehicles", json={"customer_id": 99, "license_plate": "XYZ999"})
        assert r.status_code == 404

    def test_blank_plate(self, client, customer):
        r = client.post("/api/vehicles", json={"customer_id": customer["id"], "license_plate": "--"})
        assert r.status_code == 400

    def test_lookup_and_search(self, client, vehicle):
        assert client.get("/api/vehicles/by-plate/abc-123").json()["id"] == vehicle["id"]
        assert client.get("/api/vehicles/by-plate/NOPE1").status_code == 404
        assert len(client.get("/api/vehicles/search", params={"q": "corolla"}).json()) == 1
        assert len(client.get(f"/api/vehicles/customer/{vehicle['customer_id']}").json()) == 1

    def test_update_plate_conflict(self, client, vehicle):
        other = client.post("/api/vehicles", json={"customer_id": vehicle["customer_id"], "license_plate": "XYZ789"}).json()

        r = client.put(f"/api/vehicles/{other['id']}", json={"license_plate": "ABC123"})

        assert r.status_code == 409

    def test_delete_removes_visits(self, client, vehicle, make_visit):
        visit = make_visit()

        assert client.delete(f"/api/vehicles/{vehicle['id']}").status_code == 200
        assert client.get(f"/api/pending-services/{visit['id']}").status_code == 404


class TestEmployees:

    def test_active_and_status(self, client, employee):
        assert [e["id"] for e in client.get("/api/employees/active").json()] == [employee["id"]]

        r = client.patch(f"/api/employees/{employee['id']}/status", json={"status": "inactive"})

        assert r.json()["status"] == "inactive"
        assert client.get("/api/employees/active").json() == []
        assert len(client.get("/api/employees").json()) == 1

    def test_search_by_position(self, client, employee):
        assert len(client.get("/api/employees/search", params={"q": "lavador"}).json()) == 1

    def test_bad_status(self, client, employee):
        r = client.patch(f"/api/employees/{employee['id']}/status", json={"status": "vacation"})
        assert r.status_code == 422

    def test_delete_keeps_visit(self, client, employee, make_visit):
        visit = make_visit(employee_id=employee["id"])

        assert client.delete(f"/api/employees/{employee['id']}").status_code == 200

        after = client.get(f"/api/pending-services/{visit['id']}").json()
        assert after["employee_id"] is None


class TestCatalog:

    def test_categories(self, client):
        cat = client.post("/api/services/categories", json={"name": "Lavado"}).json()
        client.post("/api/services", json={"name": "Lavado Básico", "base_price": 150, "category_id": cat["id"]})
        client.post("/api/services", json={"name": "Pulido", "base_price": 500})

        rows = client.get(f"/api/services/category/{cat['id']}").json()

        assert [s["name"] for s in rows] == ["Lavado Básico"]
        assert rows[0]["category_name"] == "Lavado"
        assert client.post("/api/services/categories", json={"name": "lavado"}).status_code == 409

    def test_unknown_category(self, client):
        r = client.post("/api/services", json={"name": "Pulido", "base_price": 500, "category_id": 8})
        assert r.status_code == 404

    def test_negative_price(self, client):
        assert client.post("/api/services", json={"name": "Pulido", "base_price": -1}).status_code == 422

    def test_update(self, client, basic_wash):
        r = client.put(f"/api/services/{basic_wash['id']}", json={"base_price": 175})

        assert r.json()["base_price"] == 175
        assert r.json()["name"] == "Lavado Básico"
