# tests/conftest.py
"""
Pytest configuration and fixtures.

The app runs against an in-memory SQLite database; the schema is recreated
for every test.
"""

import os

os.environ["CARWASH_DATABASE_URL"] = "sqlite://"
os.environ["CARWASH_SEED_CATALOG"] = "0"
os.environ["CARWASH_RATING_BASE_URL"] = "http://ui.test"

import pytest
from fastapi.testclient import TestClient

from carwash.database import Base, SessionLocal, engine
from carwash.main import app


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(engine)
    yield
    Base.metadata.drop_all(engine)


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# Entity fixtures
# =============================================================================

@pytest.fixture
def customer(client):
    r = client.post("/api/customers", json={"name": "Juan Pérez", "phone": "5551234"})
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def vehicle(client, customer):
    r = client.post("/api/vehicles", json={
        "customer_id": customer["id"],
        "make": "Toyota",
        "model": "Corolla",
        "year": 2019,
        "license_plate": "ABC123",
        "color": "Blanco",
    })
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def employee(client):
    r = client.post("/api/employees", json={
        "name": "Carlos Ruiz",
        "position": "Lavador",
        "hire_date": "2023-01-15",
    })
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def basic_wash(client):
    r = client.post("/api/services", json={"name": "Lavado Básico", "base_price": 150, "estimated_hours": 1})
    assert r.status_code == 201, r.text
    return r.json()


@pytest.fixture
def make_visit(client, vehicle, basic_wash):
    def _make(**overrides):
        body = {"vehicle_id": vehicle["id"], "service_type_id": basic_wash["id"]}
        body.update(overrides)
        r = client.post("/api/pending-services", json=body)
        assert r.status_code == 201, r.text
        return r.json()
    return _make


@pytest.fixture
def completed_visit(client, make_visit):
    visit = make_visit()
    r = client.patch(f"/api/pending-services/{visit['id']}/complete")
    assert r.status_code == 200, r.text
    return r.json()


@pytest.fixture
def item(client):
    r = client.post("/api/inventory", json={
        "name": "Shampoo",
        "category": "Químicos",
        "quantity": 20,
        "unit": "L",
        "cost_price": 50,
        "selling_price": 80,
        "reorder_level": 5,
    })
    assert r.status_code == 201, r.text
    return r.json()
