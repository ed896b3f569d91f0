# tests/test_pending_services.py
"""
Tests for the pending-service (visit) lifecycle.
"""

from datetime import datetime, timedelta

import pytest

from carwash import models
from carwash.database import SessionLocal
from carwash.errors import InvalidTransitionError
from carwash.services import pending
from carwash.services.pending import can_transition
from carwash.utils import utcnow


def _dt(value: str) -> datetime:
    return datetime.fromisoformat(value)


class TestCreate:

    def test_without_employee_is_pending(self, make_visit):
        visit = make_visit(entry_time="2026-10-19T10:00:00")

        assert visit["status"] == "pending"
        assert visit["employee_id"] is None
        assert _dt(visit["estimated_completion_time"]) == datetime(2026, 10, 19, 11, 0)

    def test_with_employee_is_in_progress(self, make_visit, employee):
        visit = make_visit(employee_id=employee["id"])

        assert visit["status"] == "in-progress"
        assert visit["employee_name"] == "Carlos Ruiz"

    def test_default_entry_time_is_now(self, make_visit):
        before = utcnow()
        visit = make_visit()

        entry = _dt(visit["entry_time"])
        assert before - timedelta(seconds=1) <= entry <= utcnow()
        assert _dt(visit["estimated_completion_time"]) - entry == timedelta(hours=1)

    def test_uses_catalog_hours(self, client, vehicle):
        svc = client.post("/api/services", json={"name": "Lavado Premium", "base_price": 400, "estimated_hours": 2.5}).json()
        r = client.post("/api/pending-services", json={
            "vehicle_id": vehicle["id"],
            "service_type_id": svc["id"],
            "entry_time": "2026-10-19T08:00:00",
        })

        assert r.status_code == 201
        assert _dt(r.json()["estimated_completion_time"]) == datetime(2026, 10, 19, 10, 30)

    def test_defaults_to_one_hour_without_catalog_hours(self, client, vehicle):
        svc = client.post("/api/services", json={"name": "Aspirado", "base_price": 60}).json()
        r = client.post("/api/pending-services", json={
            "vehicle_id": vehicle["id"],
            "service_type_id": svc["id"],
            "entry_time": "2026-10-19T08:00:00",
        })

        assert _dt(r.json()["estimated_completion_time"]) == datetime(2026, 10, 19, 9, 0)

    def test_enriched_fields(self, make_visit):
        visit = make_visit()

        assert visit["license_plate"] == "ABC123"
        assert visit["client_name"] == "Juan Pérez"
        assert visit["client_phone"] == "5551234"
        assert visit["service_type_name"] == "Lavado Básico"
        assert visit["service_price"] == 150

    def test_unknown_vehicle(self, client, basic_wash):
        r = client.post("/api/pending-services", json={"vehicle_id": 999, "service_type_id": basic_wash["id"]})

        assert r.status_code == 404
        assert r.json()["code"] == "NOT_FOUND"

    def test_inactive_employee_rejected(self, client, vehicle, basic_wash, employee):
        client.patch(f"/api/employees/{employee['id']}/status", json={"status": "inactive"})

        r = client.post("/api/pending-services", json={
            "vehicle_id": vehicle["id"],
            "service_type_id": basic_wash["id"],
            "employee_id": employee["id"],
        })
        assert r.status_code == 409
        assert client.get("/api/pending-services").json() == []


class TestAssign:

    def test_assign_moves_pending_to_in_progress(self, client, make_visit, employee):
        visit = make_visit()

        r = client.patch(f"/api/pending-services/{visit['id']}/assign", json={"employee_id": employee["id"]})

        assert r.status_code == 200
        assert r.json()["status"] == "in-progress"
        assert r.json()["employee_id"] == employee["id"]

    def test_assign_keeps_delayed(self, client, make_visit, employee):
        visit = make_visit()
        client.patch(f"/api/pending-services/{visit['id']}/status", json={"status": "delayed"})

        r = client.patch(f"/api/pending-services/{visit['id']}/assign", json={"employee_id": employee["id"]})

        assert r.json()["status"] == "delayed"

    def test_assign_completed_rejected(self, client, completed_visit, employee):
        sid = completed_visit["service"]["id"]

        r = client.patch(f"/api/pending-services/{sid}/assign", json={"employee_id": employee["id"]})

        assert r.status_code == 409
        assert r.json()["code"] == "INVALID_TRANSITION"

    def test_assign_unknown_employee(self, client, make_visit):
        r = client.patch(f"/api/pending-services/{make_visit()['id']}/assign", json={"employee_id": 42})
        assert r.status_code == 404


class TestComplete:

    def test_complete_returns_rating_link(self, client, make_visit, vehicle):
        visit = make_visit()

        r = client.patch(f"/api/pending-services/{visit['id']}/complete")

        assert r.status_code == 200
        body = r.json()
        assert body["service"]["status"] == "completed"
        assert body["service"]["completed_at"] is not None
        assert body["ratingLink"]
        assert body["ratingUrl"] == f"http://ui.test/rate/{body['ratingLink']}"

        v = client.get(f"/api/vehicles/{vehicle['id']}").json()
        assert v["last_service_date"] == utcnow().date().isoformat()

    def test_double_complete_rejected(self, client, completed_visit):
        sid = completed_visit["service"]["id"]

        r = client.patch(f"/api/pending-services/{sid}/complete")

        assert r.status_code == 409
        assert client.get(f"/api/pending-services/{sid}").json()["status"] == "completed"

    def test_complete_unknown(self, client):
        assert client.patch("/api/pending-services/77/complete").status_code == 404

    def test_stale_read_cannot_complete_twice(self, db, make_visit):
        visit = make_visit()
        stale = db.get(models.PendingService, visit["id"])
        assert stale.status == "pending"

        with SessionLocal() as other:
            pending.mark_complete(other, visit["id"])

        with pytest.raises(InvalidTransitionError):
            pending.mark_complete(db, visit["id"])

        db.expire_all()
        links = db.query(models.ServiceRatingLink).filter_by(service_id=visit["id"]).all()
        assert len(links) == 1
        assert links[0].revoked_at is None


class TestStatusMachine:

    @pytest.mark.parametrize("current,target,allowed", [
        ("pending", "in-progress", True),
        ("pending", "delayed", True),
        ("pending", "completed", True),
        ("in-progress", "delayed", True),
        ("in-progress", "pending", False),
        ("delayed", "in-progress", True),
        ("delayed", "pending", False),
        ("completed", "pending", False),
        ("completed", "in-progress", False),
        ("completed", "delayed", False),
    ])
    def test_transition_table(self, current, target, allowed):
        assert can_transition(current, target) is allowed

    def test_start_requires_employee(self, client, make_visit):
        visit = make_visit()

        r = client.patch(f"/api/pending-services/{visit['id']}/status", json={"status": "in-progress"})

        assert r.status_code == 409

    def test_same_status_is_noop(self, client, make_visit):
        visit = make_visit()

        r = client.patch(f"/api/pending-services/{visit['id']}/status", json={"status": "pending"})

        assert r.status_code == 200
        assert r.json()["status"] == "pending"

    def test_completed_is_terminal(self, client, completed_visit):
        sid = completed_visit["service"]["id"]

        r = client.patch(f"/api/pending-services/{sid}/status", json={"status": "delayed"})

        assert r.status_code == 409

    def test_status_completed_mints_link(self, client, make_visit, db):
        visit = make_visit()

        r = client.patch(f"/api/pending-services/{visit['id']}/status", json={"status": "completed"})

        assert r.json()["status"] == "completed"
        links = db.query(models.ServiceRatingLink).filter_by(service_id=visit["id"]).all()
        assert len(links) == 1

    def test_unknown_status_value(self, client, make_visit):
        r = client.patch(f"/api/pending-services/{make_visit()['id']}/status", json={"status": "done"})
        assert r.status_code == 422

    def test_flag_delayed(self, client, make_visit):
        old = make_visit(entry_time=(utcnow() - timedelta(hours=3)).isoformat())
        fresh = make_visit()

        r = client.post("/api/pending-services/flag-delayed")

        assert r.status_code == 200
        assert [v["id"] for v in r.json()] == [old["id"]]
        assert client.get(f"/api/pending-services/{old['id']}").json()["status"] == "delayed"
        assert client.get(f"/api/pending-services/{fresh['id']}").json()["status"] == "pending"


class TestListing:

    def test_filter_by_status(self, client, make_visit, employee):
        make_visit()
        make_visit(employee_id=employee["id"])

        pending = client.get("/api/pending-services", params={"status": "pending"}).json()
        in_progress = client.get("/api/pending-services/status/in-progress").json()

        assert [v["status"] for v in pending] == ["pending"]
        assert [v["status"] for v in in_progress] == ["in-progress"]
        assert len(client.get("/api/pending-services").json()) == 2

    def test_search_by_plate_and_client(self, client, make_visit):
        make_visit()

        assert len(client.get("/api/pending-services/search/abc").json()) == 1
        assert len(client.get("/api/pending-services", params={"q": "juan"}).json()) == 1
        assert client.get("/api/pending-services/search/zzz999").json() == []

    def test_newest_first(self, client, make_visit):
        first = make_visit(entry_time="2026-10-18T09:00:00")
        second = make_visit(entry_time="2026-10-19T09:00:00")

        ids = [v["id"] for v in client.get("/api/pending-services").json()]

        assert ids == [second["id"], first["id"]]


class TestUpdateDelete:

    def test_change_service_type_recomputes_estimate(self, client, make_visit):
        visit = make_visit(entry_time="2026-10-19T10:00:00")
        svc = client.post("/api/services", json={"name": "Lavado Completo", "base_price": 250, "estimated_hours": 1.5}).json()

        r = client.put(f"/api/pending-services/{visit['id']}", json={"service_type_id": svc["id"], "notes": "cera"})

        assert r.status_code == 200
        assert r.json()["service_type_name"] == "Lavado Completo"
        assert r.json()["notes"] == "cera"
        assert _dt(r.json()["estimated_completion_time"]) == datetime(2026, 10, 19, 11, 30)

    def test_delete(self, client, make_visit):
        visit = make_visit()

        assert client.delete(f"/api/pending-services/{visit['id']}").status_code == 200
        assert client.get(f"/api/pending-services/{visit['id']}").status_code == 404

    def test_delete_invalidates_rating_link(self, client, completed_visit):
        sid = completed_visit["service"]["id"]
        token = completed_visit["ratingLink"]

        client.delete(f"/api/pending-services/{sid}")

        assert client.get(f"/api/service-rating-links/validate/{token}").status_code == 404

    def test_delete_keeps_usage_history(self, client, make_visit, item):
        visit = make_visit()
        client.post("/api/inventory/usage", json={"item_id": item["id"], "quantity": 2, "service_id": visit["id"]})

        assert client.delete(f"/api/pending-services/{visit['id']}").status_code == 200

        history = client.get(f"/api/inventory/{item['id']}/usage").json()
        assert len(history) == 1
        assert history[0]["service_id"] is None
        assert history[0]["quantity"] == 2
        assert client.get(f"/api/inventory/{item['id']}").json()["quantity"] == 18
