"""HTTP mapping tests — reason codes to status codes and JSON bodies."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from fastapi.testclient import TestClient
from parqueo.database import get_db
from parqueo.main import app

ADMIN = {"X-User-Id": "1", "X-User-Role": "ADMIN"}


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def main_lot(make_lot, make_space, make_user):
    lot = make_lot("Main")
    make_space(lot, "A01", "CAR")
    make_space(lot, "H01", "HANDICAP")
    make_user("ADMIN")
    return lot


class TestGate:
    def test_walk_in_entry_then_blocked(self, client, main_lot):
        first = client.post("/api/v1/parking-records/quick-entry",
                            json={"license_plate": "xyz999"}, headers=ADMIN)
        assert first.status_code == 201
        body = first.json()
        assert body["is_unregistered"] is True
        assert body["message"]
        assert body["state"] == "OPEN"
        assert body["parking_space"]["space_number"] == "A01"

        exit_resp = client.post(f"/api/v1/parking-records/{body['id']}/exit", headers=ADMIN)
        assert exit_resp.status_code == 200
        assert exit_resp.json()["state"] == "CLOSED"

        again = client.post("/api/v1/parking-records/quick-entry",
                            json={"license_plate": "XYZ999"}, headers=ADMIN)
        assert again.status_code == 403
        assert again.json()["code"] == "UNREGISTERED_BLOCKED"
        assert again.json()["was_blocked"] is True

    def test_double_exit_is_conflict(self, client, main_lot):
        entry = client.post("/api/v1/parking-records/quick-entry",
                            json={"license_plate": "ABC123"}, headers=ADMIN).json()
        client.post(f"/api/v1/parking-records/{entry['id']}/exit", headers=ADMIN)

        second = client.post(f"/api/v1/parking-records/{entry['id']}/exit", headers=ADMIN)

        assert second.status_code == 409
        assert second.json()["code"] == "ALREADY_EXITED"

    def test_missing_record_is_404(self, client, main_lot):
        resp = client.post("/api/v1/parking-records/999/exit", headers=ADMIN)
        assert resp.status_code == 404
        assert resp.json()["code"] == "RECORD_NOT_FOUND"

    def test_no_handicap_space_carries_notice(self, client, main_lot, make_vehicle):
        make_vehicle("HCP1", handicap=True)
        client.post("/api/v1/parking-records/quick-entry", json={"license_plate": "HCP2",
                    "unregistered_requires_handicap": True}, headers=ADMIN)

        resp = client.post("/api/v1/parking-records/quick-entry",
                           json={"license_plate": "HCP1"}, headers=ADMIN)

        assert resp.status_code == 404
        assert resp.json()["code"] == "NO_HANDICAP_SPACES"
        assert "message" in resp.json()

    def test_students_cannot_operate_gate(self, client, main_lot):
        resp = client.post("/api/v1/parking-records/quick-entry", json={"license_plate": "ABC123"},
                           headers={"X-User-Id": "9", "X-User-Role": "STUDENT"})
        assert resp.status_code == 403
        assert resp.json()["code"] == "FORBIDDEN"

    def test_unbound_officer(self, client, main_lot):
        resp = client.post("/api/v1/parking-records/quick-entry", json={"license_plate": "ABC123"},
                           headers={"X-User-Role": "SECURITY_OFFICER"})
        assert resp.status_code == 400
        assert resp.json()["code"] == "SCOPE_REQUIRED"


class TestAdministration:
    def test_lots_listing_with_counts(self, client, main_lot):
        client.post("/api/v1/parking-records/quick-entry", json={"license_plate": "ABC123"}, headers=ADMIN)

        lots = client.get("/api/v1/parkings").json()

        assert lots[0]["name"] == "Main"
        assert lots[0]["occupied_spaces"] == 1
        assert lots[0]["available_spaces"] == 1

    def test_register_vehicle_and_lookup(self, client, main_lot, make_user):
        owner = make_user("STUDENT")
        created = client.post("/api/v1/vehicles", headers=ADMIN, json={
            "license_plate": "abc123", "owner_id": owner.id, "type": "MOTORCYCLE",
        })
        assert created.status_code == 201

        found = client.get("/api/v1/vehicles/lookup/ABC123", headers=ADMIN)
        assert found.json()["type"] == "MOTORCYCLE"

        dup = client.post("/api/v1/vehicles", headers=ADMIN, json={"license_plate": "ABC123", "owner_id": owner.id})
        assert dup.status_code == 409

    def test_occupation_report(self, client, main_lot):
        client.post("/api/v1/parking-records/quick-entry", json={"license_plate": "ABC123"}, headers=ADMIN)

        report = client.get("/api/v1/reports/occupation", headers=ADMIN).json()

        assert report["total_spaces"] == 2
        assert report["occupied_spaces"] == 1
        assert report["occupation_rate"] == 50.0
        assert len(report["active_parking"]) == 1

    def test_failed_attempts_report(self, client, main_lot, make_vehicle):
        make_vehicle("ABC123")
        client.post("/api/v1/parking-records/quick-entry", json={"license_plate": "ABC123"}, headers=ADMIN)
        client.post("/api/v1/parking-records/quick-entry", json={"license_plate": "ABC123"}, headers=ADMIN)

        report = client.get("/api/v1/parking-records/failed-attempts", headers=ADMIN).json()

        assert report["pagination"]["total"] == 1
        assert report["attempts"][0]["failure_reason"] == "VEHICLE_ALREADY_PARKED"

    def test_health(self, client):
        assert client.get("/api/v1/health").json()["database"] == "ok"
