"""
Integration tests for the HTTP API.

Each test builds the application with ``create_app`` around the test's
in-memory database and calls it through ``TestClient``.
"""

import pytest
from datetime import time

import httpx
from fastapi.testclient import TestClient

from adapters import factory
from adapters.gesden import GesdenAdapter
from main import create_app

from tests.conftest import create_clinic, create_doctor, create_schedule, create_working_hours


MONDAY = "2099-06-01"


@pytest.fixture
def seeded(database):
    """Manual clinic open Mon-Fri 09:00-18:00 with one doctor working mornings."""
    with database.session_scope() as db:
        clinic = create_clinic(db, slug="sonrisa-madrid", name="Clínica Sonrisa")
        for day in range(1, 6):
            create_working_hours(db, clinic, day, time(9, 0), time(18, 0))
        doctor = create_doctor(db, clinic, slug="dra-garcia", name="Dra. García")
        for day in range(1, 6):
            create_schedule(db, doctor, day, time(9, 0), time(13, 0))
    return database


@pytest.fixture
def client(seeded):
    return TestClient(create_app(seeded))


@pytest.fixture
def gesden_clinic(seeded):
    """Clinic whose agenda lives in Gesden, with one synced doctor."""
    with seeded.session_scope() as db:
        clinic = create_clinic(
            db, slug="con-gesden", management_system="gesden",
            management_config={"base_url": "https://gesden.example.com/api"},
        )
        create_doctor(db, clinic, slug="dr-ruiz", external_id="7")
    return clinic


def use_gesden_transport(monkeypatch, handler):
    """Route Gesden adapters built during the test through ``handler``; returns the built adapters."""
    built = []
    transport = httpx.MockTransport(handler)

    def build(db, clinic):
        adapter = GesdenAdapter(db, clinic, transport=transport)
        built.append(adapter)
        return adapter

    monkeypatch.setitem(factory._ADAPTER_REGISTRY, "gesden", build)
    return built


def booking_payload(**overrides):
    payload = {
        "doctor_slug": "dra-garcia",
        "patient_name": "Ana López",
        "patient_phone": "+34600111222",
        "patient_email": "ana@example.com",
        "service": "Limpieza dental",
        "date": MONDAY,
        "time": "10:00",
        "duration": 30,
    }
    payload.update(overrides)
    return payload


class TestRootEndpoints:
    """Test root API endpoints."""

    def test_root_endpoint(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Dental Booking Backend API"
        assert data["status"] == "running"

    def test_health_endpoint(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_lifespan_keeps_injected_database(self, seeded):
        app = create_app(seeded)
        with TestClient(app) as client:
            assert client.get("/health").status_code == 200
            assert app.state.database is seeded


class TestSlotsEndpoint:
    """Test GET /api/clinics/{clinic}/doctors/{doctor}/slots."""

    def test_available_slots(self, client):
        response = client.get(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/slots",
            params={"date": MONDAY, "duration": 30},
        )

        assert response.status_code == 200
        slots = response.json()["slots"]
        assert [s["start"] for s in slots] == [
            "09:00", "09:30", "10:00", "10:30", "11:00", "11:30", "12:00", "12:30",
        ]
        assert slots[0] == {"start": "09:00", "end": "09:30"}

    def test_no_slots_is_success(self, client):
        response = client.get(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/slots",
            params={"date": "2099-06-06", "duration": 30},
        )

        assert response.status_code == 200
        assert response.json() == {"slots": []}

    def test_past_date_is_empty(self, client):
        response = client.get(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/slots",
            params={"date": "2001-01-01", "duration": 30},
        )

        assert response.status_code == 200
        assert response.json() == {"slots": []}

    def test_invalid_date(self, client):
        response = client.get(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/slots",
            params={"date": "2099-02-30", "duration": 30},
        )

        assert response.status_code == 400
        assert response.json()["type"] == "validation_error"

    def test_non_positive_duration(self, client):
        response = client.get(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/slots",
            params={"date": MONDAY, "duration": 0},
        )

        assert response.status_code == 400

    def test_missing_duration(self, client):
        response = client.get(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/slots",
            params={"date": MONDAY},
        )

        assert response.status_code == 422

    def test_unknown_clinic(self, client):
        response = client.get(
            "/api/clinics/no-existe/doctors/dra-garcia/slots",
            params={"date": MONDAY, "duration": 30},
        )

        assert response.status_code == 404
        assert response.json()["type"] == "not_found"

    def test_unknown_doctor(self, client):
        response = client.get(
            "/api/clinics/sonrisa-madrid/doctors/dr-nadie/slots",
            params={"date": MONDAY, "duration": 30},
        )

        assert response.status_code == 404

    def test_unknown_management_system(self, seeded, client):
        with seeded.session_scope() as db:
            create_clinic(db, slug="mal-configurada", management_system="dentalink")

        response = client.get(
            "/api/clinics/mal-configurada/doctors/dra-garcia/slots",
            params={"date": MONDAY, "duration": 30},
        )

        assert response.status_code == 422
        data = response.json()
        assert data["type"] == "configuration_error"
        assert "dentalink" in data["detail"]

    def test_external_failure_is_bad_gateway(self, gesden_clinic, client, monkeypatch):
        built = use_gesden_transport(
            monkeypatch, lambda request: httpx.Response(500, json={"error": "down"}),
        )

        response = client.get(
            "/api/clinics/con-gesden/doctors/dr-ruiz/slots",
            params={"date": MONDAY, "duration": 30},
        )

        assert response.status_code == 502
        assert response.json()["type"] == "external_service_error"
        assert built[0].client._client.is_closed

    def test_external_adapter_is_closed_after_request(self, gesden_clinic, client, monkeypatch):
        built = use_gesden_transport(
            monkeypatch,
            lambda request: httpx.Response(200, json={"huecos": [{"hora_inicio": "10:00", "hora_fin": "10:30"}]}),
        )

        response = client.get(
            "/api/clinics/con-gesden/doctors/dr-ruiz/slots",
            params={"date": MONDAY, "duration": 30},
        )

        assert response.status_code == 200
        assert response.json() == {"slots": [{"start": "10:00", "end": "10:30"}]}
        assert len(built) == 1
        assert built[0].client._client.is_closed


class TestAppointmentEndpoints:
    """Test booking, cancellation and status changes."""

    def test_book_appointment(self, client):
        response = client.post("/api/clinics/sonrisa-madrid/appointments", json=booking_payload())

        assert response.status_code == 201
        data = response.json()
        assert data["doctor_slug"] == "dra-garcia"
        assert data["time"] == "10:00"
        assert data["status"] == "confirmed"

        slots = client.get(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/slots",
            params={"date": MONDAY, "duration": 30},
        ).json()["slots"]
        assert "10:00" not in [s["start"] for s in slots]

    def test_double_booking_returns_conflict(self, client):
        first = client.post("/api/clinics/sonrisa-madrid/appointments", json=booking_payload())
        second = client.post(
            "/api/clinics/sonrisa-madrid/appointments", json=booking_payload(patient_name="Pedro Gil"),
        )

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["type"] == "booking_conflict"

    def test_booking_outside_availability(self, client):
        response = client.post(
            "/api/clinics/sonrisa-madrid/appointments", json=booking_payload(time="16:00"),
        )

        assert response.status_code == 400

    def test_booking_with_blank_name(self, client):
        response = client.post(
            "/api/clinics/sonrisa-madrid/appointments", json=booking_payload(patient_name="  "),
        )

        assert response.status_code == 400

    def test_cancel_appointment(self, client):
        created = client.post("/api/clinics/sonrisa-madrid/appointments", json=booking_payload()).json()

        response = client.post(f"/api/clinics/sonrisa-madrid/appointments/{created['id']}/cancel")

        assert response.status_code == 200
        assert response.json() == {"success": True, "appointment_id": created["id"]}

        rebooked = client.post(
            "/api/clinics/sonrisa-madrid/appointments", json=booking_payload(patient_name="Pedro Gil"),
        )
        assert rebooked.status_code == 201

    def test_cancel_unknown_appointment(self, client):
        response = client.post("/api/clinics/sonrisa-madrid/appointments/999/cancel")

        assert response.status_code == 404

    def test_change_status(self, client):
        created = client.post("/api/clinics/sonrisa-madrid/appointments", json=booking_payload()).json()

        response = client.patch(
            f"/api/clinics/sonrisa-madrid/appointments/{created['id']}/status",
            json={"status": "completed"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "completed"
        assert data["date"] == MONDAY
        assert data["time"] == "10:00"

    def test_invalid_status_transition(self, client):
        created = client.post("/api/clinics/sonrisa-madrid/appointments", json=booking_payload()).json()
        client.post(f"/api/clinics/sonrisa-madrid/appointments/{created['id']}/cancel")

        response = client.patch(
            f"/api/clinics/sonrisa-madrid/appointments/{created['id']}/status",
            json={"status": "confirmed"},
        )

        assert response.status_code == 400


class TestScheduleEndpoints:
    """Test doctor schedule and clinic working-hours management."""

    def test_get_doctor_schedule(self, client):
        response = client.get("/api/clinics/sonrisa-madrid/doctors/dra-garcia/schedule")

        assert response.status_code == 200
        data = response.json()
        assert data["doctor_slug"] == "dra-garcia"
        assert len(data["entries"]) == 5
        assert data["entries"][0] == {"day": 1, "start_time": "09:00", "end_time": "13:00"}

    def test_replace_doctor_schedule(self, client):
        response = client.put(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/schedule",
            json=[
                {"day": 1, "start_time": "09:00", "end_time": "11:00"},
                {"day": 1, "start_time": "10:00", "end_time": "12:00"},
            ],
        )

        assert response.status_code == 200
        assert len(response.json()["entries"]) == 2

        slots = client.get(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/slots",
            params={"date": MONDAY, "duration": 60},
        ).json()["slots"]
        assert [s["start"] for s in slots] == ["09:00", "09:30", "10:00", "10:30", "11:00"]

    def test_invalid_schedule_entry(self, client):
        response = client.put(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/schedule",
            json=[{"day": 1, "start_time": "13:00", "end_time": "09:00"}],
        )

        assert response.status_code == 422

    def test_schedule_of_unknown_doctor(self, client):
        response = client.get("/api/clinics/sonrisa-madrid/doctors/dr-nadie/schedule")

        assert response.status_code == 404

    def test_replace_working_hours(self, client):
        response = client.put(
            "/api/clinics/sonrisa-madrid/working-hours",
            json=[{"day": 1, "open": "11:00", "close": "18:00"}],
        )

        assert response.status_code == 200
        assert response.json()["entries"] == [{"day": 1, "open": "11:00", "close": "18:00"}]

        slots = client.get(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/slots",
            params={"date": MONDAY, "duration": 30},
        ).json()["slots"]
        assert [s["start"] for s in slots] == ["11:00", "11:30", "12:00", "12:30"]

        tuesday = client.get(
            "/api/clinics/sonrisa-madrid/doctors/dra-garcia/slots",
            params={"date": "2099-06-02", "duration": 30},
        ).json()["slots"]
        assert tuesday == []

    def test_duplicate_working_hours_day(self, client):
        response = client.put(
            "/api/clinics/sonrisa-madrid/working-hours",
            json=[
                {"day": 1, "open": "09:00", "close": "14:00"},
                {"day": 1, "open": "16:00", "close": "20:00"},
            ],
        )

        assert response.status_code == 400

    def test_get_working_hours(self, client):
        response = client.get("/api/clinics/sonrisa-madrid/working-hours")

        assert response.status_code == 200
        assert [e["day"] for e in response.json()["entries"]] == [1, 2, 3, 4, 5]
