from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from skillsession.api.deps import get_document_store, get_expiry_service
from skillsession.infra.repositories import SlotRepository
from skillsession.main import create_app
from skillsession.services.expiry_service import ExpiryService

from conftest import fixed_clock


@pytest.fixture
def client(settings, store) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[get_document_store] = lambda: store
    return TestClient(app)


def _availability(client: TestClient, **overrides) -> "object":
    body = {"tutorId": "t1@example.com", "date": "2024-01-01", "startTime": "09:00", "endTime": "11:00"}
    body.update(overrides)
    return client.post("/availability", json=body)


def test_health(client) -> None:
    assert client.get("/health").json() == {"status": "ok"}


def test_create_availability_returns_201_and_slot_count(client) -> None:
    response = _availability(client)

    assert response.status_code == 201
    assert response.json()["success"] is True
    assert response.json()["slotsCreated"] == 2
    assert response.json()["itemFound"] is False


def test_teacher_id_aliases_are_normalised(client) -> None:
    for i, alias in enumerate(["id", "teacherId", "tutorid", "userid"]):
        body = {alias: "t1@example.com", "date": f"2024-01-0{i + 1}", "startTime": "09:00", "endTime": "10:00"}
        assert client.post("/availability", json=body).status_code == 201

    slots = client.get("/teachers/t1@example.com/slots").json()
    assert len(slots) == 4
    assert slots[0] == {
        "id": "S12024-01-01t1@example.com",
        "date": "2024-01-01",
        "startTime": "09:00",
        "endTime": "10:00",
        "status": "OPEN",
        "teacherId": "t1@example.com",
    }


def test_duplicate_availability_is_409(client) -> None:
    _availability(client)

    response = _availability(client, startTime="12:00", endTime="14:00")

    assert response.status_code == 409
    assert "already exists" in response.json()["detail"]


def test_invalid_availability_is_400(client) -> None:
    response = _availability(client, endTime="09:30")
    assert response.status_code == 400
    assert response.json()["detail"] == ["Time range must be at least 60 minutes"]

    assert _availability(client, date=None).status_code == 400
    assert client.post("/availability", content="not json", headers={"content-type": "application/json"}).status_code == 400


def test_storage_failure_is_500(client, store) -> None:
    store.fail_scan = True
    _availability(client)

    response = client.get("/teachers/t1@example.com/slots")

    assert response.status_code == 500


def test_slots_for_unknown_teacher_is_404(client) -> None:
    assert client.get("/teachers/nobody/slots").status_code == 404


def test_expire_slots_job(client, store, settings) -> None:
    _availability(client)
    client.app.dependency_overrides[get_expiry_service] = lambda: ExpiryService(
        SlotRepository(store, settings.tables.slots, page_size=1),
        tz=settings.tzinfo,
        clock=fixed_clock(datetime(2024, 1, 1, 10, 30)),
    )

    response = client.post("/jobs/expire-slots")

    assert response.status_code == 200
    assert response.json() == {
        "message": "Expired slots processed successfully",
        "results": {"processed": 2, "expired": 1, "failed": 0},
    }


def test_expire_slots_job_scan_failure_is_500(client, store) -> None:
    store.fail_scan = True

    response = client.post("/jobs/expire-slots")

    assert response.status_code == 500
    assert response.json()["message"] == "Error processing expired slots"
    assert "simulated failure" in response.json()["error"]


def test_expire_slots_job_unreadable_slot_is_500(client, store, settings) -> None:
    store.put(
        settings.tables.slots,
        {"id": "S1", "date": "2024-01-01", "startTime": "9am", "endTime": "10am", "slotstatus": "OPEN"},
    )

    response = client.post("/jobs/expire-slots")

    assert response.status_code == 500
    assert response.json()["message"] == "Error processing expired slots"
    assert "S1" in response.json()["error"]


def test_booking_flow(client) -> None:
    _availability(client)
    slot_id = "S12024-01-01t1@example.com"

    created = client.post(
        "/bookings",
        json={"tutorid": "t1@example.com", "studentid": "l1@example.com", "slotid": slot_id, "slotDate": "2024-01-01"},
    )
    assert created.status_code == 200
    booking_id = created.json()["bookingId"]

    pending = client.get("/bookings/pending", params={"teacherId": "t1@example.com", "learnerId": "l1@example.com"})
    assert pending.json() == [slot_id]

    confirmed = client.post(
        f"/bookings/{booking_id}/response",
        json={"tutorId": "t1@example.com", "studentId": "l1@example.com", "slotId": slot_id, "action": "CONFIRM"},
    )
    assert confirmed.json() == {"success": True, "message": "Booking confirmed successfully"}

    slots = {s["id"]: s["status"] for s in client.get("/teachers/t1@example.com/slots").json()}
    assert slots[slot_id] == "BOOKED"

    bookings = client.get("/teachers/t1@example.com/bookings").json()["bookings"]
    assert [b["bookingStatus"] for b in bookings] == ["CONFIRM"]

    again = client.post(
        f"/bookings/{booking_id}/response",
        json={"teacherId": "t1@example.com", "learnerId": "l1@example.com", "slotId": slot_id, "action": "REJECT"},
    )
    assert again.status_code == 409


def test_pending_requires_both_ids(client) -> None:
    assert client.get("/bookings/pending", params={"teacherId": "t1"}).status_code == 400


def test_profiles_and_teacher_search(client) -> None:
    registered = client.post(
        "/users",
        json={"email": "ada@example.com", "firstName": "Ada", "lastName": "L", "userType": "teacher,learner"},
    )
    assert registered.status_code == 201

    updated = client.put("/users/ada@example.com/teacher", json={"skills": ["math", "logic"], "expyears": 4})
    assert updated.json()["skills"] == "math, logic"
    assert updated.json()["expyears"] == "4"

    client.put("/users/ada@example.com/learner", json={"university": "KTH", "startyear": 2021})

    profile = client.get("/users/ada@example.com", params={"userType": "teacher,learner"}).json()
    assert profile["firstName"] == "Ada"
    assert profile["skills"] == "math, logic"
    assert profile["university"] == "KTH"
    assert profile["startyear"] == "2021"

    teachers = client.get("/teachers", params={"skills": "logic"}).json()["teachers"]
    assert [t["email"] for t in teachers] == ["ada@example.com"]

    assert client.get("/users/ghost@example.com", params={"userType": "learner"}).status_code == 404
    assert client.post("/users", json={"email": "x@example.com", "firstName": "X", "lastName": "Y"}).status_code == 400
