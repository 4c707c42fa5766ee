import httpx
import pytest

from interview_booking.deps import get_clock, get_db_session
from interview_booking.main import app

AVAILABILITY = {
    "name": "Rajesh Kumar",
    "email": "rajesh@example.com",
    "max_interviews_per_week": 2,
    "availability_slots": [
        {"day_of_week": "monday", "start_time": "09:00", "end_time": "10:00", "slot_duration_minutes": 30},
    ],
}


@pytest.fixture()
async def client(session_factory, clock):
    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_session
    app.dependency_overrides[get_clock] = lambda: clock
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client
    app.dependency_overrides.clear()


async def _available(client, **params):
    response = await client.get("/api/v1/time-slots/available", params=params)
    assert response.status_code == 200
    return response.json()["data"]


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


async def test_request_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    generated = await client.get("/health")
    assert len(generated.headers["X-Request-ID"]) == 32


async def test_availability_then_list_book_and_transfer(client):
    created = await client.post("/api/v1/interviewers/availability", json=AVAILABILITY)
    assert created.status_code == 201
    body = created.json()
    assert body["success"] is True
    interviewer = body["data"]
    assert interviewer["generated_slots"] == 4
    assert interviewer["availability_slots"][0]["day_of_week"] == "MONDAY"

    first_page = await _available(client, page_size=3)
    assert len(first_page["time_slots"]) == 3
    assert first_page["has_next_page"] is True
    assert first_page["time_slots"][0]["slot_date_time"] == "2030-01-07T09:00:00"
    rest = await _available(client, page_size=3, cursor=first_page["next_cursor"])
    assert len(rest["time_slots"]) == 1
    assert rest["has_next_page"] is False
    assert rest["next_cursor"] is None

    slot_ids = [slot["id"] for slot in first_page["time_slots"] + rest["time_slots"]]
    booked = await client.post(
        "/api/v1/bookings",
        json={"time_slot_id": slot_ids[0], "candidate_name": "Priya Patel", "candidate_email": "priya@example.com"},
    )
    assert booked.status_code == 201
    booking = booked.json()["data"]
    assert booking["time_slot_id"] == slot_ids[0]
    assert booking["slot_date_time"] == "2030-01-07T09:00:00"

    fetched = await client.get(f"/api/v1/bookings/{booking['booking_id']}")
    assert fetched.status_code == 200
    assert fetched.json()["data"]["candidate_email"] == "priya@example.com"

    moved = await client.put(
        "/api/v1/bookings",
        json={
            "booking_id": booking["booking_id"],
            "new_time_slot_id": slot_ids[1],
            "candidate_name": "Priya P.",
            "candidate_email": "priya@example.com",
        },
    )
    assert moved.status_code == 200
    assert moved.json()["data"]["time_slot_id"] == slot_ids[1]
    assert moved.json()["data"]["candidate_name"] == "Priya P."

    remaining = await _available(client)
    assert slot_ids[0] in [slot["id"] for slot in remaining["time_slots"]]
    assert slot_ids[1] not in [slot["id"] for slot in remaining["time_slots"]]


async def test_domain_errors_map_to_status_codes(client):
    await client.post("/api/v1/interviewers/availability", json=AVAILABILITY)
    slots = (await _available(client))["time_slots"]

    missing = await client.post(
        "/api/v1/bookings",
        json={"time_slot_id": 9999, "candidate_name": "A", "candidate_email": "a@example.com"},
    )
    assert missing.status_code == 404
    assert missing.json()["error"] == "slot_not_found"
    assert missing.json()["success"] is False

    await client.post(
        "/api/v1/bookings",
        json={"time_slot_id": slots[0]["id"], "candidate_name": "A", "candidate_email": "a@example.com"},
    )
    duplicate = await client.post(
        "/api/v1/bookings",
        json={"time_slot_id": slots[1]["id"], "candidate_name": "A", "candidate_email": "a@example.com"},
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "duplicate_active_booking"

    taken = await client.post(
        "/api/v1/bookings",
        json={"time_slot_id": slots[0]["id"], "candidate_name": "B", "candidate_email": "b@example.com"},
    )
    assert taken.status_code == 400
    assert taken.json()["error"] == "slot_unavailable"

    bad_cursor = await client.get("/api/v1/time-slots/available", params={"cursor": "not-a-cursor"})
    assert bad_cursor.status_code == 400
    assert bad_cursor.json()["error"] == "invalid_cursor"

    unknown_booking = await client.get("/api/v1/bookings/9999")
    assert unknown_booking.status_code == 404
    assert unknown_booking.json()["error"] == "booking_not_found"


async def test_interviewer_lookups(client):
    created = (await client.post("/api/v1/interviewers/availability", json=AVAILABILITY)).json()["data"]

    by_id = await client.get(f"/api/v1/interviewers/{created['interviewer_id']}")
    assert by_id.status_code == 200
    assert by_id.json()["data"]["email"] == "rajesh@example.com"

    by_email = await client.get("/api/v1/interviewers/email/rajesh@example.com")
    assert by_email.status_code == 200
    assert by_email.json()["data"]["interviewer_id"] == created["interviewer_id"]

    missing = await client.get("/api/v1/interviewers/9999")
    assert missing.status_code == 404
    assert missing.json()["error"] == "interviewer_not_found"


async def test_request_validation(client):
    bad_email = await client.post(
        "/api/v1/bookings",
        json={"time_slot_id": 1, "candidate_name": "A", "candidate_email": "not-an-email"},
    )
    assert bad_email.status_code == 422

    inverted = dict(AVAILABILITY)
    inverted["availability_slots"] = [
        {"day_of_week": "MONDAY", "start_time": "10:00", "end_time": "09:00", "slot_duration_minutes": 30},
    ]
    assert (await client.post("/api/v1/interviewers/availability", json=inverted)).status_code == 422

    bad_day = dict(AVAILABILITY)
    bad_day["availability_slots"] = [
        {"day_of_week": "FUNDAY", "start_time": "09:00", "end_time": "10:00", "slot_duration_minutes": 30},
    ]
    assert (await client.post("/api/v1/interviewers/availability", json=bad_day)).status_code == 422
