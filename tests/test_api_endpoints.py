from unittest.mock import MagicMock

from clinic_booking.core.errors import StorageError
from clinic_booking.services.availability_service import TIME_SLOTS

PAYLOAD = {
    "firstName": "Anna",
    "lastName": "Kowalska",
    "email": "anna@example.com",
    "phone": "600100200",
    "service": "Konsultacja",
    "date": "2025-03-10",
    "time": "09:00",
    "price": "200 zł",
}

def _book(client, **overrides):
    return client.post("/api/bookings", json={**PAYLOAD, **overrides})

def test_root_and_health(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"
    assert "version" in response.json()

    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["uptime"] >= 0
    assert "timestamp" in data

def test_available_times_on_empty_day(client):
    response = client.get("/api/available-times", params={"date": "2025-03-10"})

    assert response.status_code == 200
    assert response.json() == {"date": "2025-03-10", "availableTimes": TIME_SLOTS, "bookedTimes": []}

def test_available_times_requires_date(client):
    response = client.get("/api/available-times")

    assert response.status_code == 400
    assert "error" in response.json()

def test_create_booking_returns_trimmed_confirmation(client, fake_mailer):
    response = _book(client)

    assert response.status_code == 201
    data = response.json()
    assert data["success"] is True
    assert data["message"]
    assert set(data["booking"]) == {"id", "date", "time", "service"}
    assert data["booking"]["date"] == "2025-03-10"
    assert data["booking"]["time"] == "09:00"

    # Background tasks have run by the time TestClient returns
    assert [m["to"] for m in fake_mailer.sent] == ["clinic@example.com", "anna@example.com"]

def test_same_slot_twice_conflicts(client, fake_mailer):
    first = _book(client)
    second = _book(client, firstName="Jan", email="jan@example.com")

    assert first.status_code == 201
    assert second.status_code == 409
    assert "error" in second.json()

    bookings = client.get("/api/bookings").json()
    assert len(bookings) == 1
    assert bookings[0]["firstName"] == "Anna"
    assert len(fake_mailer.sent) == 2

def test_booked_slot_disappears_from_availability(client):
    _book(client)

    data = client.get("/api/available-times", params={"date": "2025-03-10"}).json()

    assert len(data["availableTimes"]) == 10
    assert "09:00" not in data["availableTimes"]
    assert data["bookedTimes"] == ["09:00"]

def test_missing_fields_return_400(client, fake_mailer):
    payload = {k: v for k, v in PAYLOAD.items() if k != "phone"}

    response = client.post("/api/bookings", json=payload)

    assert response.status_code == 400
    assert client.get("/api/bookings").json() == []
    assert fake_mailer.sent == []

def test_blank_field_returns_400(client):
    assert _book(client, lastName="   ").status_code == 400

def test_malformed_body_returns_400(client):
    response = client.post("/api/bookings", content="not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert "error" in response.json()

def test_mail_failure_does_not_affect_booking(client, fake_mailer):
    fake_mailer.succeed = False

    response = _book(client)

    assert response.status_code == 201
    assert len(fake_mailer.sent) == 2

def test_storage_failure_returns_redacted_500(client, fake_mailer):
    client.app.state.store.insert = MagicMock(side_effect=StorageError("disk full"))

    response = _book(client)

    assert response.status_code == 500
    assert response.json() == {"error": "Something went wrong"}
    assert fake_mailer.sent == []

def test_list_get_and_delete(client):
    booking_id = _book(client).json()["booking"]["id"]

    listed = client.get("/api/bookings").json()
    assert [b["id"] for b in listed] == [booking_id]
    assert listed[0]["createdAt"]

    assert client.get(f"/api/bookings/{booking_id}").json()["email"] == "anna@example.com"

    response = client.delete(f"/api/bookings/{booking_id}")
    assert response.status_code == 200
    assert response.json()["success"] is True

    assert client.get("/api/bookings").json() == []
    assert client.get(f"/api/bookings/{booking_id}").status_code == 404

def test_delete_unknown_booking_returns_404(client):
    response = client.delete("/api/bookings/does-not-exist")

    assert response.status_code == 404
    assert "error" in response.json()

def test_search_and_stats(client):
    _book(client, date="2000-01-01")
    _book(client, time="10:00", date="2999-01-01", firstName="Jan", lastName="Nowak", email="jan@example.com")

    found = client.get("/api/bookings/search", params={"q": "nowak"}).json()
    assert [b["lastName"] for b in found] == ["Nowak"]
    assert client.get("/api/bookings/search").status_code == 400

    stats = client.get("/api/bookings/stats").json()
    assert stats == {"total": 2, "today": 0, "upcoming": 1, "past": 1}

def test_unknown_route_returns_404_envelope(client):
    response = client.get("/api/nope")

    assert response.status_code == 404
    assert response.json() == {"error": "Endpoint not found", "path": "/api/nope"}
