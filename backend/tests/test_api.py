import pytest
from fastapi.testclient import TestClient

from conftest import DAY, JWT_SECRET, PAYMENT_SECRET
from turfbook.api.deps import get_payment_gateway, get_settings
from turfbook.config import Settings
from turfbook.core.auth import issue_token
from turfbook.core.constants import ROLE_ADMIN, ROLE_OWNER, ROLE_USER
from turfbook.db.session import get_db
from turfbook.main import app
from turfbook.services.payments import compute_signature


@pytest.fixture
def client(session_factory, gateway):
    test_settings = Settings(
        database_url="sqlite://",
        payment_key_id="",
        payment_key_secret=PAYMENT_SECRET,
        jwt_secret=JWT_SECRET,
    )

    def _get_db():
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


def auth(user_id: str, role: str = ROLE_USER) -> dict:
    return {"Authorization": f"Bearer {issue_token(user_id, role, JWT_SECRET)}"}


def _book(client, venue_id, user="user-1", start="10:00", end="12:00"):
    return client.post(
        "/api/bookings",
        json={"venue_id": venue_id, "date": DAY, "start_time": start, "end_time": end},
        headers=auth(user),
    )


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_slots_listing_is_public_and_reflects_bookings(client, venue):
    r = client.get(f"/api/venues/{venue.id}/slots", params={"date": DAY})
    assert r.status_code == 200
    assert len(r.json()["data"]) == 32

    assert _book(client, venue.id).status_code == 201
    grid = {s["time"]: s for s in client.get(f"/api/venues/{venue.id}/slots", params={"date": DAY}).json()["data"]}
    assert [t for t, s in grid.items() if s["is_booked"]] == ["10:00", "10:30", "11:00", "11:30"]


def test_slots_for_off_grid_venue_hours(client, make_venue):
    venue = make_venue(open_time="06:15", close_time="07:45")
    r = client.get(f"/api/venues/{venue.id}/slots", params={"date": DAY})
    assert r.status_code == 200
    assert [s["time"] for s in r.json()["data"]] == ["06:30", "07:00"]


def test_slots_unknown_venue(client):
    r = client.get("/api/venues/missing/slots", params={"date": DAY})
    assert r.status_code == 404
    assert r.json()["code"] == "not_found"


def test_create_booking_returns_payment_order(client, venue):
    r = _book(client, venue.id)
    assert r.status_code == 201
    body = r.json()
    assert body["data"]["status"] == "pending"
    assert body["data"]["total_amount"] == 2000.0
    assert body["data"]["advance_amount"] == 500.0
    assert body["data"]["remaining_amount"] == 1500.0
    assert body["payment_order"]["amount"] == 50000
    assert body["payment_order"]["id"] == body["data"]["payment_order_id"]


def test_create_booking_legacy_shape(client, venue):
    r = client.post(
        "/api/bookings",
        json={"venue_id": venue.id, "date": DAY, "time": "07:00", "duration": 1},
        headers=auth("user-1"),
    )
    assert r.status_code == 201
    assert r.json()["data"]["end_time"] == "08:00"


def test_create_booking_requires_token(client, venue):
    r = client.post("/api/bookings", json={"venue_id": venue.id, "date": DAY, "start_time": "10:00", "end_time": "11:00"})
    assert r.status_code == 401
    r = client.post(
        "/api/bookings",
        json={"venue_id": venue.id, "date": DAY, "start_time": "10:00", "end_time": "11:00"},
        headers={"Authorization": "Bearer not-a-token"},
    )
    assert r.status_code == 401


def test_error_mapping(client, venue):
    r = client.post("/api/bookings", json={"venue_id": venue.id, "date": DAY}, headers=auth("user-1"))
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_input"

    assert _book(client, venue.id).status_code == 201
    r = _book(client, venue.id, user="user-2", start="11:00", end="12:30")
    assert r.status_code == 409
    assert r.json() == {
        "detail": "Time range not available. Slot 11:00 is already booked or blocked.",
        "code": "unavailable",
        "time": "11:00",
    }


def test_verify_and_status(client, venue):
    data = _book(client, venue.id).json()["data"]
    order_id = data["payment_order_id"]
    sig = compute_signature(order_id, "pay_77", PAYMENT_SECRET)

    r = client.post(
        "/api/payments/verify",
        json={"order_id": order_id, "payment_id": "pay_77", "signature": sig},
        headers=auth("user-1"),
    )
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "confirmed"
    assert r.json()["data"]["is_advance_paid"] is True

    r = client.get(f"/api/payments/status/{data['id']}", headers=auth("user-1"))
    assert r.status_code == 200
    assert r.json()["data"]["payment_id"] == "pay_77"

    assert client.get(f"/api/payments/status/{data['id']}", headers=auth("user-2")).status_code == 403


def test_verify_bad_signature(client, venue):
    data = _book(client, venue.id).json()["data"]
    r = client.post(
        "/api/payments/verify",
        json={"order_id": data["payment_order_id"], "payment_id": "pay_1", "signature": "bad"},
        headers=auth("user-1"),
    )
    assert r.status_code == 402
    assert r.json()["code"] == "payment_rejected"

    got = client.get(f"/api/bookings/{data['id']}", headers=auth("user-1")).json()["data"]
    assert got["status"] == "cancelled"
    assert got["cancellation_reason"] == "Payment verification failed"


def test_cancel_flow(client, venue):
    booking_id = _book(client, venue.id).json()["data"]["id"]

    r = client.put(f"/api/bookings/{booking_id}/cancel", json={"reason": "rain"}, headers=auth("user-2"))
    assert r.status_code == 403

    r = client.put(f"/api/bookings/{booking_id}/cancel", json={"reason": "rain"}, headers=auth("user-1"))
    assert r.status_code == 200
    assert r.json()["data"]["cancellation_reason"] == "rain"

    r = client.put(f"/api/bookings/{booking_id}/cancel", headers=auth("admin-1", ROLE_ADMIN))
    assert r.status_code == 409
    assert r.json() == {
        "detail": "Booking is already cancelled",
        "code": "invalid_state",
        "booking_id": booking_id,
        "status": "cancelled",
    }


def test_listings_and_visibility(client, venue, make_venue):
    other_venue = make_venue(owner_id="owner-2")
    mine = _book(client, venue.id, user="user-1").json()["data"]["id"]
    _book(client, other_venue.id, user="user-2")

    r = client.get("/api/bookings", headers=auth("user-1"))
    assert [b["id"] for b in r.json()["data"]] == [mine]

    r = client.get("/api/bookings/owner/my-bookings", headers=auth("owner-1", ROLE_OWNER))
    assert r.json()["count"] == 1 and r.json()["data"][0]["id"] == mine
    assert client.get("/api/bookings/owner/my-bookings", headers=auth("user-1")).status_code == 403

    assert client.get(f"/api/bookings/{mine}", headers=auth("owner-1", ROLE_OWNER)).status_code == 200
    assert client.get(f"/api/bookings/{mine}", headers=auth("owner-2", ROLE_OWNER)).status_code == 403
    assert client.get(f"/api/bookings/{mine}", headers=auth("admin-1", ROLE_ADMIN)).status_code == 200
    assert client.get("/api/bookings/missing", headers=auth("user-1")).status_code == 404


def test_admin_lists_every_booking(client, venue, make_venue):
    other_venue = make_venue(owner_id="owner-2")
    first = _book(client, venue.id, user="user-1").json()["data"]["id"]
    second = _book(client, other_venue.id, user="user-2").json()["data"]["id"]

    r = client.get("/api/admin/bookings", headers=auth("admin-1", ROLE_ADMIN))
    assert r.status_code == 200
    assert r.json()["count"] == 2
    assert {b["id"] for b in r.json()["data"]} == {first, second}

    assert client.get("/api/admin/bookings", headers=auth("owner-1", ROLE_OWNER)).status_code == 403
    assert client.get("/api/admin/bookings", headers=auth("user-1")).status_code == 403
    assert client.get("/api/admin/bookings").status_code == 401
