# backend/tests/routes/test_slots_routes.py
"""
GET /api/v1/slots, including the book / re-book / cancel walkthrough.
"""

from studiobook.core.config import settings
from tests.utils.factories import available_times, create_service, slot_map


def test_missing_date_is_invalid_input(client, service, stylist):
    response = client.get("/api/v1/slots", params={"serviceId": service.id})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_INPUT"


def test_malformed_date(client, service, stylist):
    response = client.get("/api/v1/slots", params={"date": "06/02/2030", "serviceId": service.id})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_INPUT"


def test_past_date(client, service, stylist):
    response = client.get("/api/v1/slots", params={"date": "2020-01-06", "serviceId": service.id})

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_DATE"


def test_open_day(client, service, stylist, booking_day):
    response = client.get(
        "/api/v1/slots", params={"date": booking_day.isoformat(), "serviceId": service.id}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["date"] == booking_day.isoformat()
    assert [slot["time"] for slot in body["slots"]] == [
        "09:00", "10:00", "11:00", "12:00", "13:00", "14:00", "15:00", "16:00",
    ]
    assert body["count"] == 8


def test_snake_case_service_param(client, db, stylist, booking_day):
    long_service = create_service(db, "Knotless Braids", duration_minutes=180)
    stylist.services.append(long_service)
    db.commit()

    response = client.get(
        "/api/v1/slots", params={"date": booking_day.isoformat(), "service_id": long_service.id}
    )

    assert response.status_code == 200
    assert response.json()["slots"][-1]["time"] == "14:00"


def test_unknown_service_yields_no_slots(client, stylist, booking_day):
    response = client.get(
        "/api/v1/slots", params={"date": booking_day.isoformat(), "serviceId": "01HZUNKNOWN"}
    )

    assert response.status_code == 200
    assert response.json() == {"date": booking_day.isoformat(), "slots": [], "count": 0}


def test_closed_day_yields_no_slots(client, service, stylist, booking_day, monkeypatch):
    monkeypatch.setattr(settings, "closed_weekdays", [booking_day.weekday()])

    response = client.get(
        "/api/v1/slots", params={"date": booking_day.isoformat(), "serviceId": service.id}
    )

    assert response.status_code == 200
    assert response.json()["slots"] == []


def test_book_rebook_cancel_walkthrough(
    client, service, stylist, booking_day, customer_headers, other_customer_headers
):
    day = booking_day.isoformat()
    payload = {"serviceId": service.id, "date": day, "time": "10:00"}

    created = client.post("/api/v1/bookings", json=payload, headers=customer_headers)
    assert created.status_code == 201
    booking_id = created.json()["id"]

    slots = client.get("/api/v1/slots", params={"date": day, "serviceId": service.id}).json()
    assert slot_map(slots)["10:00"] is False
    assert "10:00" not in available_times(slots)
    assert slots["count"] == 7

    conflict = client.post("/api/v1/bookings", json=payload, headers=other_customer_headers)
    assert conflict.status_code == 409
    assert conflict.json()["code"] == "SLOT_UNAVAILABLE"

    cancelled = client.patch(f"/api/v1/bookings/{booking_id}/cancel", headers=customer_headers)
    assert cancelled.status_code == 200

    slots = client.get("/api/v1/slots", params={"date": day, "serviceId": service.id}).json()
    assert slot_map(slots)["10:00"] is True
    assert slots["count"] == 8
