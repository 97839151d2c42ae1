# backend/tests/routes/test_cron_routes.py
"""
Scheduled reminder trigger.

Reminders go to tomorrow's pending and confirmed bookings, once each, no
matter how often the trigger fires.
"""

from datetime import time
from unittest.mock import Mock

import pytest

from studiobook.api.dependencies.services import get_email_transport
from studiobook.core.exceptions import NotificationException
from studiobook.core.timezone_utils import business_tomorrow
from studiobook.main import fastapi_app as app
from tests.utils.factories import create_booking_row


@pytest.fixture
def tomorrow_bookings(db, service, stylist, customer_user, other_customer):
    tomorrow = business_tomorrow()
    return [
        create_booking_row(db, service, stylist, tomorrow, time(10, 0), customer_user),
        create_booking_row(
            db, service, stylist, tomorrow, time(12, 0), other_customer, status="confirmed"
        ),
        create_booking_row(
            db, service, stylist, tomorrow, time(14, 0), other_customer, status="cancelled"
        ),
    ]


class TestCronAuth:
    def test_missing_secret(self, client):
        assert client.get("/api/v1/cron/reminders").status_code == 401

    def test_wrong_secret(self, client):
        response = client.get(
            "/api/v1/cron/reminders", headers={"Authorization": "Bearer guess"}
        )

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"

    def test_wrong_scheme(self, client):
        response = client.post(
            "/api/v1/cron/reminders", headers={"Authorization": "Basic test-cron-secret"}
        )

        assert response.status_code == 401

    def test_user_token_is_not_enough(self, client, admin_headers):
        assert client.get("/api/v1/cron/reminders", headers=admin_headers).status_code == 401

    def test_non_ascii_secret_is_rejected_not_an_error(self, client):
        response = client.get(
            "/api/v1/cron/reminders",
            headers={"Authorization": "Bearer caf\u00e9".encode("utf-8")},
        )

        assert response.status_code == 401
        assert response.json()["code"] == "UNAUTHORIZED"


class TestCronRun:
    def test_sends_once_per_booking(self, client, tomorrow_bookings, cron_headers):
        first = client.get("/api/v1/cron/reminders", headers=cron_headers)

        assert first.status_code == 200
        body = first.json()
        assert body["success"] is True
        assert (body["total"], body["sent"], body["failed"]) == (2, 2, 0)

        second = client.post("/api/v1/cron/reminders", headers=cron_headers)

        assert second.status_code == 200
        body = second.json()
        assert (body["total"], body["sent"], body["skipped"]) == (2, 0, 2)

    def test_nothing_tomorrow(self, client, cron_headers):
        body = client.get("/api/v1/cron/reminders", headers=cron_headers).json()

        assert (body["total"], body["sent"], body["failed"]) == (0, 0, 0)

    def test_delivery_failures_still_return_200(self, client, tomorrow_bookings, cron_headers):
        broken = Mock()
        broken.send_email.side_effect = NotificationException("provider down")
        app.dependency_overrides[get_email_transport] = lambda: broken

        response = client.get("/api/v1/cron/reminders", headers=cron_headers)

        assert response.status_code == 200
        assert (response.json()["sent"], response.json()["failed"]) == (0, 2)

        # Failed attempts are retried on the next run.
        del app.dependency_overrides[get_email_transport]
        retry = client.get("/api/v1/cron/reminders", headers=cron_headers).json()
        assert (retry["sent"], retry["skipped"]) == (2, 0)
