# backend/tests/conftest.py
"""
Pytest configuration.

Environment is set BEFORE any studiobook import so Settings and the
module-level engine pick up test values. Every test gets its own
file-backed SQLite database built from the ORM metadata; file-backed so
that concurrent sessions in the race tests share one database.
"""

import os
import sys
import tempfile

# CRITICAL: Set testing mode BEFORE any studiobook imports!
os.environ["IS_TESTING"] = "true"
os.environ["ENVIRONMENT"] = "test"
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["EMAIL_PROVIDER"] = "console"
os.environ["DATABASE_URL"] = "sqlite:///" + os.path.join(tempfile.gettempdir(), "studiobook_test.db")
os.environ["BUSINESS_TIMEZONE"] = "Africa/Lagos"
os.environ["BUSINESS_OPEN_TIME"] = "09:00"
os.environ["BUSINESS_CLOSE_TIME"] = "17:00"
os.environ["SLOT_INTERVAL_MINUTES"] = "60"
os.environ["CLOSED_WEEKDAYS"] = ""
os.environ["AUTO_CONFIRM_BOOKINGS"] = "false"

# CRITICAL: Mock Resend API globally to prevent real emails in ANY test
import unittest.mock

global_resend_mock = unittest.mock.patch("resend.Emails.send")
mocked_send = global_resend_mock.start()
mocked_send.return_value = {"id": "test-email-id"}

# Add the backend directory to Python path so imports work
backend_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from datetime import date, timedelta
from typing import Dict

from fastapi.testclient import TestClient
import pytest
from sqlalchemy.orm import Session, sessionmaker

from studiobook.api.dependencies.database import get_db
from studiobook.core.enums import RoleName
from studiobook.core.timezone_utils import business_today
from studiobook.database import Base, build_engine
from studiobook.main import fastapi_app as app
from studiobook.models.service import Service
from studiobook.models.staff import Staff
from studiobook.schemas.identity import CurrentUser
from tests.utils.factories import auth_headers_for, create_service, create_staff

# ============================================================================
# Database
# ============================================================================


@pytest.fixture
def db_engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'studiobook.db'}")
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(
        autocommit=False, autoflush=False, bind=db_engine, expire_on_commit=False
    )


@pytest.fixture
def db(session_factory) -> Session:
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def client(session_factory):
    """TestClient whose requests each get a fresh session on the test database."""

    def override_get_db():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ============================================================================
# Catalog
# ============================================================================


@pytest.fixture
def service(db) -> Service:
    return create_service(db)


@pytest.fixture
def stylist(db, service) -> Staff:
    return create_staff(db, "Amaka Obi", services=[service])


@pytest.fixture
def booking_day() -> date:
    """A date a week out, so no grid time has elapsed yet."""
    return business_today() + timedelta(days=7)


# ============================================================================
# Identities
# ============================================================================


@pytest.fixture
def customer_user() -> CurrentUser:
    return CurrentUser(id="cust-001", email="ada@example.com", role=RoleName.CUSTOMER, name="Ada")


@pytest.fixture
def other_customer() -> CurrentUser:
    return CurrentUser(id="cust-002", email="bola@example.com", role=RoleName.CUSTOMER, name="Bola")


@pytest.fixture
def admin_user() -> CurrentUser:
    return CurrentUser(id="admin-001", email="owner@studio.test", role=RoleName.ADMIN, name="Owner")


@pytest.fixture
def customer_headers(customer_user) -> Dict[str, str]:
    return auth_headers_for(customer_user)


@pytest.fixture
def other_customer_headers(other_customer) -> Dict[str, str]:
    return auth_headers_for(other_customer)


@pytest.fixture
def admin_headers(admin_user) -> Dict[str, str]:
    return auth_headers_for(admin_user)


@pytest.fixture
def cron_headers() -> Dict[str, str]:
    return {"Authorization": "Bearer test-cron-secret"}
