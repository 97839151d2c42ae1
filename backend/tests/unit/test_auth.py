# backend/tests/unit/test_auth.py
from datetime import timedelta

import jwt
import pytest

from studiobook.auth import create_access_token, decode_access_token, user_from_claims
from studiobook.core.enums import RoleName


def test_round_trip_claims():
    token = create_access_token(
        {"sub": "cust-001", "email": "ada@example.com", "role": "customer", "name": "Ada"}
    )
    user = user_from_claims(decode_access_token(token))

    assert user.id == "cust-001"
    assert user.role is RoleName.CUSTOMER
    assert not user.is_admin
    assert user.display_name == "Ada"


def test_role_defaults_to_customer():
    user = user_from_claims({"sub": "cust-9", "email": "zee@example.com"})

    assert user.role is RoleName.CUSTOMER
    assert user.display_name == "zee"


def test_admin_role_is_case_insensitive():
    assert user_from_claims({"sub": "a", "email": "o@s.t", "role": "ADMIN"}).is_admin


def test_expired_token_is_rejected():
    token = create_access_token(
        {"sub": "cust-001", "email": "ada@example.com"}, expires_delta=timedelta(seconds=-5)
    )

    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token)


def test_unknown_role_is_rejected():
    with pytest.raises(ValueError):
        user_from_claims({"sub": "x", "email": "x@y.z", "role": "superuser"})
