"""
Access-token handling.

Tokens are HS256 JWTs issued by the storefront's identity service. The
engine only verifies them and reads ``sub``, ``email``, ``role`` and an
optional ``name``.
"""

from datetime import datetime, timedelta, timezone
import logging
from typing import Any, Dict, Optional, cast

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from jwt import PyJWTError
from pydantic import ValidationError

from .core.config import settings
from .core.enums import RoleName
from .schemas.identity import CurrentUser

logger = logging.getLogger(__name__)

oauth2_scheme_optional = OAuth2PasswordBearer(tokenUrl="auth/login", auto_error=False)


def _secret_value(secret_obj: Any) -> str:
    getter = getattr(secret_obj, "get_secret_value", None)
    if callable(getter):
        return cast(str, getter())
    return cast(str, secret_obj)


def decode_access_token(token: str) -> Dict[str, Any]:
    payload_raw = jwt.decode(
        token,
        _secret_value(settings.secret_key),
        algorithms=[settings.algorithm],
        options={"verify_aud": False},
    )
    return cast(Dict[str, Any], payload_raw)


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Claims to encode (``sub``, ``email``, ``role``, optional ``name``)
        expires_delta: Optional expiration time delta
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire})
    encoded_jwt = cast(
        str,
        jwt.encode(to_encode, _secret_value(settings.secret_key), algorithm=settings.algorithm),
    )
    logger.info(f"Created access token for user: {data.get('sub')}")
    return encoded_jwt


def user_from_claims(payload: Dict[str, Any]) -> CurrentUser:
    role_value = str(payload.get("role") or RoleName.CUSTOMER.value).lower()
    return CurrentUser(
        id=str(payload["sub"]),
        email=str(payload["email"]),
        role=RoleName(role_value),
        name=payload.get("name"),
    )


async def get_current_user(token: Optional[str] = Depends(oauth2_scheme_optional)) -> CurrentUser:
    """
    Dependency resolving the bearer token to ``CurrentUser``.

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Not authenticated", "code": "UNAUTHORIZED"},
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return user_from_claims(decode_access_token(token))
    except (PyJWTError, KeyError, ValueError, ValidationError) as e:
        logger.info(f"Rejected access token: {type(e).__name__}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={"message": "Could not validate credentials", "code": "UNAUTHORIZED"},
            headers={"WWW-Authenticate": "Bearer"},
        )
