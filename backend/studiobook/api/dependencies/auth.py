# backend/studiobook/api/dependencies/auth.py
"""
Authentication and authorization dependencies.

Customer and admin endpoints use bearer JWTs; the reminder trigger uses
a shared secret compared in constant time.
"""

import hmac
import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, status

from ...auth import get_current_user
from ...core.config import settings
from ...core.exceptions import UnauthorizedException
from ...schemas.identity import CurrentUser

logger = logging.getLogger(__name__)


async def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Allow only admin identities."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail={"message": "Admin access required", "code": "FORBIDDEN"},
        )
    return current_user


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return None
    return token.strip()


async def verify_cron_secret(authorization: Optional[str] = Header(default=None)) -> None:
    """
    Check ``Authorization: Bearer <cron_secret>``.

    An unset secret rejects every call.
    """
    expected = settings.cron_secret.get_secret_value()
    supplied = _bearer_token(authorization)
    if not expected or supplied is None or not hmac.compare_digest(
        supplied.encode("utf-8"), expected.encode("utf-8")
    ):
        logger.warning("Rejected reminder trigger with missing or incorrect secret")
        raise UnauthorizedException("Missing or incorrect cron secret")


__all__ = ["get_current_user", "require_admin", "verify_cron_secret"]
