import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from django.conf import settings
from jose import JWTError, jwt

from utils.errors import Unauthorized

logger = logging.getLogger(__name__)


def create_access_token(user, expires_delta: timedelta | None = None) -> str:
    """Issue a signed token carrying the user's id, email and global role.

    Args:
        user: the authenticated User
        expires_delta: optional custom lifetime, defaults to JWT_EXPIRE_DAYS
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.JWT_EXPIRE_DAYS))
    claims = {
        "id": user.pk,
        "email": user.email,
        "role": user.role,
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Dict[str, Any]:
    """
    Decode and verify a token. Signature and expiry are checked by jose.
    Any failure raises Unauthorized; the reason only goes to the log.
    """
    if not token:
        raise Unauthorized()
    try:
        claims = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError as e:
        logger.info("Rejected token: %s", e)
        raise Unauthorized()

    if not isinstance(claims.get("id"), int):
        logger.info("Rejected token without a usable id claim")
        raise Unauthorized()
    return claims
