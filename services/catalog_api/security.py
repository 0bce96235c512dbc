"""Password hashing and JWT helpers."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional

import jwt
from passlib.hash import pbkdf2_sha256

from catalog import config
from catalog_api.errors import Unauthenticated

logger = logging.getLogger(__name__)


def hash_password(password: str) -> str:
    return pbkdf2_sha256.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return pbkdf2_sha256.verify(password, password_hash)
    except ValueError:
        # Malformed stored hash
        return False


def create_access_token(user_id: str, role: str, now: Optional[datetime] = None) -> str:
    """Sign a token identifying the user, valid for the configured number of days."""

    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=config.auth.expire_days),
    }
    return jwt.encode(payload, config.auth.secret, algorithm=config.auth.algorithm)


def decode_access_token(token: str) -> Mapping[str, Any]:
    """Verify signature and expiry, returning the payload."""

    try:
        return jwt.decode(token, config.auth.secret, algorithms=[config.auth.algorithm])
    except jwt.ExpiredSignatureError as exc:
        logger.warning(f"JWT validation failed: Token expired. Detail: {exc}")
        raise Unauthenticated("Not authorized, token failed") from exc
    except jwt.InvalidTokenError as exc:
        logger.warning(f"JWT validation failed: Invalid token. Reason: {exc}")
        raise Unauthenticated("Not authorized, token failed") from exc
