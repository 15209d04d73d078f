"""
Security utilities for authentication and authorization.

Provides password hashing (bcrypt) and JWT session token management.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from jwt.exceptions import InvalidTokenError
from passlib.context import CryptContext

from app.core.config import settings

# Password hashing context using bcrypt
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Check a password against its stored bcrypt hash. Missing or unreadable hashes never match."""
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """bcrypt hash at the configured cost (BCRYPT_ROUNDS)."""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed session token.

    Args:
        data: The claims to encode, {"id", "role"} plus "isApproved" for companies
        expires_delta: Optional custom expiration time

    Returns:
        The encoded JWT token string
    """
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    claims = {**data, "exp": datetime.now(timezone.utc) + lifetime}
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: Optional[str]) -> Optional[dict]:
    """
    Decode and validate a session token.

    Never raises: a missing, malformed, tampered or expired token yields None
    so callers can map every failure to the same HTTP decision.

    Args:
        token: The JWT token string to decode

    Returns:
        The decoded claims, or None if invalid
    """
    if not token or not isinstance(token, str):
        return None
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
        )
    except InvalidTokenError:
        return None

    if not isinstance(payload, dict) or not payload.get("id") or not payload.get("role"):
        return None
    return payload
