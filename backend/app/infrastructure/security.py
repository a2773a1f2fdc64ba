"""Security Primitives — password hashing and signed access tokens.

Invariants:
    - Plain passwords never leave this module; only bcrypt hashes are stored
    - Tokens carry the user id in `sub` and expire after access_token_expire_minutes
    - decode_access_token returns None for any invalid, expired or tampered token

Design Decisions:
    - passlib CryptContext with bcrypt: hash upgrades handled by `deprecated="auto"`
    - python-jose HS256 JWT: stateless sessions, logout only clears the client cookie
"""

import logging
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(
    subject: str, role: str, expires_minutes: int | None = None,
) -> tuple[str, datetime]:
    """Return (token, expiry) for the given user id."""
    settings = get_settings()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=expires_minutes or settings.access_token_expire_minutes,
    )
    claims = {"sub": subject, "role": role, "exp": expire}
    token = jwt.encode(
        claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm,
    )
    return token, expire


def decode_access_token(token: str) -> dict | None:
    settings = get_settings()
    try:
        payload = jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm],
        )
    except JWTError as e:
        logger.info(f"Rejected access token: {e}")
        return None
    if not payload.get("sub"):
        return None
    return payload
