import os
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import jwt
from passlib.context import CryptContext

SECRET_KEY_ENV = "EINFO_SECRET_KEY"
DEV_SECRET_KEY = "dev-secret-unsafe"
ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(minutes=15)

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def secret_key() -> str:
    # Read per call so a key exported after import still applies
    return os.environ.get(SECRET_KEY_ENV) or DEV_SECRET_KEY


def verify_password(plain_password: str, hashed_password: str) -> bool:
    result: bool = pwd_context.verify(plain_password, hashed_password)
    return result


def get_password_hash(password: str) -> str:
    result: str = pwd_context.hash(password)
    return result


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
) -> str:
    """
    Sign a JWT carrying `data` plus `iat` and `exp`.

    Args:
        data: Claims to encode; user and admin tokens put the account id in
            `sub` and the audience in `type`.
        expires_delta: Lifetime of the token, 15 minutes when omitted.
        now_utc: Issue time, for deterministic tests.
    """
    issued = now_utc if now_utc is not None else datetime.now(UTC)
    claims = {**data, "iat": issued, "exp": issued + (expires_delta or DEFAULT_TTL)}
    encoded: str = jwt.encode(claims, secret_key(), algorithm=ALGORITHM)
    return encoded


def decode_access_token(token: str) -> dict[str, Any] | None:
    """Verified claims, or None for a bad signature, expiry or missing subject."""
    try:
        payload = jwt.decode(
            token,
            secret_key(),
            algorithms=[ALGORITHM],
            options={"require_exp": True, "require_sub": True},
        )
    except jwt.JWTError:
        return None
    return cast(dict[str, Any], payload)
