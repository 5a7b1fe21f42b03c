from datetime import timedelta
from typing import Any

from src.api.auth_utils import (
    create_access_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)


class JWTAuthAdapter:
    """Auth adapter that uses JWT tokens and passlib for password hashing."""

    def hash_password(self, password: str) -> str:
        return get_password_hash(password)

    def verify_password(self, plain: str, hashed: str) -> bool:
        return verify_password(plain, hashed)

    def create_token(self, subject: Any, ttl_minutes: int, **claims: Any) -> str:
        return create_access_token(
            {"sub": str(subject), **claims}, timedelta(minutes=ttl_minutes)
        )

    def validate_token(self, token: str) -> dict[str, Any] | None:
        return decode_access_token(token)
