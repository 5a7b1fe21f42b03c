from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import Profile, User

from .models import GoogleIdentity


class UserRepoPort(Protocol):
    def get_by_email(self, email: str) -> User | None: ...
    def get_by_username(self, username: str) -> User | None: ...
    def get_by_google_id(self, google_id: str) -> User | None: ...
    def get_by_id(self, user_id: UUID) -> User | None: ...
    def save(self, user: User) -> User: ...


class ProfileRepoPort(Protocol):
    def get(self, user_id: UUID) -> Profile | None: ...
    def save(self, profile: Profile) -> Profile: ...


class AuthAdapterPort(Protocol):
    def verify_password(self, plain: str, hashed: str) -> bool: ...
    def hash_password(self, plain: str) -> str: ...
    def create_token(self, subject: object, ttl_minutes: int, **claims: object) -> str: ...


class GoogleVerifierPort(Protocol):
    """Verifies a Google id token for this application's client id."""

    def verify(self, token: str) -> GoogleIdentity | None:
        """Return the token's identity, or None when it is not valid."""
        ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
