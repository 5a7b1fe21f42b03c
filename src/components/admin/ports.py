"""
Admin component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from pydantic import BaseModel

    from src.domain.collections import CollectionType
    from src.domain.entities import Admin, AdminActivity, Profile, User


class AdminRepoPort(Protocol):
    def save(self, admin: Admin) -> Admin: ...
    def get_by_id(self, admin_id: UUID) -> Admin | None: ...
    def get_by_email(self, email: str) -> Admin | None: ...
    def get_by_username(self, username: str) -> Admin | None: ...
    def count(self) -> int: ...


class ActivityRepoPort(Protocol):
    def save(self, activity: AdminActivity) -> AdminActivity: ...

    def list(
        self,
        limit: int = 20,
        offset: int = 0,
        action: str | None = None,
        admin_id: UUID | None = None,
    ) -> tuple[list[AdminActivity], int]: ...

    def count(self) -> int: ...

    def delete_all_except_recent(self, keep: int) -> int:
        """Delete every entry except the `keep` most recent; returns the number deleted."""
        ...


class UserRepoPort(Protocol):
    def get_by_id(self, user_id: UUID) -> User | None: ...
    def save(self, user: User) -> User: ...
    def count(self, status: str | None = None) -> int: ...

    def search(
        self,
        query: str = "",
        status: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[User], int]: ...


class ProfileRepoPort(Protocol):
    def get(self, user_id: UUID) -> Profile | None: ...
    def count(self) -> int: ...


class CollectionReaderPort(Protocol):
    def list(self, user_id: UUID, collection: CollectionType) -> list[BaseModel]: ...


class StarCounterPort(Protocol):
    def count(self, user_id: UUID) -> int: ...


class AuthAdapterPort(Protocol):
    def verify_password(self, plain: str, hashed: str) -> bool: ...
    def hash_password(self, plain: str) -> str: ...
    def create_token(self, subject: object, ttl_minutes: int, **claims: object) -> str: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
