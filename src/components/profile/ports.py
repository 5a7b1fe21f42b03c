"""
Profile component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from pydantic import BaseModel

    from src.domain.collections import CollectionType
    from src.domain.entities import Profile, User


class UserRepoPort(Protocol):
    def get_by_id(self, user_id: UUID) -> User | None: ...
    def get_by_username(self, username: str) -> User | None: ...
    def save(self, user: User) -> User: ...


class ProfileRepoPort(Protocol):
    def get(self, user_id: UUID) -> Profile | None: ...
    def save(self, profile: Profile) -> Profile: ...


class CollectionReaderPort(Protocol):
    def list(self, user_id: UUID, collection: CollectionType) -> list[BaseModel]: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
