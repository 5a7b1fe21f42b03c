"""
Public component - Port interfaces.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from pydantic import BaseModel

    from src.domain.collections import CollectionType
    from src.domain.entities import Profile, ProfileStar, User


class UserRepoPort(Protocol):
    def get_by_username(self, username: str) -> User | None: ...
    def increment_counter(self, user_id: UUID, counter: str) -> None: ...
    def search_public(
        self, query: str = "", limit: int = 20, offset: int = 0
    ) -> tuple[list[User], int]: ...


class ProfileRepoPort(Protocol):
    def get(self, user_id: UUID) -> Profile | None: ...


class CollectionReaderPort(Protocol):
    def list(self, user_id: UUID, collection: CollectionType) -> list[BaseModel]: ...


class StarRepoPort(Protocol):
    def add(self, star: ProfileStar) -> bool:
        """False when this visitor already starred the profile."""
        ...

    def count(self, user_id: UUID) -> int: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
