"""
Public component - Data models.

Read-only views of profiles for anonymous visitors, plus stars and clicks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pydantic import BaseModel

    from src.domain.collections import CollectionType
    from src.domain.entities import Profile, User


@dataclass(frozen=True)
class PublicValidationError:
    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class PublicProfileInput:
    username: str
    count_view: bool = True


@dataclass(frozen=True)
class StarInput:
    username: str
    visitor_ip: str


@dataclass(frozen=True)
class ClickInput:
    username: str


@dataclass(frozen=True)
class SearchInput:
    query: str = ""
    page: int = 1
    limit: int = 20


# --- Output Models ---


@dataclass(frozen=True)
class PublicProfileOutput:
    """A profile as visitors see it: hidden sections are left out."""

    user: User | None
    profile: Profile | None
    collections: dict[CollectionType, list[BaseModel]]
    star_count: int
    errors: tuple[PublicValidationError, ...]
    success: bool

    @property
    def message(self) -> str | None:
        return self.errors[0].message if self.errors else None


@dataclass(frozen=True)
class StarOutput:
    star_count: int
    errors: tuple[PublicValidationError, ...]
    success: bool

    @property
    def error_code(self) -> str | None:
        return self.errors[0].code if self.errors else None

    @property
    def message(self) -> str | None:
        return self.errors[0].message if self.errors else None


@dataclass(frozen=True)
class ClickOutput:
    errors: tuple[PublicValidationError, ...]
    success: bool


@dataclass(frozen=True)
class ProfileSummary:
    user: User
    profile: Profile | None
    star_count: int


@dataclass(frozen=True)
class SearchOutput:
    results: tuple[ProfileSummary, ...]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0
