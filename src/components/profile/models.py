"""
Profile component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from pydantic import BaseModel

    from src.domain.collections import CollectionType
    from src.domain.entities import Profile, User

# --- Validation Errors ---


@dataclass(frozen=True)
class ProfileValidationError:
    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class GetProfileInput:
    user_id: UUID


@dataclass(frozen=True)
class UpdateBasicInput:
    """Profile basics; None leaves a field unchanged."""

    user_id: UUID
    name: str | None = None
    job_title: str | None = None
    bio: str | None = None
    website: str | None = None
    location: str | None = None
    profile_image_url: str | None = None
    resume_url: str | None = None
    skills: tuple[str, ...] | None = None


@dataclass(frozen=True)
class UpdateVisibilityInput:
    user_id: UUID
    settings: dict[str, bool] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdateAccountInput:
    user_id: UUID
    name: str | None = None
    username: str | None = None


@dataclass(frozen=True)
class UpdateInstantMessageInput:
    """Message shown to profile visitors; None leaves a part unchanged."""

    user_id: UUID
    subject: str | None = None
    body: str | None = None


# --- Output Models ---


@dataclass(frozen=True)
class ProfileOutput:
    """A user with their profile basics and every ordered collection."""

    user: User | None
    profile: Profile | None
    collections: dict[CollectionType, list[BaseModel]]
    errors: tuple[ProfileValidationError, ...]
    success: bool

    @property
    def message(self) -> str | None:
        return self.errors[0].message if self.errors else None

    @property
    def error_code(self) -> str | None:
        return self.errors[0].code if self.errors else None

    @classmethod
    def ok(
        cls,
        user: User,
        profile: Profile,
        collections: dict[CollectionType, list[BaseModel]] | None = None,
    ) -> ProfileOutput:
        return cls(
            user=user,
            profile=profile,
            collections=collections or {},
            errors=(),
            success=True,
        )

    @classmethod
    def failed(cls, errors: list[ProfileValidationError]) -> ProfileOutput:
        return cls(user=None, profile=None, collections={}, errors=tuple(errors), success=False)
