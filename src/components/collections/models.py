"""
Collections component - Data models.

Inputs and outputs for full-replace persistence of ordered profile
collections.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from uuid import UUID

if TYPE_CHECKING:
    from pydantic import BaseModel

    from src.domain.collections import CollectionType

# --- Validation Errors ---


@dataclass(frozen=True)
class CollectionValidationError:
    """Collection validation error."""

    code: str
    message: str
    field: str | None = None
    index: int | None = None


# --- Input Models ---


@dataclass(frozen=True)
class ReplaceCollectionInput:
    """The complete new state of one collection, in display order."""

    user_id: UUID
    collection: CollectionType
    items: tuple[dict[str, Any], ...]


@dataclass(frozen=True)
class ListCollectionInput:
    user_id: UUID
    collection: CollectionType


# --- Output Models ---


@dataclass(frozen=True)
class CollectionOutput:
    """Output from a collection operation."""

    collection: CollectionType
    items: tuple[BaseModel, ...]
    errors: tuple[CollectionValidationError, ...]
    success: bool

    @property
    def message(self) -> str | None:
        return self.errors[0].message if self.errors else None

    @classmethod
    def ok(cls, collection: CollectionType, items: list[BaseModel]) -> CollectionOutput:
        return cls(collection=collection, items=tuple(items), errors=(), success=True)

    @classmethod
    def failed(
        cls,
        collection: CollectionType,
        errors: list[CollectionValidationError],
    ) -> CollectionOutput:
        return cls(collection=collection, items=(), errors=tuple(errors), success=False)
