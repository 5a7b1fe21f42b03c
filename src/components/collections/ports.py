"""
Collections component - Port interfaces.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from pydantic import BaseModel

    from src.domain.collections import CollectionType


class CollectionRepoPort(Protocol):
    """Ordered storage for one user's collections."""

    def replace_all(
        self, user_id: UUID, collection: CollectionType, items: list[BaseModel]
    ) -> list[BaseModel]:
        """Replace the stored array atomically; position is the array index."""
        ...

    def list(self, user_id: UUID, collection: CollectionType) -> list[BaseModel]:
        """Items ordered by position."""
        ...

    def list_ids(self, user_id: UUID, collection: CollectionType) -> set[str]:
        ...
