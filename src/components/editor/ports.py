"""
Editor component - Port interfaces.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pydantic import BaseModel

    from src.domain.collections import CollectionType

    from .models import GatewayResult


class PersistenceGatewayPort(Protocol):
    """Stores one collection by replacing the whole array."""

    def replace_all(self, items: Sequence[BaseModel]) -> GatewayResult:
        """Persist `items` as the new state, all or nothing."""
        ...


class ProfileSourcePort(Protocol):
    """Source of the server's collections and per-collection gateways."""

    def fetch_collections(self) -> dict[CollectionType, list[BaseModel]]:
        """Fetch every collection of the signed-in user."""
        ...

    def gateway(self, collection: CollectionType) -> PersistenceGatewayPort:
        """Gateway persisting a single collection."""
        ...


class ClockPort(Protocol):
    """Millisecond clock used for temporary ids."""

    def epoch_millis(self) -> int:
        ...
