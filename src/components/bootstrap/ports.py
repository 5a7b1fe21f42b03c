"""Bootstrap component port definitions.

Protocol interfaces for external dependencies.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from src.domain.entities import Admin, AdminActivity


class AdminRepoPort(Protocol):
    """Repository for admin persistence."""

    def count(self) -> int:
        """Number of admin accounts of any role."""
        ...

    def save(self, admin: Admin) -> Admin:
        """Persist an admin to storage."""
        ...


class ActivityRepoPort(Protocol):
    def save(self, activity: AdminActivity) -> AdminActivity:
        ...


class AuthAdapterPort(Protocol):
    """Authentication operations adapter."""

    def hash_password(self, password: str) -> str:
        """Hash a plaintext password for storage."""
        ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
