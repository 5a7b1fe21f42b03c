"""Bootstrap component data models.

Frozen dataclasses for inputs, outputs, and validation errors.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.entities import Admin


@dataclass(frozen=True)
class BootstrapInput:
    """Super admin details read from the environment; None means not set."""

    email: str | None = None
    username: str | None = None
    name: str | None = None
    password: str | None = None
    environment: str = "development"

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@dataclass(frozen=True)
class BootstrapValidationError:
    """Validation error details."""

    code: str
    message: str
    field: str


@dataclass(frozen=True)
class BootstrapOutput:
    """Result of bootstrap operation."""

    admin: Admin | None
    created: bool
    skipped_reason: str | None
    errors: tuple[BootstrapValidationError, ...]
    success: bool
    used_default_password: bool = False

    @classmethod
    def skipped(cls, reason: str) -> BootstrapOutput:
        """Create a skipped result."""
        return cls(
            admin=None,
            created=False,
            skipped_reason=reason,
            errors=(),
            success=True,
        )

    @classmethod
    def created_admin(cls, admin: Admin, used_default_password: bool) -> BootstrapOutput:
        """Create a success result with the new super admin."""
        return cls(
            admin=admin,
            created=True,
            skipped_reason=None,
            errors=(),
            success=True,
            used_default_password=used_default_password,
        )

    @classmethod
    def failed(cls, errors: tuple[BootstrapValidationError, ...]) -> BootstrapOutput:
        """Create a failure result."""
        return cls(
            admin=None,
            created=False,
            skipped_reason=None,
            errors=errors,
            success=False,
        )
