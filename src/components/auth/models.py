"""
Auth component - Data models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.entities import User

# --- Validation Errors ---


@dataclass(frozen=True)
class AuthValidationError:
    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class RegisterInput:
    email: str
    password: str
    name: str
    username: str


@dataclass(frozen=True)
class LoginInput:
    email: str
    password: str


@dataclass(frozen=True)
class GoogleLoginInput:
    google_token: str
    username: str | None = None


@dataclass(frozen=True)
class CheckUsernameInput:
    username: str


@dataclass(frozen=True)
class GoogleIdentity:
    """Claims read from a verified Google id token."""

    google_id: str
    email: str
    name: str
    avatar_url: str | None = None
    email_verified: bool = False


# --- Output Models ---


@dataclass(frozen=True)
class AuthOutput:
    user: User | None
    token: str | None
    errors: tuple[AuthValidationError, ...]
    success: bool
    created: bool = False

    @property
    def message(self) -> str | None:
        return self.errors[0].message if self.errors else None

    @property
    def error_code(self) -> str | None:
        return self.errors[0].code if self.errors else None

    @classmethod
    def ok(cls, user: User, token: str, created: bool = False) -> AuthOutput:
        return cls(user=user, token=token, errors=(), success=True, created=created)

    @classmethod
    def failed(cls, code: str, message: str, field: str | None = None) -> AuthOutput:
        return cls(
            user=None,
            token=None,
            errors=(AuthValidationError(code=code, message=message, field=field),),
            success=False,
        )


@dataclass(frozen=True)
class UsernameCheckOutput:
    username: str
    available: bool
    errors: tuple[AuthValidationError, ...]
    success: bool
