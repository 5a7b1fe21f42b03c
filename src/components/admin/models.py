"""
Admin component - Data models.

Admin panel inputs and outputs: login, dashboard, user management, admin
accounts and the activity log.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any
from uuid import UUID

if TYPE_CHECKING:
    from pydantic import BaseModel

    from src.domain.collections import CollectionType
    from src.domain.entities import Admin, AdminActivity, AdminRole, Profile, User

# --- Activity Actions ---

ACTION_LOGIN = "login"
ACTION_LOGOUT = "logout"
ACTION_VIEW_DASHBOARD = "view_dashboard"
ACTION_VIEW_USERS = "view_users"
ACTION_VIEW_USER_DETAILS = "view_user_details"
ACTION_ACTIVATE_USER = "activate_user"
ACTION_DEACTIVATE_USER = "deactivate_user"
ACTION_CREATE_ADMIN = "create_admin"
ACTION_SUPER_ADMIN_CREATED = "SUPER_ADMIN_CREATED"

# --- Validation Errors ---


@dataclass(frozen=True)
class AdminValidationError:
    code: str
    message: str
    field: str | None = None


# --- Input Models ---


@dataclass(frozen=True)
class AdminLoginInput:
    email: str
    password: str
    ip_address: str | None = None


@dataclass(frozen=True)
class ListUsersInput:
    page: int = 1
    limit: int = 20
    search: str = ""
    status: str | None = None


@dataclass(frozen=True)
class UserDetailsInput:
    user_id: UUID


@dataclass(frozen=True)
class SetUserStatusInput:
    admin_id: UUID
    user_id: UUID
    is_active: bool
    ip_address: str | None = None


@dataclass(frozen=True)
class CreateAdminInput:
    actor: Admin
    email: str
    username: str
    name: str
    password: str
    role: AdminRole = "admin"
    ip_address: str | None = None


@dataclass(frozen=True)
class ListActivityInput:
    page: int = 1
    limit: int = 20
    action: str | None = None
    admin_id: UUID | None = None


@dataclass(frozen=True)
class LogActivityInput:
    admin_id: UUID | None
    action: str
    target_user_id: str | None = None
    ip_address: str | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class CleanupInput:
    keep: int = 10


# --- Output Models ---


@dataclass(frozen=True)
class AdminAuthOutput:
    admin: Admin | None
    token: str | None
    errors: tuple[AdminValidationError, ...]
    success: bool

    @property
    def message(self) -> str | None:
        return self.errors[0].message if self.errors else None


@dataclass(frozen=True)
class DashboardOutput:
    total_users: int
    active_users: int
    inactive_users: int
    total_profiles: int
    recent_activities: tuple[AdminActivity, ...]


@dataclass(frozen=True)
class UserPageOutput:
    users: tuple[User, ...]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0


@dataclass(frozen=True)
class UserDetailsOutput:
    user: User | None
    profile: Profile | None
    collections: dict[CollectionType, list[BaseModel]]
    star_count: int
    errors: tuple[AdminValidationError, ...]
    success: bool


@dataclass(frozen=True)
class UserStatusOutput:
    user: User | None
    errors: tuple[AdminValidationError, ...]
    success: bool

    @property
    def message(self) -> str | None:
        return self.errors[0].message if self.errors else None


@dataclass(frozen=True)
class AdminOutput:
    admin: Admin | None
    errors: tuple[AdminValidationError, ...]
    success: bool

    @property
    def error_code(self) -> str | None:
        return self.errors[0].code if self.errors else None

    @property
    def message(self) -> str | None:
        return self.errors[0].message if self.errors else None

    @classmethod
    def failed(cls, errors: list[AdminValidationError]) -> AdminOutput:
        return cls(admin=None, errors=tuple(errors), success=False)


@dataclass(frozen=True)
class ActivityPageOutput:
    activities: tuple[AdminActivity, ...]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0


@dataclass(frozen=True)
class CleanupOutput:
    before: int
    after: int
    deleted: int
    kept: int
