"""
Admin component - Admin panel operations.

Shell Layer - handles I/O and error conversion.

Every admin action that changes or reads user data is recorded in the
activity log; the log is pruned to the configured retention after each
entry.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from src.domain.collections import COLLECTION_TYPES
from src.domain.entities import Admin, AdminActivity
from src.rules.models import AdminRules, AuthRules

from ._impl import clamp_page, validate_new_admin
from .models import (
    ACTION_ACTIVATE_USER,
    ACTION_CREATE_ADMIN,
    ACTION_DEACTIVATE_USER,
    ACTION_LOGIN,
    ActivityPageOutput,
    AdminAuthOutput,
    AdminLoginInput,
    AdminOutput,
    AdminValidationError,
    CleanupInput,
    CleanupOutput,
    CreateAdminInput,
    DashboardOutput,
    ListActivityInput,
    ListUsersInput,
    LogActivityInput,
    SetUserStatusInput,
    UserDetailsInput,
    UserDetailsOutput,
    UserPageOutput,
    UserStatusOutput,
)
from .ports import (
    ActivityRepoPort,
    AdminRepoPort,
    AuthAdapterPort,
    CollectionReaderPort,
    ProfileRepoPort,
    StarCounterPort,
    TimePort,
    UserRepoPort,
)

logger = logging.getLogger(__name__)

_INVALID_CREDENTIALS = AdminValidationError("invalid_credentials", "Invalid credentials")


# --- Activity Log ---


def run_log_activity(
    inp: LogActivityInput,
    activity_repo: ActivityRepoPort,
    time: TimePort,
    retention: int | None = None,
) -> AdminActivity:
    """Record an admin action, then prune the log to `retention` entries."""
    activity = AdminActivity(
        id=uuid4(),
        admin_id=inp.admin_id,
        action=inp.action,
        target_user_id=inp.target_user_id,
        ip_address=inp.ip_address,
        details=dict(inp.details),
        created_at=time.now_utc(),
    )
    activity_repo.save(activity)

    if retention is not None:
        run_cleanup_activities(CleanupInput(keep=retention), activity_repo)
    return activity


def run_cleanup_activities(inp: CleanupInput, activity_repo: ActivityRepoPort) -> CleanupOutput:
    """Keep only the `inp.keep` most recent activity entries."""
    keep = max(inp.keep, 0)
    before = activity_repo.count()
    if before <= keep:
        return CleanupOutput(before=before, after=before, deleted=0, kept=keep)

    deleted = activity_repo.delete_all_except_recent(keep)
    after = activity_repo.count()
    logger.info(
        "Admin activity cleanup completed: before=%d kept=%d deleted=%d",
        before,
        keep,
        deleted,
    )
    return CleanupOutput(before=before, after=after, deleted=deleted, kept=keep)


def run_list_activities(
    inp: ListActivityInput,
    activity_repo: ActivityRepoPort,
    rules: AdminRules,
) -> ActivityPageOutput:
    page, limit, offset = clamp_page(inp.page, inp.limit, rules.page_size_max)
    activities, total = activity_repo.list(
        limit=limit, offset=offset, action=inp.action or None, admin_id=inp.admin_id
    )
    return ActivityPageOutput(activities=tuple(activities), total=total, page=page, limit=limit)


# --- Login ---


def run_login(
    inp: AdminLoginInput,
    admin_repo: AdminRepoPort,
    activity_repo: ActivityRepoPort,
    auth_adapter: AuthAdapterPort,
    auth_rules: AuthRules,
    admin_rules: AdminRules,
    time: TimePort,
) -> AdminAuthOutput:
    if not inp.email or not inp.password:
        return AdminAuthOutput(
            admin=None,
            token=None,
            errors=(
                AdminValidationError(
                    "credentials_required", "Email and password are required"
                ),
            ),
            success=False,
        )

    admin = admin_repo.get_by_email(inp.email.strip().lower())
    if admin is None or not admin.is_active:
        return AdminAuthOutput(admin=None, token=None, errors=(_INVALID_CREDENTIALS,), success=False)
    if not auth_adapter.verify_password(inp.password, admin.password_hash):
        return AdminAuthOutput(admin=None, token=None, errors=(_INVALID_CREDENTIALS,), success=False)

    admin.last_login = time.now_utc()
    admin_repo.save(admin)
    run_log_activity(
        LogActivityInput(admin_id=admin.id, action=ACTION_LOGIN, ip_address=inp.ip_address),
        activity_repo,
        time,
        admin_rules.activity_log_retention,
    )

    token = auth_adapter.create_token(
        admin.id,
        auth_rules.tokens.admin_ttl_minutes,
        type="admin",
        role=admin.role,
        email=admin.email,
    )
    logger.info("Admin %s logged in", admin.username)
    return AdminAuthOutput(admin=admin, token=token, errors=(), success=True)


# --- Dashboard & Users ---


def run_dashboard(
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    activity_repo: ActivityRepoPort,
) -> DashboardOutput:
    total = user_repo.count()
    active = user_repo.count(status="active")
    recent, _ = activity_repo.list(limit=10, offset=0)
    return DashboardOutput(
        total_users=total,
        active_users=active,
        inactive_users=total - active,
        total_profiles=profile_repo.count(),
        recent_activities=tuple(recent),
    )


def run_list_users(
    inp: ListUsersInput,
    user_repo: UserRepoPort,
    rules: AdminRules,
) -> UserPageOutput:
    page, limit, offset = clamp_page(inp.page, inp.limit, rules.page_size_max)
    status = inp.status if inp.status in ("active", "disabled") else None
    users, total = user_repo.search(
        query=(inp.search or "").strip(), status=status, limit=limit, offset=offset
    )
    return UserPageOutput(users=tuple(users), total=total, page=page, limit=limit)


def run_user_details(
    inp: UserDetailsInput,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    collection_repo: CollectionReaderPort,
    star_repo: StarCounterPort,
) -> UserDetailsOutput:
    user = user_repo.get_by_id(inp.user_id)
    if user is None:
        return UserDetailsOutput(
            user=None,
            profile=None,
            collections={},
            star_count=0,
            errors=(AdminValidationError("user_not_found", "User not found"),),
            success=False,
        )

    return UserDetailsOutput(
        user=user,
        profile=profile_repo.get(user.id),
        collections={c: collection_repo.list(user.id, c) for c in COLLECTION_TYPES},
        star_count=star_repo.count(user.id),
        errors=(),
        success=True,
    )


def run_set_user_status(
    inp: SetUserStatusInput,
    user_repo: UserRepoPort,
    activity_repo: ActivityRepoPort,
    rules: AdminRules,
    time: TimePort,
) -> UserStatusOutput:
    user = user_repo.get_by_id(inp.user_id)
    if user is None:
        return UserStatusOutput(
            user=None,
            errors=(AdminValidationError("user_not_found", "User not found"),),
            success=False,
        )

    previous = user.status
    user.status = "active" if inp.is_active else "disabled"
    user.updated_at = time.now_utc()
    user_repo.save(user)

    run_log_activity(
        LogActivityInput(
            admin_id=inp.admin_id,
            action=ACTION_ACTIVATE_USER if inp.is_active else ACTION_DEACTIVATE_USER,
            target_user_id=str(user.id),
            ip_address=inp.ip_address,
            details={"previous_status": previous, "new_status": user.status},
        ),
        activity_repo,
        time,
        rules.activity_log_retention,
    )
    logger.info("User %s set to %s by admin %s", user.id, user.status, inp.admin_id)
    return UserStatusOutput(user=user, errors=(), success=True)


# --- Admin Accounts ---


def run_create_admin(
    inp: CreateAdminInput,
    admin_repo: AdminRepoPort,
    activity_repo: ActivityRepoPort,
    auth_adapter: AuthAdapterPort,
    auth_rules: AuthRules,
    admin_rules: AdminRules,
    time: TimePort,
) -> AdminOutput:
    """Create an admin account. Only super admins may do this."""
    if inp.actor.role != "super_admin":
        return AdminOutput.failed(
            [AdminValidationError("forbidden", "Only super admins can create new admins")]
        )

    errors = validate_new_admin(
        inp.email, inp.username, inp.name, inp.password, auth_rules.password.admin_min_length
    )
    if errors:
        return AdminOutput.failed(errors)

    email = inp.email.strip().lower()
    username = inp.username.strip().lower()
    if admin_repo.get_by_email(email) or admin_repo.get_by_username(username):
        return AdminOutput.failed(
            [
                AdminValidationError(
                    "admin_exists", "Admin with this email or username already exists"
                )
            ]
        )

    admin = Admin(
        id=uuid4(),
        email=email,
        username=username,
        name=inp.name.strip(),
        password_hash=auth_adapter.hash_password(inp.password),
        role=inp.role,
        is_active=True,
        created_by_admin_id=inp.actor.id,
        created_at=time.now_utc(),
    )
    admin_repo.save(admin)

    run_log_activity(
        LogActivityInput(
            admin_id=inp.actor.id,
            action=ACTION_CREATE_ADMIN,
            ip_address=inp.ip_address,
            details={
                "new_admin_id": str(admin.id),
                "new_admin_email": admin.email,
                "new_admin_role": admin.role,
            },
        ),
        activity_repo,
        time,
        admin_rules.activity_log_retention,
    )
    logger.info("Admin %s created by %s", admin.username, inp.actor.username)
    return AdminOutput(admin=admin, errors=(), success=True)
