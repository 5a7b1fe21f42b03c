"""Bootstrap component implementation.

Handles Day 0 system bootstrapping: creates the first super admin when the
system has no admin accounts yet.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from src.components.admin._impl import validate_new_admin
from src.components.admin.component import run_log_activity
from src.components.admin.models import ACTION_SUPER_ADMIN_CREATED, LogActivityInput
from src.domain.entities import Admin
from src.rules.models import AdminRules, AuthRules

from .models import BootstrapInput, BootstrapOutput, BootstrapValidationError
from .ports import ActivityRepoPort, AdminRepoPort, AuthAdapterPort, TimePort

logger = logging.getLogger(__name__)


def _validate_input(
    email: str,
    username: str,
    name: str,
    password: str,
    auth_rules: AuthRules,
) -> tuple[BootstrapValidationError, ...]:
    """Validate the resolved super admin details."""
    return tuple(
        BootstrapValidationError(code=e.code, message=e.message, field=e.field or "")
        for e in validate_new_admin(
            email, username, name, password, auth_rules.password.admin_min_length
        )
    )


def run_bootstrap(
    bootstrap_input: BootstrapInput,
    admin_repo: AdminRepoPort,
    activity_repo: ActivityRepoPort,
    auth_adapter: AuthAdapterPort,
    admin_rules: AdminRules,
    auth_rules: AuthRules,
    time: TimePort,
) -> BootstrapOutput:
    """Create the initial super admin.

    Args:
        bootstrap_input: Super admin details from the environment.
        admin_repo: Repository for admin accounts.
        activity_repo: Repository for the admin activity log.
        auth_adapter: Adapter for password hashing.
        admin_rules: Defaults for unset details.
        auth_rules: Password policy.
        time: Time provider for deterministic timestamps.

    Returns:
        BootstrapOutput with the result of the operation.
    """
    # 1. Only ever runs on an empty admins table
    if admin_repo.count() > 0:
        return BootstrapOutput.skipped("Admin users already exist")

    # 2. Production deployments must choose the password
    if bootstrap_input.is_production and not bootstrap_input.password:
        return BootstrapOutput.failed(
            (
                BootstrapValidationError(
                    code="MISSING_PASSWORD",
                    message="SUPER_ADMIN_PASSWORD must be set in production",
                    field="password",
                ),
            )
        )

    # 3. Fill in defaults and validate
    defaults = admin_rules.super_admin
    email = (bootstrap_input.email or defaults.default_email).strip().lower()
    username = (bootstrap_input.username or defaults.default_username).strip().lower()
    name = (bootstrap_input.name or defaults.default_name).strip()
    password = bootstrap_input.password or defaults.default_password

    validation_errors = _validate_input(email, username, name, password, auth_rules)
    if validation_errors:
        return BootstrapOutput.failed(validation_errors)

    # 4. Create the super admin
    super_admin = Admin(
        id=uuid4(),
        email=email,
        username=username,
        name=name,
        password_hash=auth_adapter.hash_password(password),
        role="super_admin",
        is_active=True,
        created_at=time.now_utc(),
    )
    admin_repo.save(super_admin)

    run_log_activity(
        LogActivityInput(
            admin_id=super_admin.id,
            action=ACTION_SUPER_ADMIN_CREATED,
            details={
                "message": "Initial super admin user created during setup",
                "created_by": "system",
            },
        ),
        activity_repo,  # type: ignore[arg-type]
        time,
    )
    logger.info("Super admin %s created", super_admin.username)

    return BootstrapOutput.created_admin(
        super_admin, used_default_password=not bootstrap_input.password
    )


def run(
    bootstrap_input: BootstrapInput,
    admin_repo: AdminRepoPort,
    activity_repo: ActivityRepoPort,
    auth_adapter: AuthAdapterPort,
    admin_rules: AdminRules,
    auth_rules: AuthRules,
    time: TimePort,
) -> BootstrapOutput:
    """Main entry point for the bootstrap component."""
    return run_bootstrap(
        bootstrap_input, admin_repo, activity_repo, auth_adapter, admin_rules, auth_rules, time
    )
