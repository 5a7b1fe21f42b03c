"""
Admin component - Admin panel for user management and auditing.
"""

from ._impl import clamp_page, validate_admin_password, validate_new_admin
from .component import (
    run_cleanup_activities,
    run_create_admin,
    run_dashboard,
    run_list_activities,
    run_list_users,
    run_log_activity,
    run_login,
    run_set_user_status,
    run_user_details,
)
from .models import (
    ACTION_ACTIVATE_USER,
    ACTION_CREATE_ADMIN,
    ACTION_DEACTIVATE_USER,
    ACTION_LOGIN,
    ACTION_LOGOUT,
    ACTION_SUPER_ADMIN_CREATED,
    ACTION_VIEW_DASHBOARD,
    ACTION_VIEW_USER_DETAILS,
    ACTION_VIEW_USERS,
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

__all__ = [
    # Entry points
    "run_cleanup_activities",
    "run_create_admin",
    "run_dashboard",
    "run_list_activities",
    "run_list_users",
    "run_log_activity",
    "run_login",
    "run_set_user_status",
    "run_user_details",
    # Functional core
    "clamp_page",
    "validate_admin_password",
    "validate_new_admin",
    # Actions
    "ACTION_ACTIVATE_USER",
    "ACTION_CREATE_ADMIN",
    "ACTION_DEACTIVATE_USER",
    "ACTION_LOGIN",
    "ACTION_LOGOUT",
    "ACTION_SUPER_ADMIN_CREATED",
    "ACTION_VIEW_DASHBOARD",
    "ACTION_VIEW_USER_DETAILS",
    "ACTION_VIEW_USERS",
    # Models
    "ActivityPageOutput",
    "AdminAuthOutput",
    "AdminLoginInput",
    "AdminOutput",
    "AdminValidationError",
    "CleanupInput",
    "CleanupOutput",
    "CreateAdminInput",
    "DashboardOutput",
    "ListActivityInput",
    "ListUsersInput",
    "LogActivityInput",
    "SetUserStatusInput",
    "UserDetailsInput",
    "UserDetailsOutput",
    "UserPageOutput",
    "UserStatusOutput",
    # Ports
    "ActivityRepoPort",
    "AdminRepoPort",
    "AuthAdapterPort",
    "CollectionReaderPort",
    "ProfileRepoPort",
    "StarCounterPort",
    "TimePort",
    "UserRepoPort",
]
