from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.sqlite.repos import (
    SQLiteActivityRepo,
    SQLiteAdminRepo,
    SQLiteCollectionRepo,
    SQLiteProfileRepo,
    SQLiteStarRepo,
    SQLiteUserRepo,
)
from src.api.deps import (
    client_ip,
    get_activity_repo,
    get_admin_repo,
    get_auth_adapter,
    get_clock,
    get_collection_repo,
    get_current_admin,
    get_profile_repo,
    get_rate_limiter,
    get_rules,
    get_star_repo,
    get_user_repo,
    require_super_admin,
)
from src.api.schemas import (
    AdminLoginRequest,
    CreateAdminRequest,
    UserStatusRequest,
    activity_to_dict,
    admin_to_dict,
    collections_to_dict,
    envelope,
    profile_to_dict,
    user_to_dict,
)
from src.app_shell.rate_limit import RateLimiter
from src.components.admin import (
    ACTION_LOGOUT,
    ACTION_VIEW_DASHBOARD,
    ACTION_VIEW_USER_DETAILS,
    ACTION_VIEW_USERS,
    AdminLoginInput,
    CreateAdminInput,
    ListActivityInput,
    ListUsersInput,
    LogActivityInput,
    SetUserStatusInput,
    UserDetailsInput,
    run_create_admin,
    run_dashboard,
    run_list_activities,
    run_list_users,
    run_log_activity,
    run_login,
    run_set_user_status,
    run_user_details,
)
from src.domain.entities import Admin
from src.rules.models import Rules

router = APIRouter()

# The admin panel filters on "inactive"; users store "disabled"
_STATUS_FILTER = {"active": "active", "inactive": "disabled", "disabled": "disabled"}


def _log(
    admin: Admin,
    action: str,
    request: Request,
    activity_repo: SQLiteActivityRepo,
    clock: Any,
    rules: Rules,
    **details: Any,
) -> None:
    run_log_activity(
        LogActivityInput(
            admin_id=admin.id,
            action=action,
            target_user_id=details.pop("target_user_id", None),
            ip_address=client_ip(request, rules.ops.trusted_proxies),
            details=details,
        ),
        activity_repo,
        clock,
        rules.admin.activity_log_retention,
    )


def _pagination(page: int, limit: int, total: int, pages: int) -> dict[str, int]:
    return {"page": page, "limit": limit, "total": total, "pages": pages}


@router.post("/login")
def admin_login(
    req: AdminLoginRequest,
    request: Request,
    response: Response,
    admin_repo: SQLiteAdminRepo = Depends(get_admin_repo),
    activity_repo: SQLiteActivityRepo = Depends(get_activity_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    rules: Rules = Depends(get_rules),
    limiter: RateLimiter = Depends(get_rate_limiter),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    ip = client_ip(request, rules.ops.trusted_proxies)
    if not limiter.check_login(f"admin:{ip}"):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts, try again later",
            headers={"Retry-After": str(limiter.login_retry_after(f"admin:{ip}"))},
        )

    result = run_login(
        AdminLoginInput(email=req.email, password=req.password, ip_address=ip),
        admin_repo,
        activity_repo,
        auth_adapter,
        rules.auth,
        rules.admin,
        clock,
    )
    if not result.success or result.admin is None or result.token is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=result.message)

    ttl = rules.auth.tokens.admin_ttl_minutes
    response.set_cookie(
        key="admin_token",
        value=f"Bearer {result.token}",
        httponly=True,
        max_age=ttl * 60,
        expires=ttl * 60,
        samesite="strict",
        secure=False,  # Set to True for HTTPS prod
    )
    return {
        "success": True,
        "message": "Login successful",
        "access_token": result.token,
        "token_type": "bearer",
        "data": {"admin": admin_to_dict(result.admin)},
    }


@router.post("/logout")
def admin_logout(
    request: Request,
    response: Response,
    admin: Admin = Depends(get_current_admin),
    activity_repo: SQLiteActivityRepo = Depends(get_activity_repo),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    _log(admin, ACTION_LOGOUT, request, activity_repo, clock, rules)
    response.delete_cookie(key="admin_token")
    return envelope(message="Logged out successfully")


@router.get("/me")
def read_admin_me(admin: Admin = Depends(get_current_admin)) -> dict[str, Any]:
    return envelope({"admin": admin_to_dict(admin)})


@router.get("/dashboard")
def dashboard(
    request: Request,
    admin: Admin = Depends(get_current_admin),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    activity_repo: SQLiteActivityRepo = Depends(get_activity_repo),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    _log(admin, ACTION_VIEW_DASHBOARD, request, activity_repo, clock, rules)
    stats = run_dashboard(user_repo, profile_repo, activity_repo)
    return envelope(
        {
            "stats": {
                "total_users": stats.total_users,
                "active_users": stats.active_users,
                "inactive_users": stats.inactive_users,
                "total_profiles": stats.total_profiles,
            },
            "recent_activities": [activity_to_dict(a) for a in stats.recent_activities],
        }
    )


@router.get("/users")
def list_users(
    request: Request,
    page: int = 1,
    limit: int = 20,
    search: str = "",
    status_filter: str | None = Query(None, alias="status"),
    admin: Admin = Depends(get_current_admin),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    activity_repo: SQLiteActivityRepo = Depends(get_activity_repo),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    result = run_list_users(
        ListUsersInput(
            page=page,
            limit=limit,
            search=search,
            status=_STATUS_FILTER.get(status_filter or ""),
        ),
        user_repo,
        rules.admin,
    )
    _log(
        admin,
        ACTION_VIEW_USERS,
        request,
        activity_repo,
        clock,
        rules,
        page=result.page,
        search=search,
        status=status_filter or "all",
    )
    return envelope(
        {
            "users": [user_to_dict(u) for u in result.users],
            "pagination": _pagination(result.page, result.limit, result.total, result.pages),
        }
    )


@router.get("/users/{user_id}")
def user_details(
    user_id: UUID,
    request: Request,
    admin: Admin = Depends(get_current_admin),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    collection_repo: SQLiteCollectionRepo = Depends(get_collection_repo),
    star_repo: SQLiteStarRepo = Depends(get_star_repo),
    activity_repo: SQLiteActivityRepo = Depends(get_activity_repo),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    result = run_user_details(
        UserDetailsInput(user_id=user_id), user_repo, profile_repo, collection_repo, star_repo
    )
    if not result.success or result.user is None:
        raise HTTPException(status_code=404, detail="User not found")

    _log(
        admin,
        ACTION_VIEW_USER_DETAILS,
        request,
        activity_repo,
        clock,
        rules,
        target_user_id=str(user_id),
    )
    return envelope(
        {
            "user": user_to_dict(result.user),
            "profile": profile_to_dict(result.profile),
            **collections_to_dict(result.collections),
            "star_count": result.star_count,
        }
    )


@router.put("/users/{user_id}/status")
def set_user_status(
    user_id: UUID,
    req: UserStatusRequest,
    request: Request,
    admin: Admin = Depends(get_current_admin),
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    activity_repo: SQLiteActivityRepo = Depends(get_activity_repo),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    result = run_set_user_status(
        SetUserStatusInput(
            admin_id=admin.id,
            user_id=user_id,
            is_active=req.is_active,
            ip_address=client_ip(request, rules.ops.trusted_proxies),
        ),
        user_repo,
        activity_repo,
        rules.admin,
        clock,
    )
    if not result.success or result.user is None:
        raise HTTPException(status_code=404, detail=result.message)

    verb = "activated" if req.is_active else "deactivated"
    return envelope({"user": user_to_dict(result.user)}, message=f"User {verb} successfully")


@router.post("/admins", status_code=status.HTTP_201_CREATED)
def create_admin(
    req: CreateAdminRequest,
    request: Request,
    admin: Admin = Depends(require_super_admin),
    admin_repo: SQLiteAdminRepo = Depends(get_admin_repo),
    activity_repo: SQLiteActivityRepo = Depends(get_activity_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    result = run_create_admin(
        CreateAdminInput(
            actor=admin,
            email=req.email,
            username=req.username,
            name=req.name,
            password=req.password,
            role=req.role,
            ip_address=client_ip(request, rules.ops.trusted_proxies),
        ),
        admin_repo,
        activity_repo,
        auth_adapter,
        rules.auth,
        rules.admin,
        clock,
    )
    if result.error_code == "forbidden":
        raise HTTPException(status_code=403, detail=result.message)
    if result.error_code == "admin_exists":
        raise HTTPException(status_code=409, detail=result.message)
    if not result.success or result.admin is None:
        raise HTTPException(status_code=400, detail=result.message)

    return envelope({"admin": admin_to_dict(result.admin)}, message="Admin created successfully")


@router.get("/activity-logs")
def activity_logs(
    page: int = 1,
    limit: int = 20,
    action: str | None = None,
    admin_id: UUID | None = None,
    admin: Admin = Depends(get_current_admin),
    activity_repo: SQLiteActivityRepo = Depends(get_activity_repo),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    result = run_list_activities(
        ListActivityInput(page=page, limit=limit, action=action, admin_id=admin_id),
        activity_repo,
        rules.admin,
    )
    return envelope(
        {
            "activities": [activity_to_dict(a) for a in result.activities],
            "pagination": _pagination(result.page, result.limit, result.total, result.pages),
        }
    )
