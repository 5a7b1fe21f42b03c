from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.sqlite.repos import SQLiteProfileRepo, SQLiteUserRepo
from src.api.deps import (
    client_ip,
    get_auth_adapter,
    get_clock,
    get_current_user,
    get_google_verifier,
    get_profile_repo,
    get_rate_limiter,
    get_rules,
    get_user_repo,
)
from src.api.schemas import GoogleLoginRequest, RegisterRequest, envelope, user_to_dict
from src.app_shell.rate_limit import RateLimiter
from src.components.auth import (
    AuthOutput,
    CheckUsernameInput,
    GoogleLoginInput,
    LoginInput,
    RegisterInput,
    run_check_username,
    run_google_login,
    run_login,
    run_register,
)
from src.domain.entities import User
from src.rules.models import Rules

router = APIRouter()

_STATUS_BY_CODE = {
    "email_taken": status.HTTP_409_CONFLICT,
    "username_taken": status.HTTP_409_CONFLICT,
    "invalid_credentials": status.HTTP_401_UNAUTHORIZED,
    "invalid_token": status.HTTP_401_UNAUTHORIZED,
    "account_disabled": status.HTTP_403_FORBIDDEN,
    "google_disabled": status.HTTP_403_FORBIDDEN,
    "email_unverified": status.HTTP_403_FORBIDDEN,
}


def set_auth_cookie(response: Response, token: str, ttl_minutes: int) -> None:
    response.set_cookie(
        key="access_token",
        value=f"Bearer {token}",
        httponly=True,
        max_age=ttl_minutes * 60,
        expires=ttl_minutes * 60,
        samesite="lax",
        secure=False,  # Set to True for HTTPS prod
    )


def _respond(result: AuthOutput, response: Response, rules: Rules) -> dict[str, Any]:
    if not result.success or result.user is None or result.token is None:
        raise HTTPException(
            status_code=_STATUS_BY_CODE.get(result.error_code or "", status.HTTP_400_BAD_REQUEST),
            detail=result.message or "Authentication failed",
        )

    set_auth_cookie(response, result.token, rules.auth.tokens.user_ttl_minutes)
    if result.created:
        response.status_code = status.HTTP_201_CREATED
    return {
        "success": True,
        "message": "Registered successfully" if result.created else "Logged in successfully",
        "access_token": result.token,
        "token_type": "bearer",
        "data": {"user": user_to_dict(result.user)},
    }


@router.post("/register")
def register(
    req: RegisterRequest,
    response: Response,
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    """Create a credentials account and sign it in."""
    inp = RegisterInput(
        email=req.email, password=req.password, name=req.name, username=req.username
    )
    result = run_register(inp, user_repo, profile_repo, auth_adapter, rules.auth, clock)
    return _respond(result, response, rules)


@router.post("/login")
def login_for_access_token(
    request: Request,
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    rules: Rules = Depends(get_rules),
    limiter: RateLimiter = Depends(get_rate_limiter),
) -> dict[str, Any]:
    """Authenticate with email (form `username`) and password."""
    ip = client_ip(request, rules.ops.trusted_proxies)
    if not limiter.check_login(ip):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many login attempts, try again later",
            headers={"Retry-After": str(limiter.login_retry_after(ip))},
        )

    inp = LoginInput(email=form_data.username, password=form_data.password)
    result = run_login(inp, user_repo, auth_adapter, rules.auth)
    return _respond(result, response, rules)


@router.post("/google")
def google_login(
    req: GoogleLoginRequest,
    response: Response,
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
    verifier: Any = Depends(get_google_verifier),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    """Sign in with a Google id token; first use creates the account."""
    inp = GoogleLoginInput(google_token=req.google_token, username=req.username)
    result = run_google_login(
        inp, user_repo, profile_repo, auth_adapter, verifier, rules.auth, clock
    )
    return _respond(result, response, rules)


@router.post("/logout")
def logout(response: Response) -> dict[str, Any]:
    """Log out user by clearing cookie."""
    response.delete_cookie(key="access_token")
    return envelope(message="Logged out successfully")


@router.get("/me")
def read_users_me(
    current_user: User = Depends(get_current_user),
) -> dict[str, Any]:
    """Get current user info."""
    return envelope({"user": user_to_dict(current_user)})


@router.get("/check-username/{username}")
def check_username(
    username: str,
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    result = run_check_username(CheckUsernameInput(username=username), user_repo, rules.auth)
    if not result.success:
        return {
            "success": True,
            "message": result.errors[0].message,
            "data": {"username": result.username, "available": False},
        }
    return envelope(
        {"username": result.username, "available": result.available},
        message=None if result.available else "Username is already taken",
    )
