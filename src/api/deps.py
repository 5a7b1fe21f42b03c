import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import SystemClock
from src.adapters.google_oauth import GoogleTokenInfoVerifier
from src.adapters.sqlite.repos import (
    SQLiteActivityRepo,
    SQLiteAdminRepo,
    SQLiteCollectionRepo,
    SQLiteProfileRepo,
    SQLiteStarRepo,
    SQLiteUserRepo,
)
from src.api.auth_utils import decode_access_token
from src.app_shell.rate_limit import RateLimiter
from src.domain.entities import Admin, User
from src.rules.loader import load_rules
from src.rules.models import Rules


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("EINFO_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "einfo.db")
        self.rules_path = Path(os.environ.get("EINFO_RULES_PATH", self.base_dir / "rules.yaml"))
        self.migrations_dir = self.base_dir / "migrations"
        self.environment = os.environ.get("EINFO_ENV", "development")
        self.google_client_id = os.environ.get("GOOGLE_CLIENT_ID", "")

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


# --- Repos ---
def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


def get_profile_repo(settings: Settings = Depends(get_settings)) -> SQLiteProfileRepo:
    return SQLiteProfileRepo(settings.db_path)


def get_collection_repo(settings: Settings = Depends(get_settings)) -> SQLiteCollectionRepo:
    return SQLiteCollectionRepo(settings.db_path)


def get_star_repo(settings: Settings = Depends(get_settings)) -> SQLiteStarRepo:
    return SQLiteStarRepo(settings.db_path)


def get_admin_repo(settings: Settings = Depends(get_settings)) -> SQLiteAdminRepo:
    return SQLiteAdminRepo(settings.db_path)


def get_activity_repo(settings: Settings = Depends(get_settings)) -> SQLiteActivityRepo:
    return SQLiteActivityRepo(settings.db_path)


# --- Adapters ---
def get_auth_adapter() -> JWTAuthAdapter:
    return JWTAuthAdapter()


def get_google_verifier(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> GoogleTokenInfoVerifier:
    client_id = os.environ.get(rules.auth.google.client_id_env, settings.google_client_id)
    return GoogleTokenInfoVerifier(
        client_id=client_id,
        tokeninfo_url=rules.auth.google.tokeninfo_url,
    )


# Time adapter for deterministic time operations
_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# Rate limiter singleton; history must outlive a single request
_rate_limiter_instance: RateLimiter | None = None


def get_rate_limiter(rules: Rules = Depends(get_rules)) -> RateLimiter:
    global _rate_limiter_instance
    if _rate_limiter_instance is None:
        _rate_limiter_instance = RateLimiter(rules.rate_limits)
    return _rate_limiter_instance


def client_ip(request: Request, trusted_proxies: int = 0) -> str:
    """
    Client address as seen through `trusted_proxies` reverse proxies.

    Each trusted proxy appends the address it received the request from to
    X-Forwarded-For, so the client is `trusted_proxies` hops back from the
    socket peer. Entries further left are written by the client and ignored.
    """
    peer = request.client.host if request.client else "unknown"
    if trusted_proxies <= 0:
        return peer

    forwarded = request.headers.get("x-forwarded-for", "")
    hops = [h.strip() for h in forwarded.split(",") if h.strip()] + [peer]
    return hops[max(len(hops) - 1 - trusted_proxies, 0)]


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _token_payload(request: Request, token: str | None, cookie_name: str) -> dict:
    # 1. Try Cookie first (HttpOnly)
    cookie_token = request.cookies.get(cookie_name)
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ")[1]

    # 2. Header (OAuth2Bearer) is handled by Depends(oauth2_scheme)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    subject = payload.get("sub")
    if subject is None or not isinstance(subject, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )
    try:
        payload["sub"] = UUID(subject)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        ) from None
    return payload


async def get_current_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> User:
    payload = _token_payload(request, token, "access_token")
    if payload.get("type") != "user":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
        )

    user = user_repo.get_by_id(payload["sub"])
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if user.status != "active":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is deactivated",
        )

    return user


async def get_current_admin(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    admin_repo: SQLiteAdminRepo = Depends(get_admin_repo),
) -> Admin:
    payload = _token_payload(request, token, "admin_token")
    if payload.get("type") != "admin":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token type",
        )

    admin = admin_repo.get_by_id(payload["sub"])
    if not admin or not admin.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Admin not found or inactive",
        )

    return admin


async def require_super_admin(admin: Admin = Depends(get_current_admin)) -> Admin:
    if admin.role != "super_admin":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Super admin access required",
        )
    return admin
