from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Request, status

from src.adapters.sqlite.repos import (
    SQLiteCollectionRepo,
    SQLiteProfileRepo,
    SQLiteStarRepo,
    SQLiteUserRepo,
)
from src.api.deps import (
    client_ip,
    get_clock,
    get_collection_repo,
    get_profile_repo,
    get_rate_limiter,
    get_rules,
    get_star_repo,
    get_user_repo,
)
from src.api.schemas import collections_to_dict, envelope, profile_to_dict, user_to_dict
from src.app_shell.rate_limit import RateLimiter
from src.components.public import (
    ClickInput,
    PublicProfileInput,
    SearchInput,
    StarInput,
    run_click,
    run_get_profile,
    run_search,
    run_star,
)
from src.rules.models import Rules

router = APIRouter()


@router.get("/profile/{username}")
def get_public_profile(
    username: str,
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    collection_repo: SQLiteCollectionRepo = Depends(get_collection_repo),
    star_repo: SQLiteStarRepo = Depends(get_star_repo),
) -> dict[str, Any]:
    """A published profile with its hidden sections left out."""
    result = run_get_profile(
        PublicProfileInput(username=username),
        user_repo,
        profile_repo,
        collection_repo,
        star_repo,
    )
    if not result.success or result.user is None:
        raise HTTPException(status_code=404, detail="Profile not found")

    return envelope(
        {
            "user": user_to_dict(result.user, include_email=False),
            **profile_to_dict(result.profile),
            **collections_to_dict(result.collections),
            "star_count": result.star_count,
        }
    )


@router.post("/profile/{username}/star")
def star_profile(
    username: str,
    request: Request,
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    star_repo: SQLiteStarRepo = Depends(get_star_repo),
    limiter: RateLimiter = Depends(get_rate_limiter),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> dict[str, Any]:
    ip = client_ip(request, rules.ops.trusted_proxies)
    if not limiter.check_star(ip):
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests, try again later",
            headers={"Retry-After": str(limiter.star_retry_after(ip))},
        )

    result = run_star(StarInput(username=username, visitor_ip=ip), user_repo, star_repo, clock)
    if result.error_code == "profile_not_found":
        raise HTTPException(status_code=404, detail=result.message)
    if not result.success:
        raise HTTPException(status_code=400, detail=result.message)

    return envelope({"star_count": result.star_count}, message="Profile starred")


@router.post("/profile/{username}/click")
def track_click(
    username: str,
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
) -> dict[str, Any]:
    result = run_click(ClickInput(username=username), user_repo)
    if not result.success:
        raise HTTPException(status_code=404, detail="Profile not found")
    return envelope()


@router.get("/search")
def search_profiles(
    q: str = "",
    page: int = 1,
    limit: int = 20,
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    star_repo: SQLiteStarRepo = Depends(get_star_repo),
    rules: Rules = Depends(get_rules),
) -> dict[str, Any]:
    result = run_search(
        SearchInput(query=q, page=page, limit=limit),
        user_repo,
        profile_repo,
        star_repo,
        max_limit=rules.admin.page_size_max,
    )
    return envelope(
        {
            "profiles": [
                {
                    "user": user_to_dict(s.user, include_email=False),
                    "job_title": s.profile.job_title if s.profile else "",
                    "bio": s.profile.bio if s.profile else "",
                    "profile_image_url": s.profile.profile_image_url if s.profile else "",
                    "star_count": s.star_count,
                }
                for s in result.results
            ],
            "pagination": {
                "page": result.page,
                "limit": result.limit,
                "total": result.total,
                "pages": result.pages,
            },
        }
    )
