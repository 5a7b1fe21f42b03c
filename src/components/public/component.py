"""
Public component - Profiles as anonymous visitors see them.

Shell Layer - handles I/O and error conversion.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from src.domain.collections import COLLECTION_TYPES, VISIBILITY_FLAGS
from src.domain.entities import Profile, ProfileStar, User

from .models import (
    ClickInput,
    ClickOutput,
    ProfileSummary,
    PublicProfileInput,
    PublicProfileOutput,
    PublicValidationError,
    SearchInput,
    SearchOutput,
    StarInput,
    StarOutput,
)
from .ports import (
    CollectionReaderPort,
    ProfileRepoPort,
    StarRepoPort,
    TimePort,
    UserRepoPort,
)

logger = logging.getLogger(__name__)

_NOT_FOUND = PublicValidationError("profile_not_found", "Profile not found")


def _find_active(username: str, user_repo: UserRepoPort) -> User | None:
    user = user_repo.get_by_username((username or "").strip().lower())
    if user is None or user.status != "active":
        return None
    return user


def public_view(profile: Profile) -> Profile:
    """Profile basics with the job title blanked when titles are hidden."""
    if profile.visibility.show_titles:
        return profile
    return profile.model_copy(update={"job_title": ""})


def run_get_profile(
    inp: PublicProfileInput,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    collection_repo: CollectionReaderPort,
    star_repo: StarRepoPort,
) -> PublicProfileOutput:
    user = _find_active(inp.username, user_repo)
    if user is None:
        return PublicProfileOutput(
            user=None,
            profile=None,
            collections={},
            star_count=0,
            errors=(_NOT_FOUND,),
            success=False,
        )

    if inp.count_view:
        user_repo.increment_counter(user.id, "total_views")

    profile = profile_repo.get(user.id) or Profile(user_id=user.id)
    visibility = profile.visibility
    collections = {
        c: collection_repo.list(user.id, c)
        for c in COLLECTION_TYPES
        if getattr(visibility, VISIBILITY_FLAGS[c])
    }

    return PublicProfileOutput(
        user=user,
        profile=public_view(profile),
        collections=collections,
        star_count=star_repo.count(user.id),
        errors=(),
        success=True,
    )


def run_star(
    inp: StarInput,
    user_repo: UserRepoPort,
    star_repo: StarRepoPort,
    time: TimePort,
) -> StarOutput:
    """One star per visitor address per profile."""
    user = _find_active(inp.username, user_repo)
    if user is None:
        return StarOutput(star_count=0, errors=(_NOT_FOUND,), success=False)

    star = ProfileStar(id=uuid4(), user_id=user.id, visitor_ip=inp.visitor_ip, created_at=time.now_utc())
    if not star_repo.add(star):
        return StarOutput(
            star_count=star_repo.count(user.id),
            errors=(
                PublicValidationError(
                    "already_starred", "You have already starred this profile"
                ),
            ),
            success=False,
        )

    logger.info("Profile %s starred", user.username)
    return StarOutput(star_count=star_repo.count(user.id), errors=(), success=True)


def run_click(inp: ClickInput, user_repo: UserRepoPort) -> ClickOutput:
    user = _find_active(inp.username, user_repo)
    if user is None:
        return ClickOutput(errors=(_NOT_FOUND,), success=False)

    user_repo.increment_counter(user.id, "total_clicks")
    return ClickOutput(errors=(), success=True)


def run_search(
    inp: SearchInput,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    star_repo: StarRepoPort,
    max_limit: int = 100,
) -> SearchOutput:
    page = max(inp.page, 1)
    limit = min(max(inp.limit, 1), max_limit)
    users, total = user_repo.search_public(
        (inp.query or "").strip(), limit=limit, offset=(page - 1) * limit
    )

    results = []
    for user in users:
        profile = profile_repo.get(user.id)
        results.append(
            ProfileSummary(
                user=user,
                profile=public_view(profile) if profile else None,
                star_count=star_repo.count(user.id),
            )
        )

    return SearchOutput(results=tuple(results), total=total, page=page, limit=limit)
