"""
Profile component - The signed-in user's own profile.

Shell Layer - handles I/O and error conversion.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel

from src.components.auth._impl import validate_username
from src.domain.collections import COLLECTION_TYPES, CollectionType
from src.domain.entities import Profile
from src.rules.models import Rules

from ._impl import apply_visibility, clean_skills, validate_basic, validate_instant_message
from .models import (
    GetProfileInput,
    ProfileOutput,
    ProfileValidationError,
    UpdateAccountInput,
    UpdateBasicInput,
    UpdateInstantMessageInput,
    UpdateVisibilityInput,
)
from .ports import CollectionReaderPort, ProfileRepoPort, TimePort, UserRepoPort

logger = logging.getLogger(__name__)

_NOT_FOUND = ProfileValidationError("user_not_found", "User not found")


def load_collections(
    user_id, collection_repo: CollectionReaderPort
) -> dict[CollectionType, list[BaseModel]]:
    return {c: collection_repo.list(user_id, c) for c in COLLECTION_TYPES}


def run_get(
    inp: GetProfileInput,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    collection_repo: CollectionReaderPort,
) -> ProfileOutput:
    """Everything the profile editor needs to open a session."""
    user = user_repo.get_by_id(inp.user_id)
    if not user:
        return ProfileOutput.failed([_NOT_FOUND])

    profile = profile_repo.get(user.id) or Profile(user_id=user.id)
    return ProfileOutput.ok(user, profile, load_collections(user.id, collection_repo))


def run_update_basic(
    inp: UpdateBasicInput,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    rules: Rules,
    time: TimePort,
) -> ProfileOutput:
    user = user_repo.get_by_id(inp.user_id)
    if not user:
        return ProfileOutput.failed([_NOT_FOUND])

    errors = validate_basic(inp, rules.profile, rules.collections.allowed_url_schemes)
    if errors:
        return ProfileOutput.failed(errors)

    now = time.now_utc()
    profile = profile_repo.get(user.id) or Profile(user_id=user.id)
    updates = {
        name: getattr(inp, name).strip()
        for name in (
            "job_title",
            "bio",
            "website",
            "location",
            "profile_image_url",
            "resume_url",
        )
        if getattr(inp, name) is not None
    }
    if inp.skills is not None:
        updates["skills"] = clean_skills(inp.skills)
    profile = profile.model_copy(update={**updates, "updated_at": now})
    profile_repo.save(profile)

    if inp.name is not None and inp.name.strip() != user.name:
        user.name = inp.name.strip()
        user.updated_at = now
        user_repo.save(user)

    return ProfileOutput.ok(user, profile)


def run_update_visibility(
    inp: UpdateVisibilityInput,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    time: TimePort,
) -> ProfileOutput:
    user = user_repo.get_by_id(inp.user_id)
    if not user:
        return ProfileOutput.failed([_NOT_FOUND])

    profile = profile_repo.get(user.id) or Profile(user_id=user.id)
    visibility, errors = apply_visibility(profile.visibility, inp.settings)
    if errors or visibility is None:
        return ProfileOutput.failed(errors)

    profile = profile.model_copy(update={"visibility": visibility, "updated_at": time.now_utc()})
    profile_repo.save(profile)
    return ProfileOutput.ok(user, profile)


def run_update_account(
    inp: UpdateAccountInput,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    rules: Rules,
    time: TimePort,
) -> ProfileOutput:
    """Change display name and/or public username."""
    user = user_repo.get_by_id(inp.user_id)
    if not user:
        return ProfileOutput.failed([_NOT_FOUND])

    errors: list[ProfileValidationError] = []
    username = inp.username.strip().lower() if inp.username is not None else None

    if inp.name is not None and not inp.name.strip():
        errors.append(ProfileValidationError("name_required", "Name is required", "name"))
    if username is not None:
        errors.extend(
            ProfileValidationError(e.code, e.message, e.field)
            for e in validate_username(username, rules.auth.username)
        )
    if errors:
        return ProfileOutput.failed(errors)

    if username is not None and username != user.username:
        holder = user_repo.get_by_username(username)
        if holder is not None and holder.id != user.id:
            return ProfileOutput.failed(
                [ProfileValidationError("username_taken", "Username is already taken", "username")]
            )
        logger.info("User %s changed username %s -> %s", user.id, user.username, username)
        user.username = username

    if inp.name is not None:
        user.name = inp.name.strip()

    user.updated_at = time.now_utc()
    user_repo.save(user)
    return ProfileOutput.ok(user, profile_repo.get(user.id) or Profile(user_id=user.id))


def run_update_instant_message(
    inp: UpdateInstantMessageInput,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    rules: Rules,
    time: TimePort,
) -> ProfileOutput:
    """Set the subject and/or body of the message shown to profile visitors."""
    user = user_repo.get_by_id(inp.user_id)
    if not user:
        return ProfileOutput.failed([_NOT_FOUND])

    errors = validate_instant_message(inp, rules.profile)
    if errors:
        return ProfileOutput.failed(errors)

    if inp.subject is not None:
        user.instant_message_subject = inp.subject.strip()
    if inp.body is not None:
        user.instant_message_body = inp.body.strip()
    user.updated_at = time.now_utc()
    user_repo.save(user)
    return ProfileOutput.ok(user, profile_repo.get(user.id) or Profile(user_id=user.id))
