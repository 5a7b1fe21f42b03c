"""
Profile validation - Functional Core.
"""

from __future__ import annotations

from urllib.parse import urlparse

from src.domain.entities import VisibilitySettings
from src.rules.models import ProfileRules

from .models import ProfileValidationError, UpdateBasicInput, UpdateInstantMessageInput


def _too_long(field: str, label: str, value: str | None, limit: int) -> ProfileValidationError | None:
    if value is not None and len(value) > limit:
        return ProfileValidationError(
            code=f"{field}_too_long",
            message=f"{label} must be {limit} characters or less",
            field=field,
        )
    return None


def validate_basic(
    inp: UpdateBasicInput,
    rules: ProfileRules,
    allowed_schemes: list[str],
) -> list[ProfileValidationError]:
    errors: list[ProfileValidationError] = []

    if inp.name is not None and not inp.name.strip():
        errors.append(ProfileValidationError("name_required", "Name is required", "name"))

    for check in (
        _too_long("name", "Name", inp.name, rules.name_max),
        _too_long("job_title", "Job title", inp.job_title, rules.job_title_max),
        _too_long("bio", "Bio", inp.bio, rules.bio_max),
        _too_long("location", "Location", inp.location, rules.location_max),
    ):
        if check:
            errors.append(check)

    for field, value in (
        ("website", inp.website),
        ("profile_image_url", inp.profile_image_url),
        ("resume_url", inp.resume_url),
    ):
        if value and urlparse(value.strip()).scheme.lower() not in allowed_schemes:
            errors.append(
                ProfileValidationError(
                    code=f"{field}_invalid_scheme",
                    message=f"{field.replace('_', ' ').capitalize()} must be a valid URL",
                    field=field,
                )
            )

    if inp.skills is not None:
        if len(inp.skills) > rules.max_skills:
            errors.append(
                ProfileValidationError(
                    "too_many_skills",
                    f"Maximum {rules.max_skills} skills allowed",
                    "skills",
                )
            )
        elif any(len(skill) > rules.skill_max for skill in inp.skills):
            errors.append(
                ProfileValidationError(
                    "skill_too_long",
                    f"Each skill must be {rules.skill_max} characters or less",
                    "skills",
                )
            )

    return errors


def clean_skills(skills: tuple[str, ...]) -> list[str]:
    """Trimmed, non-empty, de-duplicated skills in their given order."""
    seen: set[str] = set()
    result: list[str] = []
    for skill in skills:
        value = skill.strip()
        if value and value.lower() not in seen:
            seen.add(value.lower())
            result.append(value)
    return result


def apply_visibility(
    current: VisibilitySettings, updates: dict[str, bool]
) -> tuple[VisibilitySettings | None, list[ProfileValidationError]]:
    unknown = sorted(set(updates) - set(VisibilitySettings.model_fields))
    if unknown:
        return None, [
            ProfileValidationError(
                "unknown_setting",
                f"Unknown visibility setting: {unknown[0]}",
                unknown[0],
            )
        ]
    return current.model_copy(update=updates), []


def validate_instant_message(
    inp: UpdateInstantMessageInput,
    rules: ProfileRules,
) -> list[ProfileValidationError]:
    """A given subject or body must be non-blank and within its limit once trimmed."""
    errors: list[ProfileValidationError] = []
    parts = [
        ("instant_message_subject", "subject", inp.subject, rules.instant_message_subject_max),
        ("instant_message_body", "body", inp.body, rules.instant_message_body_max),
    ]
    for field, part, value, limit in parts:
        if value is not None and not 1 <= len(value.strip()) <= limit:
            errors.append(
                ProfileValidationError(
                    code=f"{field}_length",
                    message=f"Instant message {part} must be between 1 and {limit} characters",
                    field=field,
                )
            )
    return errors
