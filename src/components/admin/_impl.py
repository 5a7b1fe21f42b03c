"""
Admin validation and paging - Functional Core.
"""

from __future__ import annotations

import re

from src.components.auth._impl import validate_email

from .models import AdminValidationError

ADMIN_USERNAME_REGEX = re.compile(r"^[a-zA-Z0-9_]{3,30}$")


def validate_admin_password(password: str, min_length: int) -> list[AdminValidationError]:
    """Admin passwords need a lower-case letter, an upper-case letter and a digit."""
    if not password or len(password) < min_length:
        return [
            AdminValidationError(
                "password_too_short",
                f"Password must be at least {min_length} characters long",
                "password",
            )
        ]
    if not (
        re.search(r"[a-z]", password)
        and re.search(r"[A-Z]", password)
        and re.search(r"\d", password)
    ):
        return [
            AdminValidationError(
                "password_too_weak",
                "Password must contain at least one lowercase letter, "
                "one uppercase letter, and one number",
                "password",
            )
        ]
    return []


def validate_new_admin(
    email: str,
    username: str,
    name: str,
    password: str,
    password_min_length: int,
) -> list[AdminValidationError]:
    errors: list[AdminValidationError] = [
        AdminValidationError(e.code, e.message, e.field) for e in validate_email(email)
    ]

    if not username or not ADMIN_USERNAME_REGEX.match(username):
        errors.append(
            AdminValidationError(
                "username_invalid",
                "Username must be 3-30 characters and contain only letters, "
                "numbers, and underscores",
                "username",
            )
        )

    if not name or not name.strip():
        errors.append(AdminValidationError("name_required", "Name is required", "name"))

    errors.extend(validate_admin_password(password, password_min_length))
    return errors


def clamp_page(page: int, limit: int, max_limit: int) -> tuple[int, int, int]:
    """Returns (page, limit, offset) with page >= 1 and 1 <= limit <= max_limit."""
    page = max(page, 1)
    limit = min(max(limit, 1), max_limit)
    return page, limit, (page - 1) * limit
