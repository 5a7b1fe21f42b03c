"""
Auth validation - Functional Core.

Username, email and password checks shared by registration, Google sign-in
and account updates.
"""

from __future__ import annotations

import re
from collections.abc import Callable

from src.rules.models import PasswordRules, UsernameRules

from .models import AuthValidationError

# --- Email Validation Regex (RFC 5322 simplified) ---

EMAIL_REGEX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@"
    r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)+$"
)


def normalize_email(email: str) -> str:
    return email.strip().lower() if email else ""


def validate_email(email: str) -> list[AuthValidationError]:
    normalized = normalize_email(email)
    if not normalized:
        return [AuthValidationError("email_required", "Email address is required", "email")]
    if len(normalized) > 254:
        return [AuthValidationError("email_too_long", "Email address is too long", "email")]
    if not EMAIL_REGEX.match(normalized):
        return [AuthValidationError("email_invalid", "Invalid email format", "email")]
    return []


def validate_username(username: str | None, rules: UsernameRules) -> list[AuthValidationError]:
    """
    Public profile handles: lower-case letters, digits and single hyphens.

    Hyphens may not lead, trail or repeat.
    """
    if not username or not isinstance(username, str):
        return [AuthValidationError("username_required", "Username is required", "username")]

    if not rules.min_length <= len(username) <= rules.max_length:
        return [
            AuthValidationError(
                "username_length",
                f"Username must be between {rules.min_length} and "
                f"{rules.max_length} characters",
                "username",
            )
        ]

    if not re.match(rules.pattern, username):
        return [
            AuthValidationError(
                "username_invalid_chars",
                "Username can only contain lowercase letters, numbers, and hyphens",
                "username",
            )
        ]

    if "--" in username:
        return [
            AuthValidationError(
                "username_consecutive_hyphens",
                "Username cannot contain consecutive hyphens",
                "username",
            )
        ]

    if username.startswith("-") or username.endswith("-"):
        return [
            AuthValidationError(
                "username_hyphen_edge",
                "Username cannot start or end with a hyphen",
                "username",
            )
        ]

    if username in rules.reserved:
        return [
            AuthValidationError(
                "username_reserved",
                "This username is reserved",
                "username",
            )
        ]

    return []


def validate_password(password: str, rules: PasswordRules) -> list[AuthValidationError]:
    if not password or len(password) < rules.min_length:
        return [
            AuthValidationError(
                "password_too_short",
                f"Password must be at least {rules.min_length} characters",
                "password",
            )
        ]
    return []


def username_base_from_email(email: str, rules: UsernameRules) -> str:
    """Clean email prefix usable as the stem of a generated username."""
    prefix = normalize_email(email).split("@")[0]
    base = re.sub(r"[^a-z0-9]", "", prefix)[:12]
    return base.ljust(rules.min_length, "0")


def generate_unique_username(
    base: str,
    rules: UsernameRules,
    is_taken: Callable[[str], bool],
) -> str:
    """
    First free, valid username derived from `base`.

    Tries `base` itself, then `base1`, `base2`, ... trimmed to the maximum
    length.
    """
    base = base.lower()[: rules.max_length]
    if not validate_username(base, rules) and not is_taken(base):
        return base

    stem = re.sub(r"[^a-z0-9]", "", base)[: rules.max_length - 4] or "user"
    stem = stem.ljust(rules.min_length - 1, "0")
    counter = 1
    while True:
        candidate = f"{stem}{counter}"
        if not validate_username(candidate, rules) and not is_taken(candidate):
            return candidate
        counter += 1
