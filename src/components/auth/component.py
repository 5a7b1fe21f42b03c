"""
Auth component - Registration, credential login and Google sign-in.

Shell Layer - handles I/O and error conversion.
"""

from __future__ import annotations

import logging
from uuid import uuid4

from src.domain.entities import Profile, User
from src.rules.models import AuthRules

from ._impl import (
    generate_unique_username,
    normalize_email,
    username_base_from_email,
    validate_email,
    validate_password,
    validate_username,
)
from .models import (
    AuthOutput,
    AuthValidationError,
    CheckUsernameInput,
    GoogleLoginInput,
    LoginInput,
    RegisterInput,
    UsernameCheckOutput,
)
from .ports import (
    AuthAdapterPort,
    GoogleVerifierPort,
    ProfileRepoPort,
    TimePort,
    UserRepoPort,
)

logger = logging.getLogger(__name__)


def _issue_token(user: User, auth_adapter: AuthAdapterPort, rules: AuthRules) -> str:
    return auth_adapter.create_token(user.id, rules.tokens.user_ttl_minutes, type="user")


def run_register(
    inp: RegisterInput,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    auth_adapter: AuthAdapterPort,
    rules: AuthRules,
    time: TimePort,
) -> AuthOutput:
    """Create a credentials account with an empty profile."""
    username = (inp.username or "").strip().lower()
    errors = [
        *validate_email(inp.email),
        *validate_username(username, rules.username),
        *validate_password(inp.password, rules.password),
    ]
    if not inp.name or not inp.name.strip():
        errors.append(AuthValidationError("name_required", "Name is required", "name"))
    if errors:
        return AuthOutput(user=None, token=None, errors=tuple(errors), success=False)

    email = normalize_email(inp.email)
    if user_repo.get_by_email(email):
        return AuthOutput.failed("email_taken", "Email already in use", "email")
    if user_repo.get_by_username(username):
        return AuthOutput.failed("username_taken", "Username is already taken", "username")

    now = time.now_utc()
    user = User(
        id=uuid4(),
        email=email,
        username=username,
        name=inp.name.strip(),
        password_hash=auth_adapter.hash_password(inp.password),
        auth_provider="credentials",
        status="active",
        created_at=now,
        updated_at=now,
    )
    user_repo.save(user)
    profile_repo.save(Profile(user_id=user.id, updated_at=now))

    logger.info("New user registered: %s (%s)", user.username, user.email)
    return AuthOutput.ok(user, _issue_token(user, auth_adapter, rules), created=True)


def run_login(
    inp: LoginInput,
    user_repo: UserRepoPort,
    auth_adapter: AuthAdapterPort,
    rules: AuthRules,
) -> AuthOutput:
    user = user_repo.get_by_email(normalize_email(inp.email))
    if not user or not user.password_hash:
        return AuthOutput.failed("invalid_credentials", "Invalid credentials")

    if not auth_adapter.verify_password(inp.password, user.password_hash):
        return AuthOutput.failed("invalid_credentials", "Invalid credentials")

    if user.status != "active":
        return AuthOutput.failed("account_disabled", "User account is disabled")

    return AuthOutput.ok(user, _issue_token(user, auth_adapter, rules))


def run_google_login(
    inp: GoogleLoginInput,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    auth_adapter: AuthAdapterPort,
    verifier: GoogleVerifierPort,
    rules: AuthRules,
    time: TimePort,
) -> AuthOutput:
    """
    Sign in with a Google id token, creating the account on first use.

    New users get the requested username when it is free, otherwise one
    derived from it (or from their email) with a numeric suffix.
    """
    if not rules.google.enabled:
        return AuthOutput.failed("google_disabled", "Google sign-in is not enabled")
    if not inp.google_token:
        return AuthOutput.failed("token_required", "Google token is required", "google_token")

    identity = verifier.verify(inp.google_token)
    if identity is None:
        return AuthOutput.failed("invalid_token", "Invalid Google token", "google_token")

    now = time.now_utc()
    user = user_repo.get_by_google_id(identity.google_id)
    if user is not None:
        if user.status != "active":
            return AuthOutput.failed("account_disabled", "User account is disabled")
        # Keep the user's own display name; refresh the avatar.
        user.avatar_url = identity.avatar_url
        user.updated_at = now
        user_repo.save(user)
        return AuthOutput.ok(user, _issue_token(user, auth_adapter, rules))

    # Matching or creating by email needs Google to vouch for the address
    if not identity.email_verified:
        return AuthOutput.failed("email_unverified", "Google email address is not verified")

    email = normalize_email(identity.email)
    existing = user_repo.get_by_email(email)
    if existing is not None:
        if existing.status != "active":
            return AuthOutput.failed("account_disabled", "User account is disabled")
        existing.google_id = identity.google_id
        existing.avatar_url = existing.avatar_url or identity.avatar_url
        existing.updated_at = now
        user_repo.save(existing)
        logger.info("Linked Google account to existing user %s", existing.username)
        return AuthOutput.ok(existing, _issue_token(existing, auth_adapter, rules))

    base = (
        inp.username.strip().lower()
        if inp.username
        else username_base_from_email(email, rules.username)
    )
    username = generate_unique_username(
        base, rules.username, lambda name: user_repo.get_by_username(name) is not None
    )

    user = User(
        id=uuid4(),
        email=email,
        username=username,
        name=identity.name or username,
        google_id=identity.google_id,
        avatar_url=identity.avatar_url,
        auth_provider="google",
        status="active",
        created_at=now,
        updated_at=now,
    )
    user_repo.save(user)
    profile_repo.save(Profile(user_id=user.id, updated_at=now))

    logger.info("New user registered via Google: %s (%s)", user.username, user.email)
    return AuthOutput.ok(user, _issue_token(user, auth_adapter, rules), created=True)


def run_check_username(
    inp: CheckUsernameInput,
    user_repo: UserRepoPort,
    rules: AuthRules,
) -> UsernameCheckOutput:
    username = (inp.username or "").strip().lower()
    errors = validate_username(username, rules.username)
    if errors:
        return UsernameCheckOutput(
            username=username, available=False, errors=tuple(errors), success=False
        )

    return UsernameCheckOutput(
        username=username,
        available=user_repo.get_by_username(username) is None,
        errors=(),
        success=True,
    )


def run(
    inp: RegisterInput | LoginInput | GoogleLoginInput | CheckUsernameInput,
    *,
    user_repo: UserRepoPort,
    rules: AuthRules,
    profile_repo: ProfileRepoPort | None = None,
    auth_adapter: AuthAdapterPort | None = None,
    verifier: GoogleVerifierPort | None = None,
    time: TimePort | None = None,
) -> AuthOutput | UsernameCheckOutput:
    if isinstance(inp, RegisterInput):
        assert profile_repo and auth_adapter and time
        return run_register(inp, user_repo, profile_repo, auth_adapter, rules, time)

    elif isinstance(inp, LoginInput):
        assert auth_adapter
        return run_login(inp, user_repo, auth_adapter, rules)

    elif isinstance(inp, GoogleLoginInput):
        assert profile_repo and auth_adapter and verifier and time
        return run_google_login(
            inp, user_repo, profile_repo, auth_adapter, verifier, rules, time
        )

    elif isinstance(inp, CheckUsernameInput):
        return run_check_username(inp, user_repo, rules)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
