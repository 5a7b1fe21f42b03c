"""
Auth component unit tests.

Tests for registration, login, Google sign-in and username rules.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID

import pytest

from src.components.auth import (
    CheckUsernameInput,
    GoogleIdentity,
    GoogleLoginInput,
    LoginInput,
    RegisterInput,
    generate_unique_username,
    run_check_username,
    run_google_login,
    run_login,
    run_register,
    validate_username,
)
from src.domain.entities import Profile, User
from src.rules.loader import load_rules
from src.rules.models import AuthRules, UsernameRules

# --- Mock Implementations ---


class MockUserRepo:
    """In-memory user repository for testing."""

    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}

    def get_by_email(self, email: str) -> User | None:
        return next((u for u in self._users.values() if u.email == email.lower()), None)

    def get_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

    def get_by_google_id(self, google_id: str) -> User | None:
        return next((u for u in self._users.values() if u.google_id == google_id), None)

    def get_by_id(self, user_id: UUID) -> User | None:
        return self._users.get(user_id)

    def save(self, user: User) -> User:
        self._users[user.id] = user
        return user


class MockProfileRepo:
    def __init__(self) -> None:
        self._profiles: dict[UUID, Profile] = {}

    def get(self, user_id: UUID) -> Profile | None:
        return self._profiles.get(user_id)

    def save(self, profile: Profile) -> Profile:
        self._profiles[profile.user_id] = profile
        return profile


class MockAuthAdapter:
    """Mock auth adapter for testing."""

    def verify_password(self, plain: str, hashed: str) -> bool:
        # Simple mock: hash is "hashed_" + plain
        return hashed == f"hashed_{plain}"

    def hash_password(self, plain: str) -> str:
        return f"hashed_{plain}"

    def create_token(self, subject: object, ttl_minutes: int, **claims: object) -> str:
        return f"token_{subject}_{ttl_minutes}_{claims.get('type')}"


class MockGoogleVerifier:
    def __init__(self, identities: dict[str, GoogleIdentity] | None = None) -> None:
        self._identities = identities or {}

    def verify(self, token: str) -> GoogleIdentity | None:
        return self._identities.get(token)


class MockTimePort:
    def now_utc(self) -> datetime:
        return datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


# --- Fixtures ---


@pytest.fixture
def rules() -> AuthRules:
    return load_rules(Path("rules.yaml").resolve()).auth


@pytest.fixture
def user_repo() -> MockUserRepo:
    return MockUserRepo()


@pytest.fixture
def profile_repo() -> MockProfileRepo:
    return MockProfileRepo()


@pytest.fixture
def auth_adapter() -> MockAuthAdapter:
    return MockAuthAdapter()


@pytest.fixture
def time_port() -> MockTimePort:
    return MockTimePort()


@pytest.fixture
def google() -> MockGoogleVerifier:
    return MockGoogleVerifier(
        {
            "good-token": GoogleIdentity(
                google_id="g-123",
                email="Jane.Doe@Gmail.com",
                name="Jane Doe",
                avatar_url="https://lh3.googleusercontent.com/a/jane",
                email_verified=True,
            )
        }
    )


@pytest.fixture
def registered(user_repo, profile_repo, auth_adapter, rules, time_port) -> User:
    result = run_register(
        RegisterInput(
            email="ada@example.com",
            password="secret123",
            name="Ada Lovelace",
            username="ada-l",
        ),
        user_repo,
        profile_repo,
        auth_adapter,
        rules,
        time_port,
    )
    assert result.user is not None
    return result.user


# --- Username Rules ---


class TestUsernameRules:
    """Username format checks."""

    @pytest.mark.parametrize("username", ["alice", "ada-lovelace", "user-2024", "a1b2c3d4e5f6g7h8i9j0"])
    def test_valid(self, username: str) -> None:
        assert validate_username(username, UsernameRules()) == []

    @pytest.mark.parametrize(
        ("username", "code"),
        [
            ("abcd", "username_length"),
            ("a" * 21, "username_length"),
            ("Alice", "username_invalid_chars"),
            ("ali_ce", "username_invalid_chars"),
            ("ali--ce", "username_consecutive_hyphens"),
            ("-alice", "username_hyphen_edge"),
            ("alice-", "username_hyphen_edge"),
            ("", "username_required"),
        ],
    )
    def test_invalid(self, username: str, code: str) -> None:
        errors = validate_username(username, UsernameRules())
        assert errors[0].code == code

    def test_reserved(self) -> None:
        errors = validate_username("admin", UsernameRules(reserved=["admin"]))
        assert errors[0].code == "username_reserved"

    def test_generate_unique_username_uses_free_base(self) -> None:
        assert generate_unique_username("janedoe", UsernameRules(), lambda _: False) == "janedoe"

    def test_generate_unique_username_appends_counter(self) -> None:
        taken = {"janedoe", "janedoe1"}
        result = generate_unique_username("janedoe", UsernameRules(), taken.__contains__)
        assert result == "janedoe2"

    def test_generate_unique_username_fixes_short_base(self) -> None:
        result = generate_unique_username("jo", UsernameRules(), lambda _: False)
        assert validate_username(result, UsernameRules()) == []


# --- Registration ---


class TestRegister:
    def test_register_success(self, registered: User, profile_repo: MockProfileRepo) -> None:
        assert registered.username == "ada-l"
        assert registered.password_hash == "hashed_secret123"
        assert profile_repo.get(registered.id) is not None

    def test_register_lowercases_username_and_email(
        self, user_repo, profile_repo, auth_adapter, rules, time_port
    ) -> None:
        result = run_register(
            RegisterInput(email="BOB@Example.com", password="secret123", name="Bob", username="BobBy"),
            user_repo,
            profile_repo,
            auth_adapter,
            rules,
            time_port,
        )

        assert result.success is True
        assert result.user.username == "bobby"
        assert result.user.email == "bob@example.com"
        assert result.token == f"token_{result.user.id}_{rules.tokens.user_ttl_minutes}_user"

    def test_register_duplicate_username(
        self, registered, user_repo, profile_repo, auth_adapter, rules, time_port
    ) -> None:
        result = run_register(
            RegisterInput(email="other@example.com", password="secret123", name="X", username="ada-l"),
            user_repo,
            profile_repo,
            auth_adapter,
            rules,
            time_port,
        )

        assert result.success is False
        assert result.error_code == "username_taken"

    def test_register_duplicate_email(
        self, registered, user_repo, profile_repo, auth_adapter, rules, time_port
    ) -> None:
        result = run_register(
            RegisterInput(email="ADA@example.com", password="secret123", name="X", username="other"),
            user_repo,
            profile_repo,
            auth_adapter,
            rules,
            time_port,
        )

        assert result.success is False
        assert result.error_code == "email_taken"

    def test_register_collects_all_field_errors(
        self, user_repo, profile_repo, auth_adapter, rules, time_port
    ) -> None:
        result = run_register(
            RegisterInput(email="not-an-email", password="x", name="", username="-bad-"),
            user_repo,
            profile_repo,
            auth_adapter,
            rules,
            time_port,
        )

        codes = {e.code for e in result.errors}
        assert result.success is False
        assert {"email_invalid", "password_too_short", "name_required"} <= codes


# --- Login ---


class TestLogin:
    def test_login_success(self, registered, user_repo, auth_adapter, rules) -> None:
        result = run_login(LoginInput(email="ada@example.com", password="secret123"), user_repo, auth_adapter, rules)

        assert result.success is True
        assert result.user.id == registered.id
        assert result.token is not None

    def test_login_wrong_password(self, registered, user_repo, auth_adapter, rules) -> None:
        result = run_login(LoginInput(email="ada@example.com", password="nope"), user_repo, auth_adapter, rules)

        assert result.success is False
        assert result.error_code == "invalid_credentials"

    def test_login_unknown_email(self, user_repo, auth_adapter, rules) -> None:
        result = run_login(LoginInput(email="ghost@example.com", password="x"), user_repo, auth_adapter, rules)

        assert result.error_code == "invalid_credentials"

    def test_login_disabled_user(self, registered, user_repo, auth_adapter, rules) -> None:
        registered.status = "disabled"
        user_repo.save(registered)

        result = run_login(LoginInput(email="ada@example.com", password="secret123"), user_repo, auth_adapter, rules)

        assert result.error_code == "account_disabled"


# --- Google Sign-in ---


class TestGoogleLogin:
    def test_first_sign_in_creates_user(
        self, user_repo, profile_repo, auth_adapter, google, rules, time_port
    ) -> None:
        result = run_google_login(
            GoogleLoginInput(google_token="good-token"),
            user_repo,
            profile_repo,
            auth_adapter,
            google,
            rules,
            time_port,
        )

        assert result.success is True
        assert result.created is True
        assert result.user.google_id == "g-123"
        assert result.user.auth_provider == "google"
        assert result.user.username == "janedoe"
        assert profile_repo.get(result.user.id) is not None

    def test_requested_username_is_used(
        self, user_repo, profile_repo, auth_adapter, google, rules, time_port
    ) -> None:
        result = run_google_login(
            GoogleLoginInput(google_token="good-token", username="jane-codes"),
            user_repo,
            profile_repo,
            auth_adapter,
            google,
            rules,
            time_port,
        )

        assert result.user.username == "jane-codes"

    def test_second_sign_in_keeps_name(
        self, user_repo, profile_repo, auth_adapter, google, rules, time_port
    ) -> None:
        first = run_google_login(
            GoogleLoginInput(google_token="good-token"),
            user_repo, profile_repo, auth_adapter, google, rules, time_port,
        )
        first.user.name = "Custom Name"
        user_repo.save(first.user)

        second = run_google_login(
            GoogleLoginInput(google_token="good-token"),
            user_repo, profile_repo, auth_adapter, google, rules, time_port,
        )

        assert second.created is False
        assert second.user.id == first.user.id
        assert second.user.name == "Custom Name"

    def test_links_existing_email_account(
        self, registered, user_repo, profile_repo, auth_adapter, rules, time_port
    ) -> None:
        verifier = MockGoogleVerifier(
            {
                "t": GoogleIdentity(
                    google_id="g-ada", email="ada@example.com", name="Ada", email_verified=True
                )
            }
        )
        result = run_google_login(
            GoogleLoginInput(google_token="t"),
            user_repo, profile_repo, auth_adapter, verifier, rules, time_port,
        )

        assert result.user.id == registered.id
        assert result.user.google_id == "g-ada"

    def test_unverified_email_does_not_link_existing_account(
        self, registered, user_repo, profile_repo, auth_adapter, rules, time_port
    ) -> None:
        verifier = MockGoogleVerifier(
            {"t": GoogleIdentity(google_id="g-evil", email="ada@example.com", name="Not Ada")}
        )
        result = run_google_login(
            GoogleLoginInput(google_token="t"),
            user_repo, profile_repo, auth_adapter, verifier, rules, time_port,
        )

        assert result.success is False
        assert result.error_code == "email_unverified"
        assert user_repo.get_by_id(registered.id).google_id is None

    def test_unverified_email_does_not_create_account(
        self, user_repo, profile_repo, auth_adapter, rules, time_port
    ) -> None:
        verifier = MockGoogleVerifier(
            {"t": GoogleIdentity(google_id="g-new", email="new@gmail.com", name="New")}
        )
        result = run_google_login(
            GoogleLoginInput(google_token="t"),
            user_repo, profile_repo, auth_adapter, verifier, rules, time_port,
        )

        assert result.error_code == "email_unverified"
        assert user_repo.get_by_google_id("g-new") is None

    def test_invalid_token(self, user_repo, profile_repo, auth_adapter, google, rules, time_port) -> None:
        result = run_google_login(
            GoogleLoginInput(google_token="forged"),
            user_repo, profile_repo, auth_adapter, google, rules, time_port,
        )

        assert result.success is False
        assert result.error_code == "invalid_token"

    def test_missing_token(self, user_repo, profile_repo, auth_adapter, google, rules, time_port) -> None:
        result = run_google_login(
            GoogleLoginInput(google_token=""),
            user_repo, profile_repo, auth_adapter, google, rules, time_port,
        )

        assert result.error_code == "token_required"


class TestCheckUsername:
    def test_available(self, user_repo, rules) -> None:
        result = run_check_username(CheckUsernameInput(username="fresh-name"), user_repo, rules)
        assert result.success is True
        assert result.available is True

    def test_taken(self, registered, user_repo, rules) -> None:
        result = run_check_username(CheckUsernameInput(username="ADA-L"), user_repo, rules)
        assert result.available is False

    def test_invalid_format(self, user_repo, rules) -> None:
        result = run_check_username(CheckUsernameInput(username="a--b-c"), user_repo, rules)
        assert result.success is False
        assert result.available is False
