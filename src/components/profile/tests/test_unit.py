"""
Profile component unit tests.
"""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from src.components.profile import (
    GetProfileInput,
    UpdateAccountInput,
    UpdateBasicInput,
    UpdateInstantMessageInput,
    UpdateVisibilityInput,
    run_get,
    run_update_account,
    run_update_basic,
    run_update_instant_message,
    run_update_visibility,
)
from src.domain.entities import LinkItem, Profile, User
from src.rules.loader import load_rules
from src.rules.models import Rules

# --- Mock Implementations ---


class MockUserRepo:
    def __init__(self) -> None:
        self._users: dict[UUID, User] = {}

    def get_by_id(self, user_id: UUID) -> User | None:
        return self._users.get(user_id)

    def get_by_username(self, username: str) -> User | None:
        return next((u for u in self._users.values() if u.username == username), None)

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


class MockCollectionRepo:
    def __init__(self) -> None:
        self.items: dict[tuple[UUID, str], list] = {}

    def list(self, user_id: UUID, collection: str) -> list:
        return list(self.items.get((user_id, collection), []))


class MockTimePort:
    def now_utc(self) -> datetime:
        return datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)


# --- Fixtures ---


@pytest.fixture
def rules() -> Rules:
    return load_rules(Path("rules.yaml").resolve())


@pytest.fixture
def user_repo() -> MockUserRepo:
    return MockUserRepo()


@pytest.fixture
def profile_repo() -> MockProfileRepo:
    return MockProfileRepo()


@pytest.fixture
def collection_repo() -> MockCollectionRepo:
    return MockCollectionRepo()


@pytest.fixture
def time_port() -> MockTimePort:
    return MockTimePort()


@pytest.fixture
def user(user_repo: MockUserRepo, profile_repo: MockProfileRepo) -> User:
    u = User(id=uuid4(), email="ada@example.com", username="ada-l", name="Ada")
    user_repo.save(u)
    profile_repo.save(Profile(user_id=u.id))
    return u


# --- Tests ---


class TestGetProfile:
    def test_returns_all_collections_in_order(self, user, user_repo, profile_repo, collection_repo) -> None:
        collection_repo.items[(user.id, "links")] = [
            LinkItem(id="2", title="B", url="https://b.io"),
            LinkItem(id="1", title="A", url="https://a.io"),
        ]

        result = run_get(GetProfileInput(user_id=user.id), user_repo, profile_repo, collection_repo)

        assert result.success is True
        assert [link.id for link in result.collections["links"]] == ["2", "1"]
        assert result.collections["experiences"] == []
        assert len(result.collections) == 6

    def test_unknown_user(self, user_repo, profile_repo, collection_repo) -> None:
        result = run_get(GetProfileInput(user_id=uuid4()), user_repo, profile_repo, collection_repo)

        assert result.success is False
        assert result.error_code == "user_not_found"


class TestUpdateBasic:
    def test_updates_fields_and_name(self, user, user_repo, profile_repo, rules, time_port) -> None:
        result = run_update_basic(
            UpdateBasicInput(
                user_id=user.id,
                name="Ada Lovelace",
                job_title="Analyst",
                bio="First programmer",
                skills=("Math", " math ", "Engines", ""),
            ),
            user_repo,
            profile_repo,
            rules,
            time_port,
        )

        assert result.success is True
        assert result.profile.job_title == "Analyst"
        assert result.profile.skills == ["Math", "Engines"]
        assert user_repo.get_by_id(user.id).name == "Ada Lovelace"

    def test_bio_too_long(self, user, user_repo, profile_repo, rules, time_port) -> None:
        result = run_update_basic(
            UpdateBasicInput(user_id=user.id, bio="x" * (rules.profile.bio_max + 1)),
            user_repo,
            profile_repo,
            rules,
            time_port,
        )

        assert result.success is False
        assert result.error_code == "bio_too_long"

    def test_too_many_skills(self, user, user_repo, profile_repo, rules, time_port) -> None:
        skills = tuple(f"s{i}" for i in range(rules.profile.max_skills + 1))
        result = run_update_basic(
            UpdateBasicInput(user_id=user.id, skills=skills),
            user_repo,
            profile_repo,
            rules,
            time_port,
        )

        assert result.error_code == "too_many_skills"

    def test_website_scheme(self, user, user_repo, profile_repo, rules, time_port) -> None:
        result = run_update_basic(
            UpdateBasicInput(user_id=user.id, website="javascript:alert(1)"),
            user_repo,
            profile_repo,
            rules,
            time_port,
        )

        assert result.error_code == "website_invalid_scheme"


class TestUpdateVisibility:
    def test_partial_update(self, user, user_repo, profile_repo, time_port) -> None:
        result = run_update_visibility(
            UpdateVisibilityInput(user_id=user.id, settings={"show_links": False}),
            user_repo,
            profile_repo,
            time_port,
        )

        assert result.success is True
        assert result.profile.visibility.show_links is False
        assert result.profile.visibility.show_education is True

    def test_unknown_setting(self, user, user_repo, profile_repo, time_port) -> None:
        result = run_update_visibility(
            UpdateVisibilityInput(user_id=user.id, settings={"show_everything": False}),
            user_repo,
            profile_repo,
            time_port,
        )

        assert result.error_code == "unknown_setting"


class TestUpdateAccount:
    def test_change_username(self, user, user_repo, profile_repo, rules, time_port) -> None:
        result = run_update_account(
            UpdateAccountInput(user_id=user.id, username="Ada-Codes"),
            user_repo,
            profile_repo,
            rules,
            time_port,
        )

        assert result.success is True
        assert result.user.username == "ada-codes"

    def test_username_taken(self, user, user_repo, profile_repo, rules, time_port) -> None:
        user_repo.save(User(id=uuid4(), email="b@example.com", username="taken", name="B"))

        result = run_update_account(
            UpdateAccountInput(user_id=user.id, username="taken"),
            user_repo,
            profile_repo,
            rules,
            time_port,
        )

        assert result.error_code == "username_taken"

    def test_keeping_own_username_is_fine(self, user, user_repo, profile_repo, rules, time_port) -> None:
        result = run_update_account(
            UpdateAccountInput(user_id=user.id, username="ada-l", name="Ada L."),
            user_repo,
            profile_repo,
            rules,
            time_port,
        )

        assert result.success is True
        assert result.user.name == "Ada L."

    def test_invalid_username(self, user, user_repo, profile_repo, rules, time_port) -> None:
        result = run_update_account(
            UpdateAccountInput(user_id=user.id, username="bad--name"),
            user_repo,
            profile_repo,
            rules,
            time_port,
        )

        assert result.error_code == "username_consecutive_hyphens"


class TestUpdateInstantMessage:
    def test_sets_subject_and_body(self, user, user_repo, profile_repo, rules, time_port) -> None:
        result = run_update_instant_message(
            UpdateInstantMessageInput(user_id=user.id, subject="  Hello ", body="Thanks for visiting"),
            user_repo,
            profile_repo,
            rules,
            time_port,
        )

        assert result.success is True
        stored = user_repo.get_by_id(user.id)
        assert stored.instant_message_subject == "Hello"
        assert stored.instant_message_body == "Thanks for visiting"

    def test_omitted_part_is_unchanged(self, user, user_repo, profile_repo, rules, time_port) -> None:
        run_update_instant_message(
            UpdateInstantMessageInput(user_id=user.id, subject="Hello", body="First"),
            user_repo, profile_repo, rules, time_port,
        )

        run_update_instant_message(
            UpdateInstantMessageInput(user_id=user.id, body="Second"),
            user_repo, profile_repo, rules, time_port,
        )

        stored = user_repo.get_by_id(user.id)
        assert stored.instant_message_subject == "Hello"
        assert stored.instant_message_body == "Second"

    @pytest.mark.parametrize(
        ("subject", "body", "field"),
        [
            ("   ", None, "instant_message_subject"),
            ("s" * 101, None, "instant_message_subject"),
            (None, "b" * 501, "instant_message_body"),
        ],
    )
    def test_length_limits(self, user, user_repo, profile_repo, rules, time_port, subject, body, field) -> None:
        result = run_update_instant_message(
            UpdateInstantMessageInput(user_id=user.id, subject=subject, body=body),
            user_repo, profile_repo, rules, time_port,
        )

        assert result.success is False
        assert result.errors[0].field == field
        assert user_repo.get_by_id(user.id).instant_message_subject == ""

    def test_unknown_user(self, user_repo, profile_repo, rules, time_port) -> None:
        result = run_update_instant_message(
            UpdateInstantMessageInput(user_id=uuid4(), subject="Hi"),
            user_repo, profile_repo, rules, time_port,
        )

        assert result.error_code == "user_not_found"
