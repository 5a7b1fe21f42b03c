import sqlite3
from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from src.adapters.sqlite.repos import (
    SQLiteActivityRepo,
    SQLiteAdminRepo,
    SQLiteCollectionRepo,
    SQLiteProfileRepo,
    SQLiteStarRepo,
    SQLiteUserRepo,
)
from src.domain.entities import (
    AdminActivity,
    LinkItem,
    PortfolioImage,
    PortfolioProject,
    Profile,
    ProfileStar,
    User,
    VisibilitySettings,
)


def links(*names: str) -> list[LinkItem]:
    return [LinkItem(id=n, title=n.title(), url=f"https://{n}.example") for n in names]


class TestUserRepo:
    def test_save_and_lookup(self, db_path):
        repo = SQLiteUserRepo(db_path)
        user = User(email="jane@example.com", username="janedoe", name="Jane")
        repo.save(user)

        assert repo.get_by_id(user.id).email == "jane@example.com"
        assert repo.get_by_email("JANE@example.com").id == user.id
        assert repo.get_by_username("JaneDoe").id == user.id
        assert repo.get_by_google_id("nope") is None

    def test_instant_message_round_trip(self, db_path, make_user):
        repo = SQLiteUserRepo(db_path)
        user = make_user("janedoe")
        assert repo.get_by_id(user.id).instant_message_body == ""

        user.instant_message_subject = "Hi"
        user.instant_message_body = "Drop me a line"
        repo.save(user)

        stored = repo.get_by_id(user.id)
        assert (stored.instant_message_subject, stored.instant_message_body) == ("Hi", "Drop me a line")

    def test_unique_username(self, db_path):
        repo = SQLiteUserRepo(db_path)
        repo.save(User(email="a@example.com", username="taken", name="A"))

        with pytest.raises(sqlite3.IntegrityError):
            repo.save(User(email="b@example.com", username="taken", name="B"))

    def test_counters(self, db_path, make_user):
        user = make_user("counted")
        repo = SQLiteUserRepo(db_path)

        repo.increment_counter(user.id, "total_views")
        repo.increment_counter(user.id, "total_views")
        repo.increment_counter(user.id, "total_clicks")

        stored = repo.get_by_id(user.id)
        assert stored.total_views == 2
        assert stored.total_clicks == 1

        with pytest.raises(ValueError):
            repo.increment_counter(user.id, "password_hash")

    def test_admin_search_filters(self, db_path, make_user):
        make_user("alpha1", name="Alice Alpha")
        make_user("beta22", name="Bob Beta", status="disabled")
        repo = SQLiteUserRepo(db_path)

        users, total = repo.search(query="alpha")
        assert total == 1
        assert users[0].username == "alpha1"

        users, total = repo.search(status="disabled")
        assert [u.username for u in users] == ["beta22"]

        _, total = repo.search(query="example.com")
        assert total == 2

    def test_public_search(self, db_path, make_user):
        dev = make_user("devjane", name="Jane")
        make_user("hidden1", name="Hidden Dev", status="disabled")
        other = make_user("carlos", name="Carlos")
        SQLiteProfileRepo(db_path).save(Profile(user_id=other.id, job_title="Backend Dev"))
        SQLiteStarRepo(db_path).add(ProfileStar(user_id=other.id, visitor_ip="1.1.1.1"))

        users, total = SQLiteUserRepo(db_path).search_public("dev")

        assert total == 2
        # Most starred first; disabled users never appear
        assert [u.username for u in users] == ["carlos", "devjane"]
        assert dev.id in {u.id for u in users}

    def test_public_search_does_not_match_email(self, db_path, make_user):
        make_user("someone", email="secret-handle@example.com")

        _, total = SQLiteUserRepo(db_path).search_public("secret-handle")
        assert total == 0


class TestProfileRepo:
    def test_round_trip(self, db_path, make_user):
        user = make_user()
        repo = SQLiteProfileRepo(db_path)
        repo.save(
            Profile(
                user_id=user.id,
                bio="Hello",
                skills=["Python", "SQL"],
                visibility=VisibilitySettings(show_links=False),
            )
        )

        stored = repo.get(user.id)
        assert stored.bio == "Hello"
        assert stored.skills == ["Python", "SQL"]
        assert stored.visibility.show_links is False
        assert stored.visibility.show_titles is True


class TestCollectionRepo:
    def test_replace_keeps_array_order(self, db_path, make_user):
        user = make_user()
        repo = SQLiteCollectionRepo(db_path)

        repo.replace_all(user.id, "links", links("c", "a", "b"))
        assert [i.id for i in repo.list(user.id, "links")] == ["c", "a", "b"]

        repo.replace_all(user.id, "links", links("b", "c"))
        assert [i.id for i in repo.list(user.id, "links")] == ["b", "c"]
        assert repo.list_ids(user.id, "links") == {"b", "c"}

    def test_collections_are_separate(self, db_path, make_user):
        user = make_user()
        repo = SQLiteCollectionRepo(db_path)
        repo.replace_all(user.id, "links", links("a"))
        repo.replace_all(
            user.id,
            "portfolio",
            [PortfolioProject(id="p1", title="Site")],
        )

        repo.replace_all(user.id, "links", [])

        assert repo.count(user.id, "links") == 0
        assert repo.count(user.id, "portfolio") == 1

    def test_nested_children_keep_order(self, db_path, make_user):
        user = make_user()
        repo = SQLiteCollectionRepo(db_path)
        project = PortfolioProject(
            id="p1",
            title="Gallery",
            images=[
                PortfolioImage(id="i2", url="https://img.example/2.png"),
                PortfolioImage(id="i1", url="https://img.example/1.png"),
            ],
        )
        repo.replace_all(user.id, "portfolio", [project])

        stored = repo.list(user.id, "portfolio")[0]
        assert [img.id for img in stored.images] == ["i2", "i1"]

    def test_failed_replace_changes_nothing(self, db_path, make_user):
        user = make_user()
        repo = SQLiteCollectionRepo(db_path)
        repo.replace_all(user.id, "links", links("a", "b"))

        with pytest.raises(sqlite3.IntegrityError):
            repo.replace_all(user.id, "links", links("x", "x"))

        assert [i.id for i in repo.list(user.id, "links")] == ["a", "b"]


class TestStarRepo:
    def test_one_star_per_visitor(self, db_path, make_user):
        user = make_user()
        repo = SQLiteStarRepo(db_path)

        assert repo.add(ProfileStar(user_id=user.id, visitor_ip="1.2.3.4")) is True
        assert repo.add(ProfileStar(user_id=user.id, visitor_ip="1.2.3.4")) is False
        assert repo.add(ProfileStar(user_id=user.id, visitor_ip="5.6.7.8")) is True
        assert repo.count(user.id) == 2


class TestAdminRepo:
    def test_lookup_and_last_login(self, db_path, make_admin):
        admin = make_admin("ops1", role="super_admin")
        repo = SQLiteAdminRepo(db_path)

        assert repo.get_by_email("OPS1@example.com").id == admin.id
        assert repo.get_by_username("Ops1").role == "super_admin"

        stamp = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        repo.save(admin.model_copy(update={"last_login": stamp, "is_active": False}))

        stored = repo.get_by_id(admin.id)
        assert stored.last_login == stamp
        assert stored.is_active is False
        assert repo.count() == 1


class TestActivityRepo:
    def _seed(self, repo, n):
        start = datetime(2026, 1, 1, tzinfo=UTC)
        for i in range(n):
            repo.save(
                AdminActivity(
                    id=uuid4(),
                    admin_id=None,
                    action="view_users" if i % 2 else "login",
                    created_at=start + timedelta(minutes=i),
                    details={"n": i},
                )
            )

    def test_list_newest_first_with_filters(self, db_path):
        repo = SQLiteActivityRepo(db_path)
        self._seed(repo, 6)

        items, total = repo.list(limit=2)
        assert total == 6
        assert [a.details["n"] for a in items] == [5, 4]

        items, total = repo.list(action="login")
        assert total == 3
        assert all(a.action == "login" for a in items)

    def test_delete_all_except_recent(self, db_path):
        repo = SQLiteActivityRepo(db_path)
        self._seed(repo, 15)

        deleted = repo.delete_all_except_recent(10)

        assert deleted == 5
        items, total = repo.list(limit=20)
        assert total == 10
        assert min(a.details["n"] for a in items) == 5
