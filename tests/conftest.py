from pathlib import Path
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteAdminRepo, SQLiteProfileRepo, SQLiteUserRepo
from src.api import deps
from src.api.auth_utils import get_password_hash
from src.api.deps import Settings, get_settings
from src.domain.entities import Admin, Profile, User
from src.rules.loader import load_rules

ROOT = Path(__file__).resolve().parent.parent
RULES_PATH = ROOT / "rules.yaml"
MIGRATIONS_DIR = ROOT / "migrations"


@pytest.fixture
def rules():
    return load_rules(RULES_PATH)


@pytest.fixture
def db_path(tmp_path):
    """A fresh SQLite database with every migration applied."""
    path = str(tmp_path / "einfo.db")
    SQLiteMigrator(path, str(MIGRATIONS_DIR)).run_migrations()
    return path


@pytest.fixture
def make_user(db_path):
    """Insert an active credentials user (password "secret123") with an empty profile."""
    users = SQLiteUserRepo(db_path)
    profiles = SQLiteProfileRepo(db_path)

    def _make(username: str = "janedoe", **fields) -> User:
        user = User(
            id=uuid4(),
            email=fields.pop("email", f"{username}@example.com"),
            username=username,
            name=fields.pop("name", username.title()),
            password_hash=get_password_hash(fields.pop("password", "secret123")),
            **fields,
        )
        users.save(user)
        profiles.save(Profile(user_id=user.id))
        return user

    return _make


@pytest.fixture
def make_admin(db_path):
    """Insert an admin account (password "Admin1234")."""
    admins = SQLiteAdminRepo(db_path)

    def _make(username: str = "opsadmin", role: str = "admin") -> Admin:
        admin = Admin(
            id=uuid4(),
            email=f"{username}@example.com",
            username=username,
            name=username.title(),
            password_hash=get_password_hash("Admin1234"),
            role=role,
        )
        admins.save(admin)
        return admin

    return _make


@pytest.fixture
def client(db_path, tmp_path):
    """TestClient bound to the temporary database."""

    def _settings() -> Settings:
        s = Settings()
        s.data_dir = tmp_path
        s.db_path = db_path
        s.rules_path = RULES_PATH
        s.migrations_dir = MIGRATIONS_DIR
        return s

    from src.api.main import app

    deps._rate_limiter_instance = None
    app.dependency_overrides[get_settings] = _settings
    yield TestClient(app)
    app.dependency_overrides.clear()
    deps._rate_limiter_instance = None


@pytest.fixture
def auth_headers(client):
    """Log a user in through the API and return an Authorization header."""

    def _login(email: str, password: str = "secret123") -> dict[str, str]:
        resp = client.post("/api/auth/login", data={"username": email, "password": password})
        assert resp.status_code == 200, resp.text
        client.cookies.clear()
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _login


@pytest.fixture
def admin_headers(client):
    def _login(email: str, password: str = "Admin1234") -> dict[str, str]:
        resp = client.post("/api/admin/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        client.cookies.clear()
        return {"Authorization": f"Bearer {resp.json()['access_token']}"}

    return _login