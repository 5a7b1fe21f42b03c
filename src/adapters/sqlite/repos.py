import builtins
import json
import sqlite3
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel

from src.domain.collections import ITEM_MODELS, CollectionType
from src.domain.entities import (
    Admin,
    AdminActivity,
    Profile,
    ProfileStar,
    User,
    VisibilitySettings,
)


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def parse_dt(s: str | None) -> datetime | None:
    return datetime.fromisoformat(s) if s else None


class _SQLiteRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = dict_factory
        conn.execute("PRAGMA foreign_keys = ON;")
        return conn


class SQLiteUserRepo(_SQLiteRepo):
    def save(self, user: User) -> User:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO users (
                    id, email, username, name, password_hash, google_id, avatar_url,
                    auth_provider, status, total_views, total_clicks,
                    instant_message_subject, instant_message_body, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    username=excluded.username,
                    name=excluded.name,
                    password_hash=excluded.password_hash,
                    google_id=excluded.google_id,
                    avatar_url=excluded.avatar_url,
                    auth_provider=excluded.auth_provider,
                    status=excluded.status,
                    instant_message_subject=excluded.instant_message_subject,
                    instant_message_body=excluded.instant_message_body,
                    updated_at=excluded.updated_at
            """,
                (
                    str(user.id),
                    user.email,
                    user.username,
                    user.name,
                    user.password_hash,
                    user.google_id,
                    user.avatar_url,
                    user.auth_provider,
                    user.status,
                    user.total_views,
                    user.total_clicks,
                    user.instant_message_subject,
                    user.instant_message_body,
                    user.created_at.isoformat(),
                    user.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return user
        finally:
            conn.close()

    def get_by_id(self, user_id: UUID) -> User | None:
        return self._get_one("SELECT * FROM users WHERE id = ?", (str(user_id),))

    def get_by_email(self, email: str) -> User | None:
        return self._get_one("SELECT * FROM users WHERE email = ?", (email.lower(),))

    def get_by_username(self, username: str) -> User | None:
        return self._get_one("SELECT * FROM users WHERE username = ?", (username.lower(),))

    def get_by_google_id(self, google_id: str) -> User | None:
        return self._get_one("SELECT * FROM users WHERE google_id = ?", (google_id,))

    def search(
        self,
        query: str = "",
        status: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[builtins.list[User], int]:
        where = "WHERE 1=1"
        params: list[Any] = []
        if query:
            like = f"%{query.lower()}%"
            where += (
                " AND (LOWER(name) LIKE ? OR LOWER(email) LIKE ?"
                " OR LOWER(COALESCE(username, '')) LIKE ?)"
            )
            params.extend([like, like, like])
        if status:
            where += " AND status = ?"
            params.append(status)

        conn = self._get_conn()
        try:
            total = conn.execute(f"SELECT COUNT(*) AS n FROM users {where}", params).fetchone()["n"]
            rows = conn.execute(
                f"SELECT * FROM users {where} ORDER BY created_at DESC LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()
            return [self._map_row(row) for row in rows], total
        finally:
            conn.close()

    def search_public(
        self, query: str = "", limit: int = 20, offset: int = 0
    ) -> tuple[builtins.list[User], int]:
        """Active users matching name, username, bio or job title; most starred first."""
        where = "WHERE u.status = 'active' AND u.username IS NOT NULL"
        params: list[Any] = []
        if query:
            like = f"%{query.lower()}%"
            where += (
                " AND (LOWER(u.name) LIKE ? OR LOWER(u.username) LIKE ?"
                " OR LOWER(COALESCE(p.bio, '')) LIKE ?"
                " OR LOWER(COALESCE(p.job_title, '')) LIKE ?)"
            )
            params.extend([like, like, like, like])

        base = f"FROM users u LEFT JOIN profiles p ON p.user_id = u.id {where}"
        conn = self._get_conn()
        try:
            total = conn.execute(f"SELECT COUNT(*) AS n {base}", params).fetchone()["n"]
            rows = conn.execute(
                f"""
                SELECT u.* {base}
                ORDER BY (SELECT COUNT(*) FROM profile_stars s WHERE s.user_id = u.id) DESC,
                    u.created_at DESC
                LIMIT ? OFFSET ?
            """,
                [*params, limit, offset],
            ).fetchall()
            return [self._map_row(row) for row in rows], total
        finally:
            conn.close()

    def count(self, status: str | None = None) -> int:
        conn = self._get_conn()
        try:
            if status:
                row = conn.execute(
                    "SELECT COUNT(*) AS n FROM users WHERE status = ?", (status,)
                ).fetchone()
            else:
                row = conn.execute("SELECT COUNT(*) AS n FROM users").fetchone()
            return int(row["n"])
        finally:
            conn.close()

    def increment_counter(self, user_id: UUID, counter: str) -> None:
        if counter not in ("total_views", "total_clicks"):
            raise ValueError(f"Unknown counter: {counter}")
        conn = self._get_conn()
        try:
            conn.execute(
                f"UPDATE users SET {counter} = {counter} + 1 WHERE id = ?", (str(user_id),)
            )
            conn.commit()
        finally:
            conn.close()

    def _get_one(self, query: str, params: tuple[Any, ...]) -> User | None:
        conn = self._get_conn()
        try:
            row = conn.execute(query, params).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> User:
        return User(
            id=UUID(row["id"]),
            email=row["email"],
            username=row["username"],
            name=row["name"],
            password_hash=row["password_hash"],
            google_id=row["google_id"],
            avatar_url=row["avatar_url"],
            auth_provider=row["auth_provider"],
            status=row["status"],
            total_views=row["total_views"],
            total_clicks=row["total_clicks"],
            instant_message_subject=row["instant_message_subject"],
            instant_message_body=row["instant_message_body"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


class SQLiteProfileRepo(_SQLiteRepo):
    def get(self, user_id: UUID) -> Profile | None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT * FROM profiles WHERE user_id = ?", (str(user_id),)
            ).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def save(self, profile: Profile) -> Profile:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO profiles (
                    user_id, job_title, bio, website, location, profile_image_url,
                    resume_url, skills_json, visibility_json, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id) DO UPDATE SET
                    job_title=excluded.job_title,
                    bio=excluded.bio,
                    website=excluded.website,
                    location=excluded.location,
                    profile_image_url=excluded.profile_image_url,
                    resume_url=excluded.resume_url,
                    skills_json=excluded.skills_json,
                    visibility_json=excluded.visibility_json,
                    updated_at=excluded.updated_at
            """,
                (
                    str(profile.user_id),
                    profile.job_title,
                    profile.bio,
                    profile.website,
                    profile.location,
                    profile.profile_image_url,
                    profile.resume_url,
                    json.dumps(profile.skills),
                    profile.visibility.model_dump_json(),
                    profile.updated_at.isoformat(),
                ),
            )
            conn.commit()
            return profile
        finally:
            conn.close()

    def count(self) -> int:
        conn = self._get_conn()
        try:
            return int(conn.execute("SELECT COUNT(*) AS n FROM profiles").fetchone()["n"])
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Profile:
        return Profile(
            user_id=UUID(row["user_id"]),
            job_title=row["job_title"],
            bio=row["bio"],
            website=row["website"],
            location=row["location"],
            profile_image_url=row["profile_image_url"],
            resume_url=row["resume_url"],
            skills=json.loads(row["skills_json"]),
            visibility=VisibilitySettings.model_validate_json(row["visibility_json"] or "{}"),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )


class SQLiteCollectionRepo(_SQLiteRepo):
    """
    Ordered profile collections.

    Items are stored as JSON with their array index as position; a save
    replaces the whole (user, collection) array in a single transaction.
    """

    def replace_all(
        self,
        user_id: UUID,
        collection: CollectionType,
        items: builtins.list[BaseModel],
    ) -> builtins.list[BaseModel]:
        conn = self._get_conn()
        try:
            conn.execute(
                "DELETE FROM collection_items WHERE user_id = ? AND collection = ?",
                (str(user_id), collection),
            )
            for i, item in enumerate(items):
                conn.execute(
                    """
                    INSERT INTO collection_items (id, user_id, collection, position, data_json)
                    VALUES (?, ?, ?, ?, ?)
                """,
                    (
                        str(getattr(item, "id")),
                        str(user_id),
                        collection,
                        i,
                        item.model_dump_json(),
                    ),
                )
            conn.commit()
            return items
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def list(self, user_id: UUID, collection: CollectionType) -> builtins.list[BaseModel]:
        model = ITEM_MODELS[collection]
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT data_json FROM collection_items "
                "WHERE user_id = ? AND collection = ? ORDER BY position ASC",
                (str(user_id), collection),
            ).fetchall()
            return [model.model_validate_json(row["data_json"]) for row in rows]
        finally:
            conn.close()

    def list_ids(self, user_id: UUID, collection: CollectionType) -> set[str]:
        conn = self._get_conn()
        try:
            rows = conn.execute(
                "SELECT id FROM collection_items WHERE user_id = ? AND collection = ?",
                (str(user_id), collection),
            ).fetchall()
            return {row["id"] for row in rows}
        finally:
            conn.close()

    def count(self, user_id: UUID, collection: CollectionType) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM collection_items WHERE user_id = ? AND collection = ?",
                (str(user_id), collection),
            ).fetchone()
            return int(row["n"])
        finally:
            conn.close()


class SQLiteStarRepo(_SQLiteRepo):
    def add(self, star: ProfileStar) -> bool:
        """Record a star. Returns False when this visitor already starred the profile."""
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                "INSERT OR IGNORE INTO profile_stars (id, user_id, visitor_ip, created_at) "
                "VALUES (?, ?, ?, ?)",
                (str(star.id), str(star.user_id), star.visitor_ip, star.created_at.isoformat()),
            )
            conn.commit()
            return cursor.rowcount == 1
        finally:
            conn.close()

    def count(self, user_id: UUID) -> int:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT COUNT(*) AS n FROM profile_stars WHERE user_id = ?", (str(user_id),)
            ).fetchone()
            return int(row["n"])
        finally:
            conn.close()


class SQLiteAdminRepo(_SQLiteRepo):
    def save(self, admin: Admin) -> Admin:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO admins (
                    id, email, username, name, password_hash, role, is_active,
                    created_by_admin_id, last_login, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    email=excluded.email,
                    username=excluded.username,
                    name=excluded.name,
                    password_hash=excluded.password_hash,
                    role=excluded.role,
                    is_active=excluded.is_active,
                    last_login=excluded.last_login
            """,
                (
                    str(admin.id),
                    admin.email,
                    admin.username,
                    admin.name,
                    admin.password_hash,
                    admin.role,
                    1 if admin.is_active else 0,
                    str(admin.created_by_admin_id) if admin.created_by_admin_id else None,
                    admin.last_login.isoformat() if admin.last_login else None,
                    admin.created_at.isoformat(),
                ),
            )
            conn.commit()
            return admin
        finally:
            conn.close()

    def get_by_id(self, admin_id: UUID) -> Admin | None:
        return self._get_one("SELECT * FROM admins WHERE id = ?", (str(admin_id),))

    def get_by_email(self, email: str) -> Admin | None:
        return self._get_one("SELECT * FROM admins WHERE email = ?", (email.lower(),))

    def get_by_username(self, username: str) -> Admin | None:
        return self._get_one("SELECT * FROM admins WHERE username = ?", (username.lower(),))

    def count(self) -> int:
        conn = self._get_conn()
        try:
            return int(conn.execute("SELECT COUNT(*) AS n FROM admins").fetchone()["n"])
        finally:
            conn.close()

    def _get_one(self, query: str, params: tuple[Any, ...]) -> Admin | None:
        conn = self._get_conn()
        try:
            row = conn.execute(query, params).fetchone()
            return self._map_row(row) if row else None
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> Admin:
        return Admin(
            id=UUID(row["id"]),
            email=row["email"],
            username=row["username"],
            name=row["name"],
            password_hash=row["password_hash"],
            role=row["role"],
            is_active=bool(row["is_active"]),
            created_by_admin_id=(
                UUID(row["created_by_admin_id"]) if row["created_by_admin_id"] else None
            ),
            last_login=parse_dt(row["last_login"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )


class SQLiteActivityRepo(_SQLiteRepo):
    def save(self, activity: AdminActivity) -> AdminActivity:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                INSERT INTO admin_activity_logs (
                    id, admin_id, action, target_user_id, ip_address, details_json, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
                (
                    str(activity.id),
                    str(activity.admin_id) if activity.admin_id else None,
                    activity.action,
                    activity.target_user_id,
                    activity.ip_address,
                    json.dumps(activity.details),
                    activity.created_at.isoformat(),
                ),
            )
            conn.commit()
            return activity
        finally:
            conn.close()

    def list(
        self,
        limit: int = 20,
        offset: int = 0,
        action: str | None = None,
        admin_id: UUID | None = None,
    ) -> tuple[builtins.list[AdminActivity], int]:
        where = "WHERE 1=1"
        params: list[Any] = []
        if action:
            where += " AND action = ?"
            params.append(action)
        if admin_id:
            where += " AND admin_id = ?"
            params.append(str(admin_id))

        conn = self._get_conn()
        try:
            total = conn.execute(
                f"SELECT COUNT(*) AS n FROM admin_activity_logs {where}", params
            ).fetchone()["n"]
            rows = conn.execute(
                f"SELECT * FROM admin_activity_logs {where} "
                "ORDER BY created_at DESC LIMIT ? OFFSET ?",
                [*params, limit, offset],
            ).fetchall()
            return [self._map_row(row) for row in rows], total
        finally:
            conn.close()

    def count(self) -> int:
        conn = self._get_conn()
        try:
            return int(
                conn.execute("SELECT COUNT(*) AS n FROM admin_activity_logs").fetchone()["n"]
            )
        finally:
            conn.close()

    def delete_all_except_recent(self, keep: int) -> int:
        """Delete every entry except the `keep` most recent. Returns the number deleted."""
        conn = self._get_conn()
        try:
            cursor = conn.execute(
                """
                DELETE FROM admin_activity_logs WHERE id NOT IN (
                    SELECT id FROM admin_activity_logs ORDER BY created_at DESC LIMIT ?
                )
            """,
                (keep,),
            )
            conn.commit()
            return cursor.rowcount
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _map_row(self, row: dict[str, Any]) -> AdminActivity:
        return AdminActivity(
            id=UUID(row["id"]),
            admin_id=UUID(row["admin_id"]) if row["admin_id"] else None,
            action=row["action"],
            target_user_id=row["target_user_id"],
            ip_address=row["ip_address"],
            details=json.loads(row["details_json"] or "{}"),
            created_at=datetime.fromisoformat(row["created_at"]),
        )
