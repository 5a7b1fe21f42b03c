from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from src.domain.entities import Admin, AdminActivity, Profile, User

AdminRole = Literal["admin", "super_admin"]


# --- Envelope ---
def envelope(data: dict[str, Any] | None = None, message: str | None = None) -> dict[str, Any]:
    return {"success": True, "message": message, "data": data}


# --- Auth ---
class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str
    username: str


class GoogleLoginRequest(BaseModel):
    google_token: str
    username: str | None = None


# --- Profile ---
class BasicInfoRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    job_title: str | None = None
    bio: str | None = None
    website: str | None = None
    location: str | None = None
    profile_image_url: str | None = None
    resume_url: str | None = None
    skills: list[str] | None = None


class AccountRequest(BaseModel):
    name: str | None = None
    username: str | None = None


class InstantMessageRequest(BaseModel):
    instant_message_subject: str | None = None
    instant_message_body: str | None = None


# --- Admin ---
class AdminLoginRequest(BaseModel):
    email: str
    password: str


class UserStatusRequest(BaseModel):
    is_active: bool


class CreateAdminRequest(BaseModel):
    email: str
    username: str
    name: str
    password: str
    role: AdminRole = "admin"


# --- Serializers ---
def user_to_dict(user: User, include_email: bool = True) -> dict[str, Any]:
    data = user.model_dump(mode="json", exclude={"password_hash", "google_id"})
    if not include_email:
        data.pop("email", None)
    return data


def profile_to_dict(profile: Profile | None) -> dict[str, Any]:
    if profile is None:
        return {}
    return profile.model_dump(mode="json", exclude={"user_id"})


def collections_to_dict(collections: dict[str, list[BaseModel]]) -> dict[str, Any]:
    return {name: [i.model_dump(mode="json") for i in items] for name, items in collections.items()}


def admin_to_dict(admin: Admin) -> dict[str, Any]:
    return admin.model_dump(mode="json", exclude={"password_hash"})


def activity_to_dict(activity: AdminActivity) -> dict[str, Any]:
    return activity.model_dump(mode="json")
