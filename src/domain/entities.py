from datetime import datetime
from typing import Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
UserStatus = Literal["active", "disabled"]
AuthProvider = Literal["credentials", "google"]
AdminRole = Literal["admin", "super_admin"]
EducationType = Literal["degree", "certification", "course", "bootcamp", "other"]

# --- User & Profile ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    username: str | None = None
    name: str
    password_hash: str | None = None
    google_id: str | None = None
    avatar_url: str | None = None
    auth_provider: AuthProvider = "credentials"
    status: UserStatus = "active"
    total_views: int = 0
    total_clicks: int = 0
    instant_message_subject: str = ""
    instant_message_body: str = ""
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

class VisibilitySettings(BaseModel):
    show_links: bool = True
    show_experience: bool = True
    show_portfolio: bool = True
    show_education: bool = True
    show_achievements: bool = True
    show_extracurriculars: bool = True
    show_titles: bool = True

class Profile(BaseModel):
    user_id: UUID
    job_title: str = ""
    bio: str = ""
    website: str = ""
    location: str = ""
    profile_image_url: str = ""
    resume_url: str = ""
    skills: list[str] = Field(default_factory=list)
    visibility: VisibilitySettings = Field(default_factory=VisibilitySettings)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

class ProfileStar(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    visitor_ip: str
    created_at: datetime = Field(default_factory=datetime.utcnow)

# --- Ordered collection items ---
# Position is implicitly defined by list order; ids are strings so the editor
# can mint temporary ids before the server assigns real ones.

class LinkItem(BaseModel):
    id: str = ""
    title: str
    url: str
    description: str = ""
    icon_name: str = "Link"
    image_url: str = ""
    project_details: str = ""

class WorkProject(BaseModel):
    id: str = ""
    title: str
    description: str = ""
    technologies: list[str] = Field(default_factory=list)

class WorkExperience(BaseModel):
    id: str = ""
    company: str
    position: str
    duration: str = ""
    start_date: str | None = None
    end_date: str | None = None
    location: str = ""
    description: str = ""
    icon_name: str = "Building"
    achievements: list[str] = Field(default_factory=list)
    projects: list[WorkProject] = Field(default_factory=list)

class Education(BaseModel):
    id: str = ""
    institution: str
    degree: str
    duration: str = ""
    start_date: str | None = None
    end_date: str | None = None
    location: str = ""
    description: str = ""
    education_type: EducationType = "degree"
    gpa: str = ""
    achievements: list[str] = Field(default_factory=list)
    courses: list[str] = Field(default_factory=list)
    icon_name: str = "GraduationCap"
    image_url: str = ""
    website_url: str = ""

class PortfolioImage(BaseModel):
    id: str = ""
    url: str
    title: str = ""
    description: str = ""

class PortfolioProject(BaseModel):
    id: str = ""
    title: str
    description: str = ""
    category: str = ""
    url: str = ""
    icon_name: str = "FolderOpen"
    images: list[PortfolioImage] = Field(default_factory=list)

class Achievement(BaseModel):
    id: str = ""
    title: str
    organization: str = ""
    duration: str = ""
    start_date: str | None = None
    end_date: str | None = None
    location: str = ""
    description: str = ""
    type: str = ""
    skills_involved: list[str] = Field(default_factory=list)
    key_points: list[str] = Field(default_factory=list)
    icon_name: str = "Trophy"
    image_url: str = ""
    website_url: str = ""

class Extracurricular(BaseModel):
    id: str = ""
    activity_name: str
    organization: str = ""
    duration: str = ""
    start_date: str | None = None
    end_date: str | None = None
    location: str = ""
    role: str = ""
    description: str = ""
    type: str = ""
    responsibilities: list[str] = Field(default_factory=list)
    achievements: list[str] = Field(default_factory=list)
    skills_developed: list[str] = Field(default_factory=list)
    icon_name: str = "Users"
    image_url: str = ""
    website_url: str = ""

OrderedItem = (
    LinkItem | WorkExperience | Education | PortfolioProject | Achievement | Extracurricular
)

# --- Admin ---

class Admin(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    username: str
    name: str
    password_hash: str
    role: AdminRole = "admin"
    is_active: bool = True
    created_by_admin_id: UUID | None = None
    last_login: datetime | None = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

class AdminActivity(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    admin_id: UUID | None
    action: str
    target_user_id: str | None = None
    ip_address: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.utcnow)
