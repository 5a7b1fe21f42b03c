from pydantic import BaseModel, Field

from src.domain.collections import COLLECTION_LIMITS, CollectionType


class ProjectRules(BaseModel):
    slug: str
    rules_version: str

class PasswordRules(BaseModel):
    min_length: int = 8
    admin_min_length: int = 8

class UsernameRules(BaseModel):
    min_length: int = 5
    max_length: int = 20
    pattern: str = r"^[a-z0-9-]+$"
    reserved: list[str] = Field(default_factory=list)

class TokenRules(BaseModel):
    user_ttl_minutes: int = 60 * 24 * 7
    admin_ttl_minutes: int = 60 * 8

class GoogleRules(BaseModel):
    enabled: bool = True
    client_id_env: str = "GOOGLE_CLIENT_ID"
    tokeninfo_url: str = "https://oauth2.googleapis.com/tokeninfo"

class AuthRules(BaseModel):
    password: PasswordRules = Field(default_factory=PasswordRules)
    username: UsernameRules = Field(default_factory=UsernameRules)
    tokens: TokenRules = Field(default_factory=TokenRules)
    google: GoogleRules = Field(default_factory=GoogleRules)

class FieldLimit(BaseModel):
    max: int
    required: bool = False

class CollectionRules(BaseModel):
    limits: dict[CollectionType, int] = Field(default_factory=lambda: dict(COLLECTION_LIMITS))
    allowed_url_schemes: list[str] = Field(default_factory=lambda: ["http", "https"])
    fields: dict[CollectionType, dict[str, FieldLimit]] = Field(default_factory=dict)

    def limit_for(self, collection: CollectionType) -> int:
        return self.limits.get(collection, COLLECTION_LIMITS[collection])

class ProfileRules(BaseModel):
    name_max: int = 100
    job_title_max: int = 100
    bio_max: int = 500
    location_max: int = 100
    max_skills: int = 30
    skill_max: int = 30
    instant_message_subject_max: int = 100
    instant_message_body_max: int = 500

class SuperAdminRules(BaseModel):
    default_email: str = "admin@example.com"
    default_username: str = "superadmin"
    default_name: str = "Super Administrator"
    default_password: str = "ChangeMe123!"

class AdminRules(BaseModel):
    activity_log_retention: int = 10
    page_size_default: int = 20
    page_size_max: int = 100
    super_admin: SuperAdminRules = Field(default_factory=SuperAdminRules)

class RateLimitWindow(BaseModel):
    window_seconds: int
    max_attempts: int | None = None
    max_requests: int | None = None

class RateLimitRules(BaseModel):
    login: RateLimitWindow
    star: RateLimitWindow

class MigrationRules(BaseModel):
    retries: int = 3
    delay_seconds: float = 2.0

class OpsRules(BaseModel):
    required_env: list[str] = Field(default_factory=list)
    production_required_env: list[str] = Field(default_factory=list)
    # Reverse proxies in front of the API whose X-Forwarded-For hop is trusted
    trusted_proxies: int = Field(default=0, ge=0)
    migrations: MigrationRules = Field(default_factory=MigrationRules)

class Rules(BaseModel):
    project: ProjectRules
    auth: AuthRules
    collections: CollectionRules
    profile: ProfileRules
    admin: AdminRules
    rate_limits: RateLimitRules
    ops: OpsRules
