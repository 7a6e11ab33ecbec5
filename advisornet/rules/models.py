from typing import Literal

from pydantic import BaseModel, Field


class ProjectRules(BaseModel):
    slug: str
    rules_version: str
    brand_name: str


class PasswordRules(BaseModel):
    # Shell and API both hash with argon2
    algorithm: Literal["argon2"]
    min_length: int


class SessionCookieRules(BaseModel):
    secure: bool
    http_only: bool
    same_site: str


class SessionsRules(BaseModel):
    ttl_minutes: int
    token_algorithm: Literal["HS256", "HS384", "HS512"] = "HS256"
    cookie: SessionCookieRules


class AuthRules(BaseModel):
    password: PasswordRules
    sessions: SessionsRules


class RbacRules(BaseModel):
    roles: dict[str, list[str]]
    public_permissions: list[str]


class InviteRules(BaseModel):
    default_days_valid: int
    token_bytes: int = Field(ge=8)
    exclusive_activation: bool
    registration_path: str


class BucketRules(BaseModel):
    allowlist_mime_types: list[str]


class UploadsRules(BaseModel):
    max_upload_bytes: int
    buckets: dict[str, BucketRules]


class ConnectionRules(BaseModel):
    notify_by_email: bool
    bio_preview_chars: int
    connections_path: str


class AdminBootstrapRules(BaseModel):
    enabled_if_no_users: bool
    required_env_when_enabled: list[str]


class OpsRules(BaseModel):
    data_dir_required: bool
    required_env: list[str]
    bootstrap_admin: AdminBootstrapRules


class Rules(BaseModel):
    project: ProjectRules
    auth: AuthRules
    rbac: RbacRules
    invites: InviteRules
    uploads: UploadsRules
    connections: ConnectionRules
    ops: OpsRules
