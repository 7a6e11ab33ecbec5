from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from advisornet.domain.entities import ConnectionStatus, PublicationType, UserType


# --- Auth ---
class Token(BaseModel):
    access_token: str
    token_type: str


class UserResponse(BaseModel):
    id: UUID
    email: str
    roles: list[str] = []
    status: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


# --- Profiles ---
class ProfileResponse(BaseModel):
    id: UUID
    user_id: UUID
    email: str
    full_name: str
    user_type: UserType
    approval_status: str
    headline: str | None = None
    bio: str | None = None
    location: str | None = None
    organisation: str | None = None
    contact_number: str | None = None
    avatar_url: str | None = None
    linkedin_url: str | None = None
    website_url: str | None = None
    expertise: list[str] = []
    industry_expertise: list[str] = []
    mentoring_areas: list[str] = []
    languages: list[str] = []
    research_areas: list[str] = []
    services: list[str] = []
    education: str | None = None
    experience: str | None = None
    company_type: str | None = None
    company_size: str | None = None
    founded_year: int | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MeResponse(BaseModel):
    user: UserResponse
    profile: ProfileResponse | None = None
    is_admin: bool
    is_approved: bool


# --- Registration ---
class InviteValidationResponse(BaseModel):
    valid: bool
    error: str | None = None


class RegisterResponse(BaseModel):
    user: UserResponse
    profile: ProfileResponse
    avatar_skipped: bool = False


# --- Invites ---
class InviteResponse(BaseModel):
    id: UUID
    token: str
    is_active: bool
    expires_at: datetime
    used_at: datetime | None = None
    used_by: UUID | None = None
    created_at: datetime
    url: str | None = None

    model_config = ConfigDict(from_attributes=True)


class InviteCreateRequest(BaseModel):
    token: str | None = None
    days_valid: int | None = None
    expires_at: datetime | None = None
    is_active: bool = True


class InviteUpdateRequest(BaseModel):
    is_active: bool | None = None
    expires_at: datetime | None = None


# --- Directory ---
class DirectoryResponse(BaseModel):
    profiles: list[ProfileResponse]
    locations: list[str]
    total: int


# --- Connections ---
class ConnectionResponse(BaseModel):
    id: UUID
    sender_id: UUID
    receiver_id: UUID
    status: ConnectionStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConnectionCreateRequest(BaseModel):
    receiver_id: UUID


class ConnectionCreateResponse(BaseModel):
    connection: ConnectionResponse
    email_sent: bool


class ConnectionRespondRequest(BaseModel):
    status: str


class ConnectionSummaryResponse(BaseModel):
    connection: ConnectionResponse
    counterpart: ProfileResponse | None = None
    direction: Literal["sent", "received"]


class ConnectionListResponse(BaseModel):
    accepted: list[ConnectionSummaryResponse]
    pending_sent: list[ConnectionSummaryResponse]
    pending_received: list[ConnectionSummaryResponse]


class ConnectionStatusResponse(BaseModel):
    status: str
    connection_id: UUID | None = None


# --- Publications ---
class PublicationResponse(BaseModel):
    id: UUID
    profile_id: UUID
    title: str
    description: str | None = None
    publication_type: PublicationType
    file_url: str | None = None
    external_url: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
