from datetime import UTC, datetime
from typing import Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator

# --- Enums / Literals ---
RoleType = Literal["admin", "user"]
UserStatus = Literal["active", "disabled"]
UserType = Literal["advisor", "laboratory"]
ApprovalStatus = Literal["pending", "approved", "rejected"]
ConnectionStatus = Literal["pending", "accepted", "rejected"]
PublicationType = Literal[
    "paper", "presentation", "report", "thesis", "article", "patent", "other"
]

PUBLICATION_TYPES: tuple[str, ...] = (
    "paper",
    "presentation",
    "report",
    "thesis",
    "article",
    "patent",
    "other",
)

# Profile fields holding ordered tag lists
TAG_FIELDS: tuple[str, ...] = (
    "expertise",
    "industry_expertise",
    "mentoring_areas",
    "languages",
    "research_areas",
    "services",
)


def utcnow() -> datetime:
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


# --- Identity ---

class User(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    email: str
    password_hash: str
    roles: list[RoleType] = Field(default_factory=lambda: ["user"])
    status: UserStatus = "active"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class RoleAssignment(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    role: RoleType
    created_at: datetime = Field(default_factory=utcnow)


# --- Membership ---

class Profile(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    user_id: UUID
    email: str
    full_name: str
    user_type: UserType
    approval_status: ApprovalStatus = "pending"

    headline: str | None = None
    bio: str | None = None
    location: str | None = None
    organisation: str | None = None
    contact_number: str | None = None
    avatar_url: str | None = None
    linkedin_url: str | None = None
    website_url: str | None = None

    expertise: list[str] = Field(default_factory=list)
    industry_expertise: list[str] = Field(default_factory=list)
    mentoring_areas: list[str] = Field(default_factory=list)
    languages: list[str] = Field(default_factory=list)
    research_areas: list[str] = Field(default_factory=list)
    services: list[str] = Field(default_factory=list)

    education: str | None = None
    experience: str | None = None
    company_type: str | None = None
    company_size: str | None = None
    founded_year: int | None = None

    invite_token_id: UUID | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class InviteToken(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    token: str
    is_active: bool = True
    expires_at: datetime
    used_at: datetime | None = None
    used_by: UUID | None = None
    created_by: UUID | None = None
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("expires_at", "used_at", "created_at")
    @classmethod
    def _aware(cls, v: datetime | None) -> datetime | None:
        return as_utc(v) if v is not None else None


class Connection(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    sender_id: UUID
    receiver_id: UUID
    status: ConnectionStatus = "pending"
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def involves(self, profile_id: UUID) -> bool:
        return profile_id in (self.sender_id, self.receiver_id)

    def other_party(self, profile_id: UUID) -> UUID:
        return self.receiver_id if self.sender_id == profile_id else self.sender_id


class Publication(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    profile_id: UUID
    title: str
    description: str | None = None
    publication_type: PublicationType = "paper"
    file_url: str | None = None
    file_path: str | None = None  # storage key inside the publications bucket
    external_url: str | None = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
