from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from advisornet.domain.entities import Profile, User
from advisornet.domain.uploads import UploadedFile


@dataclass
class GetProfileInput:
    viewer: User
    profile_id: UUID


@dataclass
class UpdateProfileInput:
    user: User
    fields: dict[str, Any] = field(default_factory=dict)


@dataclass
class UploadAvatarInput:
    user: User
    file: UploadedFile


@dataclass
class SessionContextInput:
    user: User


@dataclass
class ProfileOutput:
    profile: Profile | None = None
    success: bool = False
    error: str | None = None
    code: str | None = None


@dataclass
class SessionContextOutput:
    user: User | None = None
    profile: Profile | None = None
    is_admin: bool = False
    is_approved: bool = False
    success: bool = False
    error: str | None = None
