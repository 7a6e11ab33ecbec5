from dataclasses import dataclass, field
from uuid import UUID

from advisornet.domain.entities import Profile, User


@dataclass
class ListPendingInput:
    actor: User


@dataclass
class DecideInput:
    actor: User
    profile_id: UUID
    decision: str  # "approved" | "rejected"


@dataclass
class AccessCheckInput:
    user: User
    profile: Profile | None
    admin_route: bool = False


@dataclass
class ProfileListOutput:
    profiles: list[Profile] = field(default_factory=list)
    success: bool = False
    error: str | None = None
    code: str | None = None


@dataclass
class ProfileOutput:
    profile: Profile | None = None
    success: bool = False
    error: str | None = None
    code: str | None = None


@dataclass
class AccessOutput:
    allowed: bool = False
    error: str | None = None
