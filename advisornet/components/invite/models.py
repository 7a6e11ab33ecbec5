from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from advisornet.domain.entities import InviteToken, User


@dataclass
class ValidateInviteInput:
    token: str | None


@dataclass
class MarkUsedInput:
    token_id: UUID
    user_id: UUID


@dataclass
class CreateInviteInput:
    actor: User
    token: str | None = None  # None = generate a random url-safe token
    days_valid: int | None = None
    expires_at: datetime | None = None
    is_active: bool = True


@dataclass
class UpdateInviteInput:
    actor: User
    token_id: UUID
    is_active: bool | None = None
    expires_at: datetime | None = None


@dataclass
class DeleteInviteInput:
    actor: User
    token_id: UUID


@dataclass
class ListInvitesInput:
    actor: User


@dataclass
class ValidateInviteOutput:
    valid: bool = False
    token_id: UUID | None = None
    success: bool = False
    error: str | None = None


@dataclass
class InviteOutput:
    invite: InviteToken | None = None
    success: bool = False
    error: str | None = None
    code: str | None = None


@dataclass
class InviteListOutput:
    invites: list[InviteToken] = field(default_factory=list)
    success: bool = False
    error: str | None = None
    code: str | None = None
