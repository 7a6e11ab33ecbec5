from dataclasses import dataclass, field
from typing import Literal
from uuid import UUID

from advisornet.domain.entities import Connection, Profile, User

ConnectionView = Literal["none", "pending_sent", "pending_received", "accepted", "rejected"]


@dataclass
class StatusResult:
    status: ConnectionView = "none"
    connection_id: UUID | None = None


@dataclass
class SendRequestInput:
    user: User
    sender: Profile
    receiver_id: UUID


@dataclass
class RespondInput:
    user: User
    actor: Profile
    connection_id: UUID
    status: str  # "accepted" | "rejected"


@dataclass
class RemoveInput:
    user: User
    actor: Profile
    connection_id: UUID


@dataclass
class StatusInput:
    user: User
    viewer: Profile
    target_id: UUID


@dataclass
class ListConnectionsInput:
    user: User
    viewer: Profile


@dataclass
class ConnectionSummary:
    connection: Connection
    counterpart: Profile | None
    direction: Literal["sent", "received"]


@dataclass
class ConnectionOutput:
    connection: Connection | None = None
    changed: bool = False
    email_sent: bool = False
    success: bool = False
    error: str | None = None
    code: str | None = None


@dataclass
class StatusOutput:
    result: StatusResult = field(default_factory=StatusResult)
    success: bool = False
    error: str | None = None
    code: str | None = None


@dataclass
class ConnectionListOutput:
    connections: list[ConnectionSummary] = field(default_factory=list)
    accepted: list[ConnectionSummary] = field(default_factory=list)
    pending_sent: list[ConnectionSummary] = field(default_factory=list)
    pending_received: list[ConnectionSummary] = field(default_factory=list)
    success: bool = False
    error: str | None = None
    code: str | None = None
