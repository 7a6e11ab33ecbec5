from collections.abc import Iterable
from datetime import datetime
from typing import Protocol
from uuid import UUID

from advisornet.domain.entities import Connection, Profile
from advisornet.ports.email import ConnectionRequestNotice, EmailResult


class ConnectionRepoPort(Protocol):
    def save(self, connection: Connection) -> Connection: ...
    def get_by_id(self, connection_id: UUID) -> Connection | None: ...
    def get_between(self, a: UUID, b: UUID) -> Connection | None: ...
    def list_for_profile(self, profile_id: UUID) -> list[Connection]: ...
    def delete(self, connection_id: UUID) -> None: ...


class ProfileRepoPort(Protocol):
    def get_by_id(self, profile_id: UUID) -> Profile | None: ...
    def get_many(self, profile_ids: Iterable[UUID]) -> dict[UUID, Profile]: ...


class EmailPort(Protocol):
    def send_connection_request(self, notice: ConnectionRequestNotice) -> EmailResult: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
