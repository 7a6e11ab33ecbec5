from datetime import datetime
from typing import Protocol
from uuid import UUID

from advisornet.domain.entities import InviteToken


class InviteTokenRepoPort(Protocol):
    def save(self, token: InviteToken) -> InviteToken: ...
    def get_by_id(self, token_id: UUID) -> InviteToken | None: ...
    def get_by_token(self, token: str) -> InviteToken | None: ...
    def list_all(self) -> list[InviteToken]: ...
    def deactivate_all_except(self, token_id: UUID) -> None: ...
    def delete(self, token_id: UUID) -> None: ...


class TimePort(Protocol):
    """Port for time operations - enables deterministic testing."""

    def now_utc(self) -> datetime:
        """Get current UTC time."""
        ...
