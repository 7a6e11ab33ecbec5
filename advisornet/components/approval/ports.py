from datetime import datetime
from typing import Protocol
from uuid import UUID

from advisornet.domain.entities import ApprovalStatus, Profile


class ProfileRepoPort(Protocol):
    def get_by_id(self, profile_id: UUID) -> Profile | None: ...
    def list_by_status(self, approval_status: ApprovalStatus) -> list[Profile]: ...
    def save(self, profile: Profile) -> Profile: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
