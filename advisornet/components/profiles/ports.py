from datetime import datetime
from typing import Protocol
from uuid import UUID

from advisornet.domain.entities import Profile


class ProfileRepoPort(Protocol):
    def get_by_id(self, profile_id: UUID) -> Profile | None: ...
    def get_by_user_id(self, user_id: UUID) -> Profile | None: ...
    def save(self, profile: Profile) -> Profile: ...


class FileStorePort(Protocol):
    def save(self, bucket: str, path: str, data: bytes) -> str: ...
    def delete(self, bucket: str, path: str) -> None: ...
    def public_url(self, bucket: str, path: str) -> str: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
