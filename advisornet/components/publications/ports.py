from datetime import datetime
from typing import Protocol
from uuid import UUID

from advisornet.domain.entities import Profile, Publication


class PublicationRepoPort(Protocol):
    def save(self, publication: Publication) -> Publication: ...
    def get_by_id(self, publication_id: UUID) -> Publication | None: ...
    def list_by_profile(self, profile_id: UUID) -> list[Publication]: ...
    def delete(self, publication_id: UUID) -> None: ...


class ProfileRepoPort(Protocol):
    def get_by_user_id(self, user_id: UUID) -> Profile | None: ...


class FileStorePort(Protocol):
    def save(self, bucket: str, path: str, data: bytes) -> str: ...
    def delete(self, bucket: str, path: str) -> None: ...
    def public_url(self, bucket: str, path: str) -> str: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
