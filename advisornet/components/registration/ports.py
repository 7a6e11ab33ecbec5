from datetime import datetime
from typing import Protocol
from uuid import UUID

from advisornet.domain.entities import InviteToken, Profile, User


class UserRepoPort(Protocol):
    def get_by_email(self, email: str) -> User | None: ...
    def save(self, user: User) -> User: ...
    def delete(self, user_id: UUID) -> None: ...


class ProfileRepoPort(Protocol):
    def save(self, profile: Profile) -> Profile: ...


class InviteTokenRepoPort(Protocol):
    def save(self, token: InviteToken) -> InviteToken: ...
    def get_by_id(self, token_id: UUID) -> InviteToken | None: ...
    def get_by_token(self, token: str) -> InviteToken | None: ...


class PasswordHasherPort(Protocol):
    def hash_password(self, password: str) -> str: ...


class FileStorePort(Protocol):
    def save(self, bucket: str, path: str, data: bytes) -> str: ...
    def delete(self, bucket: str, path: str) -> None: ...
    def public_url(self, bucket: str, path: str) -> str: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
