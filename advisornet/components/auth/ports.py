from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from advisornet.domain.entities import Profile, User


class UserRepoPort(Protocol):
    def get_by_email(self, email: str) -> User | None: ...
    def save(self, user: User) -> User: ...
    def count(self) -> int: ...


class ProfileRepoPort(Protocol):
    def get_by_user_id(self, user_id: UUID) -> Profile | None: ...


class PasswordHasherPort(Protocol):
    def hash_password(self, password: str) -> str: ...


class AuthAdapterPort(Protocol):
    def hash_password(self, password: str) -> str: ...
    def verify_password(self, plain: str, hashed: str) -> bool: ...
    def create_token(self, user_id: Any, ttl_minutes: int) -> str: ...


class TimePort(Protocol):
    def now_utc(self) -> datetime: ...
