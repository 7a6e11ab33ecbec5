from dataclasses import dataclass

from advisornet.domain.entities import Profile, User


@dataclass
class LoginInput:
    email: str
    password: str


@dataclass
class BootstrapAdminInput:
    email: str
    password: str


@dataclass
class AuthOutput:
    user: User | None = None
    profile: Profile | None = None
    token: str | None = None
    success: bool = False
    error: str | None = None
    code: str | None = None


@dataclass
class BootstrapOutput:
    user: User | None = None
    created: bool = False
    success: bool = False
    error: str | None = None
