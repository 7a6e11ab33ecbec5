from dataclasses import dataclass

from advisornet.domain.entities import Profile, User
from advisornet.domain.uploads import UploadedFile


@dataclass
class RegisterInput:
    email: str
    password: str
    confirm_password: str
    full_name: str
    user_type: str
    token: str | None
    contact_number: str | None = None
    organisation: str | None = None
    avatar: UploadedFile | None = None


@dataclass
class RegisterOutput:
    user: User | None = None
    profile: Profile | None = None
    avatar_skipped: bool = False
    success: bool = False
    error: str | None = None
    code: str | None = None
