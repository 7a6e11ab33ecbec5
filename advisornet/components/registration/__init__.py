"""
Registration component - invite-gated sign-up producing a pending profile.
"""

from .component import run, run_register, validate_fields
from .models import RegisterInput, RegisterOutput
from .ports import (
    FileStorePort,
    InviteTokenRepoPort,
    PasswordHasherPort,
    ProfileRepoPort,
    TimePort,
    UserRepoPort,
)

__all__ = [
    # Entry points
    "run",
    "run_register",
    "validate_fields",
    # Models
    "RegisterInput",
    "RegisterOutput",
    # Ports
    "FileStorePort",
    "InviteTokenRepoPort",
    "PasswordHasherPort",
    "ProfileRepoPort",
    "TimePort",
    "UserRepoPort",
]
