"""
Auth component - sign-in and day-0 admin bootstrap.
"""

from .component import INVALID_CREDENTIALS, run, run_bootstrap_admin, run_login
from .models import AuthOutput, BootstrapAdminInput, BootstrapOutput, LoginInput
from .ports import (
    AuthAdapterPort,
    PasswordHasherPort,
    ProfileRepoPort,
    TimePort,
    UserRepoPort,
)

__all__ = [
    # Entry points
    "run",
    "run_login",
    "run_bootstrap_admin",
    "INVALID_CREDENTIALS",
    # Models
    "LoginInput",
    "BootstrapAdminInput",
    "AuthOutput",
    "BootstrapOutput",
    # Ports
    "AuthAdapterPort",
    "PasswordHasherPort",
    "ProfileRepoPort",
    "TimePort",
    "UserRepoPort",
]
