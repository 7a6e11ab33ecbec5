"""
Profiles component - profile detail, self-edit, avatar and session context.
"""

from .component import (
    run,
    run_get_profile,
    run_session_context,
    run_update_profile,
    run_upload_avatar,
)
from .models import (
    GetProfileInput,
    ProfileOutput,
    SessionContextInput,
    SessionContextOutput,
    UpdateProfileInput,
    UploadAvatarInput,
)
from .ports import FileStorePort, ProfileRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_get_profile",
    "run_update_profile",
    "run_upload_avatar",
    "run_session_context",
    # Models
    "GetProfileInput",
    "UpdateProfileInput",
    "UploadAvatarInput",
    "SessionContextInput",
    "ProfileOutput",
    "SessionContextOutput",
    # Ports
    "FileStorePort",
    "ProfileRepoPort",
    "TimePort",
]
