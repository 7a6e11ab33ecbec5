"""
Invite component - invitation token validation and admin lifecycle.
"""

from .component import (
    INVALID_INVITATION,
    build_invite_url,
    is_usable,
    run,
    run_create,
    run_delete,
    run_list,
    run_mark_used,
    run_update,
    run_validate,
)
from .models import (
    CreateInviteInput,
    DeleteInviteInput,
    InviteListOutput,
    InviteOutput,
    ListInvitesInput,
    MarkUsedInput,
    UpdateInviteInput,
    ValidateInviteInput,
    ValidateInviteOutput,
)
from .ports import InviteTokenRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_validate",
    "run_mark_used",
    "run_create",
    "run_update",
    "run_delete",
    "run_list",
    "is_usable",
    "build_invite_url",
    "INVALID_INVITATION",
    # Input models
    "ValidateInviteInput",
    "MarkUsedInput",
    "CreateInviteInput",
    "UpdateInviteInput",
    "DeleteInviteInput",
    "ListInvitesInput",
    # Output models
    "ValidateInviteOutput",
    "InviteOutput",
    "InviteListOutput",
    # Ports
    "InviteTokenRepoPort",
    "TimePort",
]
