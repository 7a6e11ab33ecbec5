"""
Approval component - admin moderation of new profiles and the approval gate.
"""

from .component import (
    PENDING_MESSAGE,
    REJECTED_MESSAGE,
    run,
    run_check_access,
    run_decide,
    run_list_pending,
)
from .models import (
    AccessCheckInput,
    AccessOutput,
    DecideInput,
    ListPendingInput,
    ProfileListOutput,
    ProfileOutput,
)
from .ports import ProfileRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_check_access",
    "run_decide",
    "run_list_pending",
    "PENDING_MESSAGE",
    "REJECTED_MESSAGE",
    # Models
    "AccessCheckInput",
    "AccessOutput",
    "DecideInput",
    "ListPendingInput",
    "ProfileListOutput",
    "ProfileOutput",
    # Ports
    "ProfileRepoPort",
    "TimePort",
]
