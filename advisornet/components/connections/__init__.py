"""
Connections component - request, respond, remove and status of member connections.
"""

from .component import (
    get_connection_status,
    run,
    run_list,
    run_remove,
    run_respond,
    run_send_request,
    run_status,
)
from .models import (
    ConnectionListOutput,
    ConnectionOutput,
    ConnectionSummary,
    ConnectionView,
    ListConnectionsInput,
    RemoveInput,
    RespondInput,
    SendRequestInput,
    StatusInput,
    StatusOutput,
    StatusResult,
)
from .ports import ConnectionRepoPort, EmailPort, ProfileRepoPort, TimePort

__all__ = [
    # Entry points
    "run",
    "run_send_request",
    "run_respond",
    "run_remove",
    "run_status",
    "run_list",
    "get_connection_status",
    # Input models
    "SendRequestInput",
    "RespondInput",
    "RemoveInput",
    "StatusInput",
    "ListConnectionsInput",
    # Output models
    "ConnectionOutput",
    "StatusOutput",
    "StatusResult",
    "ConnectionListOutput",
    "ConnectionSummary",
    "ConnectionView",
    # Ports
    "ConnectionRepoPort",
    "EmailPort",
    "ProfileRepoPort",
    "TimePort",
]
