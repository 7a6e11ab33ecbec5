"""
Connection requests between approved members.

A connection is a single row per pair of profiles. It is created pending by
the sender and resolved once by the receiver:

    pending -> accepted
    pending -> rejected

Either party may remove the row, which returns the pair to "none".
"""

import logging
from collections.abc import Iterable
from typing import cast
from uuid import UUID, uuid4

from advisornet.domain.entities import Connection, ConnectionStatus, Profile
from advisornet.domain.errors import ConflictError
from advisornet.domain.policy import PolicyEngine, is_approved
from advisornet.ports.email import ConnectionRequestNotice
from advisornet.rules.models import Rules

from .models import (
    ConnectionListOutput,
    ConnectionOutput,
    ConnectionSummary,
    ListConnectionsInput,
    RemoveInput,
    RespondInput,
    SendRequestInput,
    StatusInput,
    StatusOutput,
    StatusResult,
)
from .ports import ConnectionRepoPort, EmailPort, ProfileRepoPort, TimePort

logger = logging.getLogger(__name__)

RESPONSES = ("accepted", "rejected")


def get_connection_status(
    viewer_id: UUID, target_id: UUID, connections: Iterable[Connection]
) -> StatusResult:
    """Derive the viewer's view of their relationship with target."""
    for c in connections:
        forward = c.sender_id == viewer_id and c.receiver_id == target_id
        backward = c.sender_id == target_id and c.receiver_id == viewer_id
        if not (forward or backward):
            continue
        if c.status == "accepted":
            return StatusResult("accepted", c.id)
        if c.status == "rejected":
            return StatusResult("rejected", c.id)
        return StatusResult("pending_sent" if forward else "pending_received", c.id)
    return StatusResult()


def _notify_receiver(
    sender: Profile,
    receiver: Profile,
    email: EmailPort,
    rules: Rules,
    public_url: str,
) -> bool:
    notice = ConnectionRequestNotice(
        recipient_email=receiver.email,
        recipient_name=receiver.full_name,
        sender_name=sender.full_name,
        sender_title=sender.headline,
        sender_organisation=sender.organisation,
        sender_bio=sender.bio,
        connection_page_url=f"{public_url.rstrip('/')}{rules.connections.connections_path}",
    )
    try:
        result = email.send_connection_request(notice)
    except Exception:
        logger.warning("Connection email to %s raised", receiver.email, exc_info=True)
        return False
    if not result.ok:
        logger.warning("Connection email to %s failed: %s", receiver.email, result.error)
        return False
    return True


def run_send_request(
    inp: SendRequestInput,
    *,
    repo: ConnectionRepoPort,
    profile_repo: ProfileRepoPort,
    time: TimePort,
    policy: PolicyEngine,
    email: EmailPort | None = None,
    public_url: str = "",
) -> ConnectionOutput:
    if not policy.can_connect(inp.user):
        return ConnectionOutput(error="Access denied", code="forbidden")

    sender = inp.sender
    if not is_approved(sender):
        return ConnectionOutput(error="Your account is not approved", code="forbidden")

    if inp.receiver_id == sender.id:
        return ConnectionOutput(error="You cannot connect with yourself", code="invalid")

    receiver = profile_repo.get_by_id(inp.receiver_id)
    if not receiver or not is_approved(receiver):
        return ConnectionOutput(error="Profile not found", code="not_found")

    existing = repo.get_between(sender.id, receiver.id)
    if existing:
        return ConnectionOutput(
            connection=existing, error="Connection already exists", code="conflict"
        )

    now = time.now_utc()
    connection = Connection(
        id=uuid4(),
        sender_id=sender.id,
        receiver_id=receiver.id,
        status="pending",
        created_at=now,
        updated_at=now,
    )
    try:
        repo.save(connection)
    except ConflictError:
        return ConnectionOutput(error="Connection already exists", code="conflict")

    email_sent = False
    rules = policy.rules
    if email is not None and rules.connections.notify_by_email:
        email_sent = _notify_receiver(sender, receiver, email, rules, public_url)

    return ConnectionOutput(
        connection=connection, changed=True, email_sent=email_sent, success=True
    )


def run_respond(
    inp: RespondInput,
    *,
    repo: ConnectionRepoPort,
    policy: PolicyEngine,
    time: TimePort,
) -> ConnectionOutput:
    if not policy.can_connect(inp.user):
        return ConnectionOutput(error="Access denied", code="forbidden")

    if inp.status not in RESPONSES:
        return ConnectionOutput(error="Status must be accepted or rejected", code="invalid")

    connection = repo.get_by_id(inp.connection_id)
    if not connection or not connection.involves(inp.actor.id):
        return ConnectionOutput(error="Connection not found", code="not_found")

    if connection.receiver_id != inp.actor.id:
        return ConnectionOutput(
            error="Only the receiver can respond to a request", code="forbidden"
        )

    if connection.status == inp.status:
        return ConnectionOutput(connection=connection, changed=False, success=True)

    if connection.status != "pending":
        return ConnectionOutput(
            connection=connection,
            error=f"Connection is already {connection.status}",
            code="conflict",
        )

    connection.status = cast(ConnectionStatus, inp.status)
    connection.updated_at = time.now_utc()
    repo.save(connection)
    return ConnectionOutput(connection=connection, changed=True, success=True)


def run_remove(
    inp: RemoveInput, *, repo: ConnectionRepoPort, policy: PolicyEngine
) -> ConnectionOutput:
    if not policy.can_connect(inp.user):
        return ConnectionOutput(error="Access denied", code="forbidden")

    connection = repo.get_by_id(inp.connection_id)
    if not connection or not connection.involves(inp.actor.id):
        return ConnectionOutput(error="Connection not found", code="not_found")

    repo.delete(connection.id)
    return ConnectionOutput(connection=connection, changed=True, success=True)


def run_status(
    inp: StatusInput, *, repo: ConnectionRepoPort, policy: PolicyEngine
) -> StatusOutput:
    if not policy.can_view_connections(inp.user):
        return StatusOutput(error="Access denied", code="forbidden")

    rows = repo.list_for_profile(inp.viewer.id)
    return StatusOutput(
        result=get_connection_status(inp.viewer.id, inp.target_id, rows), success=True
    )


def run_list(
    inp: ListConnectionsInput,
    *,
    repo: ConnectionRepoPort,
    profile_repo: ProfileRepoPort,
    policy: PolicyEngine,
) -> ConnectionListOutput:
    if not policy.can_view_connections(inp.user):
        return ConnectionListOutput(error="Access denied", code="forbidden")

    viewer_id = inp.viewer.id
    rows = repo.list_for_profile(viewer_id)
    counterparts = profile_repo.get_many(c.other_party(viewer_id) for c in rows)

    out = ConnectionListOutput(success=True)
    for c in rows:
        direction = "sent" if c.sender_id == viewer_id else "received"
        summary = ConnectionSummary(
            connection=c,
            counterpart=counterparts.get(c.other_party(viewer_id)),
            direction=direction,
        )
        out.connections.append(summary)
        if c.status == "accepted":
            out.accepted.append(summary)
        elif c.status == "pending" and direction == "sent":
            out.pending_sent.append(summary)
        elif c.status == "pending":
            out.pending_received.append(summary)
    return out


def run(
    inp: SendRequestInput | RespondInput | RemoveInput | StatusInput | ListConnectionsInput,
    *,
    repo: ConnectionRepoPort,
    profile_repo: ProfileRepoPort | None = None,
    time: TimePort | None = None,
    policy: PolicyEngine | None = None,
    email: EmailPort | None = None,
    public_url: str = "",
) -> ConnectionOutput | StatusOutput | ConnectionListOutput:
    if isinstance(inp, SendRequestInput):
        assert profile_repo and time and policy
        return run_send_request(
            inp,
            repo=repo,
            profile_repo=profile_repo,
            time=time,
            policy=policy,
            email=email,
            public_url=public_url,
        )

    elif isinstance(inp, RespondInput):
        assert policy and time
        return run_respond(inp, repo=repo, policy=policy, time=time)

    elif isinstance(inp, RemoveInput):
        assert policy
        return run_remove(inp, repo=repo, policy=policy)

    elif isinstance(inp, StatusInput):
        assert policy
        return run_status(inp, repo=repo, policy=policy)

    elif isinstance(inp, ListConnectionsInput):
        assert profile_repo and policy
        return run_list(inp, repo=repo, profile_repo=profile_repo, policy=policy)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
