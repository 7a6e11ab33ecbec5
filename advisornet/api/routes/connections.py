from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends

from advisornet.api.deps import (
    Settings,
    get_clock,
    get_connection_repo,
    get_current_user,
    get_email,
    get_policy,
    get_profile_repo,
    get_settings,
    require_approved_profile,
)
from advisornet.api.errors import raise_for_failure
from advisornet.api.schemas import (
    ConnectionCreateRequest,
    ConnectionCreateResponse,
    ConnectionListResponse,
    ConnectionRespondRequest,
    ConnectionResponse,
    ConnectionStatusResponse,
    ConnectionSummaryResponse,
    ProfileResponse,
)
from advisornet.components.connections import (
    ConnectionSummary,
    ListConnectionsInput,
    RemoveInput,
    RespondInput,
    SendRequestInput,
    StatusInput,
    run_list,
    run_remove,
    run_respond,
    run_send_request,
    run_status,
)
from advisornet.domain.entities import Profile, User

router = APIRouter()


def _summary(item: ConnectionSummary) -> ConnectionSummaryResponse:
    return ConnectionSummaryResponse(
        connection=ConnectionResponse.model_validate(item.connection),
        counterpart=(
            ProfileResponse.model_validate(item.counterpart) if item.counterpart else None
        ),
        direction=item.direction,
    )


@router.get("", response_model=ConnectionListResponse)
def list_connections(
    user: User = Depends(get_current_user),
    me: Profile = Depends(require_approved_profile),
    repo: Any = Depends(get_connection_repo),
    policy: Any = Depends(get_policy),
    profile_repo: Any = Depends(get_profile_repo),
) -> ConnectionListResponse:
    """The caller's connections, split into accepted and pending by direction."""
    result = run_list(
        ListConnectionsInput(user=user, viewer=me),
        repo=repo,
        profile_repo=profile_repo,
        policy=policy,
    )
    if not result.success:
        raise_for_failure(result.error, result.code)
    return ConnectionListResponse(
        accepted=[_summary(c) for c in result.accepted],
        pending_sent=[_summary(c) for c in result.pending_sent],
        pending_received=[_summary(c) for c in result.pending_received],
    )


@router.post("", response_model=ConnectionCreateResponse, status_code=201)
def send_request(
    req: ConnectionCreateRequest,
    user: User = Depends(get_current_user),
    me: Profile = Depends(require_approved_profile),
    repo: Any = Depends(get_connection_repo),
    policy: Any = Depends(get_policy),
    profile_repo: Any = Depends(get_profile_repo),
    clock: Any = Depends(get_clock),
    email: Any = Depends(get_email),
    settings: Settings = Depends(get_settings),
) -> ConnectionCreateResponse:
    """Ask another approved member to connect; the receiver is emailed."""
    result = run_send_request(
        SendRequestInput(user=user, sender=me, receiver_id=req.receiver_id),
        repo=repo,
        profile_repo=profile_repo,
        time=clock,
        policy=policy,
        email=email,
        public_url=settings.public_url,
    )
    if not result.success or not result.connection:
        raise_for_failure(result.error, result.code)
    return ConnectionCreateResponse(
        connection=ConnectionResponse.model_validate(result.connection),
        email_sent=result.email_sent,
    )


@router.get("/status/{profile_id}", response_model=ConnectionStatusResponse)
def connection_status(
    profile_id: UUID,
    user: User = Depends(get_current_user),
    me: Profile = Depends(require_approved_profile),
    repo: Any = Depends(get_connection_repo),
    policy: Any = Depends(get_policy),
) -> ConnectionStatusResponse:
    result = run_status(
        StatusInput(user=user, viewer=me, target_id=profile_id), repo=repo, policy=policy
    )
    if not result.success:
        raise_for_failure(result.error, result.code)
    return ConnectionStatusResponse(
        status=result.result.status, connection_id=result.result.connection_id
    )


@router.post("/{connection_id}/respond", response_model=ConnectionResponse)
def respond(
    connection_id: UUID,
    req: ConnectionRespondRequest,
    user: User = Depends(get_current_user),
    me: Profile = Depends(require_approved_profile),
    repo: Any = Depends(get_connection_repo),
    policy: Any = Depends(get_policy),
    clock: Any = Depends(get_clock),
) -> Any:
    """Accept or reject a request addressed to the caller."""
    result = run_respond(
        RespondInput(user=user, actor=me, connection_id=connection_id, status=req.status),
        repo=repo,
        policy=policy,
        time=clock,
    )
    if not result.success:
        raise_for_failure(result.error, result.code)
    return result.connection


@router.delete("/{connection_id}")
def remove(
    connection_id: UUID,
    user: User = Depends(get_current_user),
    me: Profile = Depends(require_approved_profile),
    repo: Any = Depends(get_connection_repo),
    policy: Any = Depends(get_policy),
) -> dict[str, str]:
    result = run_remove(
        RemoveInput(user=user, actor=me, connection_id=connection_id), repo=repo, policy=policy
    )
    if not result.success:
        raise_for_failure(result.error, result.code)
    return {"status": "deleted"}
