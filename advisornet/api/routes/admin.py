from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends

from advisornet.api.deps import (
    Settings,
    get_clock,
    get_current_user,
    get_invite_repo,
    get_policy,
    get_profile_repo,
    get_rules,
    get_settings,
)
from advisornet.api.errors import raise_for_failure
from advisornet.api.schemas import (
    InviteCreateRequest,
    InviteResponse,
    InviteUpdateRequest,
    ProfileResponse,
)
from advisornet.components.approval import DecideInput, ListPendingInput, run_decide, run_list_pending
from advisornet.components.invite import (
    CreateInviteInput,
    DeleteInviteInput,
    ListInvitesInput,
    UpdateInviteInput,
    build_invite_url,
    run_create,
    run_delete,
    run_list,
    run_update,
)
from advisornet.domain.entities import InviteToken, User
from advisornet.rules.models import Rules

router = APIRouter()


def _invite_response(invite: InviteToken, settings: Settings, rules: Rules) -> InviteResponse:
    response = InviteResponse.model_validate(invite)
    response.url = build_invite_url(
        settings.public_url, invite.token, rules.invites.registration_path
    )
    return response


# --- Invites ---


@router.get("/invites", response_model=list[InviteResponse])
def list_invites(
    current_user: User = Depends(get_current_user),
    repo: Any = Depends(get_invite_repo),
    policy: Any = Depends(get_policy),
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> list[InviteResponse]:
    """List invitation tokens, newest first (admin only)."""
    result = run_list(ListInvitesInput(actor=current_user), repo, policy)
    if not result.success:
        raise_for_failure(result.error, result.code)
    return [_invite_response(i, settings, rules) for i in result.invites]


@router.post("/invites", response_model=InviteResponse, status_code=201)
def create_invite(
    req: InviteCreateRequest,
    current_user: User = Depends(get_current_user),
    repo: Any = Depends(get_invite_repo),
    policy: Any = Depends(get_policy),
    clock: Any = Depends(get_clock),
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> InviteResponse:
    """Create an invitation token (admin only)."""
    inp = CreateInviteInput(
        actor=current_user,
        token=req.token,
        days_valid=req.days_valid,
        expires_at=req.expires_at,
        is_active=req.is_active,
    )
    result = run_create(inp, repo, policy, clock)
    if not result.success or not result.invite:
        raise_for_failure(result.error, result.code)
    return _invite_response(result.invite, settings, rules)


@router.patch("/invites/{token_id}", response_model=InviteResponse)
def update_invite(
    token_id: UUID,
    req: InviteUpdateRequest,
    current_user: User = Depends(get_current_user),
    repo: Any = Depends(get_invite_repo),
    policy: Any = Depends(get_policy),
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> InviteResponse:
    """Toggle activation or move the expiry of a token (admin only)."""
    inp = UpdateInviteInput(
        actor=current_user,
        token_id=token_id,
        is_active=req.is_active,
        expires_at=req.expires_at,
    )
    result = run_update(inp, repo, policy)
    if not result.success or not result.invite:
        raise_for_failure(result.error, result.code)
    return _invite_response(result.invite, settings, rules)


@router.delete("/invites/{token_id}")
def delete_invite(
    token_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: Any = Depends(get_invite_repo),
    policy: Any = Depends(get_policy),
) -> dict[str, str]:
    result = run_delete(DeleteInviteInput(actor=current_user, token_id=token_id), repo, policy)
    if not result.success:
        raise_for_failure(result.error, result.code)
    return {"status": "deleted"}


# --- Approvals ---


@router.get("/pending", response_model=list[ProfileResponse])
def list_pending(
    current_user: User = Depends(get_current_user),
    repo: Any = Depends(get_profile_repo),
    policy: Any = Depends(get_policy),
) -> Any:
    """Profiles awaiting a decision, newest first."""
    result = run_list_pending(ListPendingInput(actor=current_user), repo, policy)
    if not result.success:
        raise_for_failure(result.error, result.code)
    return result.profiles


def _decide(
    profile_id: UUID, decision: str, actor: User, repo: Any, policy: Any, clock: Any
) -> Any:
    result = run_decide(
        DecideInput(actor=actor, profile_id=profile_id, decision=decision), repo, policy, clock
    )
    if not result.success:
        raise_for_failure(result.error, result.code)
    return result.profile


@router.post("/profiles/{profile_id}/approve", response_model=ProfileResponse)
def approve_profile(
    profile_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: Any = Depends(get_profile_repo),
    policy: Any = Depends(get_policy),
    clock: Any = Depends(get_clock),
) -> Any:
    return _decide(profile_id, "approved", current_user, repo, policy, clock)


@router.post("/profiles/{profile_id}/reject", response_model=ProfileResponse)
def reject_profile(
    profile_id: UUID,
    current_user: User = Depends(get_current_user),
    repo: Any = Depends(get_profile_repo),
    policy: Any = Depends(get_policy),
    clock: Any = Depends(get_clock),
) -> Any:
    return _decide(profile_id, "rejected", current_user, repo, policy, clock)
