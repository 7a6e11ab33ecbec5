import secrets
from datetime import datetime, timedelta
from urllib.parse import quote
from uuid import uuid4

from advisornet.domain.entities import InviteToken, as_utc
from advisornet.domain.errors import ConflictError
from advisornet.domain.policy import PolicyEngine

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

INVALID_INVITATION = "Invalid Invitation"


def is_usable(invite: InviteToken, now: datetime) -> bool:
    """A token admits registration while active, unused and unexpired."""
    if not invite.is_active:
        return False
    if invite.used_at is not None:
        return False
    return as_utc(invite.expires_at) > now


def build_invite_url(base_url: str, token: str, registration_path: str = "/register") -> str:
    return f"{base_url.rstrip('/')}{registration_path}?invite={quote(token, safe='')}"


def run_validate(
    inp: ValidateInviteInput,
    repo: InviteTokenRepoPort,
    time: TimePort,
) -> ValidateInviteOutput:
    token = (inp.token or "").strip()
    if not token:
        return ValidateInviteOutput(error=INVALID_INVITATION)

    invite = repo.get_by_token(token)
    if not invite:
        return ValidateInviteOutput(error=INVALID_INVITATION)

    if not is_usable(invite, time.now_utc()):
        return ValidateInviteOutput(token_id=invite.id, error=INVALID_INVITATION)

    return ValidateInviteOutput(valid=True, token_id=invite.id, success=True)


def run_mark_used(
    inp: MarkUsedInput,
    repo: InviteTokenRepoPort,
    time: TimePort,
) -> InviteOutput:
    invite = repo.get_by_id(inp.token_id)
    if not invite:
        return InviteOutput(error="Invite not found", code="not_found")

    invite.used_at = time.now_utc()
    invite.used_by = inp.user_id
    repo.save(invite)
    return InviteOutput(invite=invite, success=True)


def run_create(
    inp: CreateInviteInput,
    repo: InviteTokenRepoPort,
    policy: PolicyEngine,
    time: TimePort,
) -> InviteOutput:
    if not policy.can_manage_invites(inp.actor):
        return InviteOutput(error="Access denied", code="forbidden")

    rules = policy.rules.invites
    now = time.now_utc()

    token = inp.token.strip() if inp.token else secrets.token_urlsafe(rules.token_bytes)
    if not token:
        return InviteOutput(error="Token cannot be empty", code="invalid")

    if inp.expires_at is not None:
        expires_at = as_utc(inp.expires_at)
    else:
        days = inp.days_valid if inp.days_valid is not None else rules.default_days_valid
        if days <= 0:
            return InviteOutput(error="Validity must be at least one day", code="invalid")
        expires_at = now + timedelta(days=days)

    if repo.get_by_token(token):
        return InviteOutput(error="Token already exists", code="conflict")

    invite = InviteToken(
        id=uuid4(),
        token=token,
        is_active=inp.is_active,
        expires_at=expires_at,
        created_by=inp.actor.id,
        created_at=now,
    )
    try:
        repo.save(invite)
    except ConflictError:
        return InviteOutput(error="Token already exists", code="conflict")

    if invite.is_active and rules.exclusive_activation:
        repo.deactivate_all_except(invite.id)

    return InviteOutput(invite=invite, success=True)


def run_update(
    inp: UpdateInviteInput,
    repo: InviteTokenRepoPort,
    policy: PolicyEngine,
) -> InviteOutput:
    """
    Toggle a token or move its expiry.

    Setting a new expiry also re-activates the token, matching how the admin
    "save invite settings" action behaves.
    """
    if not policy.can_manage_invites(inp.actor):
        return InviteOutput(error="Access denied", code="forbidden")

    invite = repo.get_by_id(inp.token_id)
    if not invite:
        return InviteOutput(error="Invite not found", code="not_found")

    if inp.expires_at is not None:
        invite.expires_at = as_utc(inp.expires_at)
        invite.is_active = True
    if inp.is_active is not None:
        invite.is_active = inp.is_active

    repo.save(invite)
    if invite.is_active and policy.rules.invites.exclusive_activation:
        repo.deactivate_all_except(invite.id)

    return InviteOutput(invite=invite, success=True)


def run_delete(
    inp: DeleteInviteInput,
    repo: InviteTokenRepoPort,
    policy: PolicyEngine,
) -> InviteOutput:
    if not policy.can_manage_invites(inp.actor):
        return InviteOutput(error="Access denied", code="forbidden")

    invite = repo.get_by_id(inp.token_id)
    if not invite:
        return InviteOutput(error="Invite not found", code="not_found")

    repo.delete(invite.id)
    return InviteOutput(invite=invite, success=True)


def run_list(
    inp: ListInvitesInput,
    repo: InviteTokenRepoPort,
    policy: PolicyEngine,
) -> InviteListOutput:
    if not policy.can_manage_invites(inp.actor):
        return InviteListOutput(error="Access denied", code="forbidden")
    return InviteListOutput(invites=repo.list_all(), success=True)


def run(
    inp: (
        ValidateInviteInput
        | MarkUsedInput
        | CreateInviteInput
        | UpdateInviteInput
        | DeleteInviteInput
        | ListInvitesInput
    ),
    *,
    repo: InviteTokenRepoPort,
    policy: PolicyEngine | None = None,
    time: TimePort | None = None,
) -> ValidateInviteOutput | InviteOutput | InviteListOutput:
    if isinstance(inp, ValidateInviteInput):
        assert time
        return run_validate(inp, repo, time)

    elif isinstance(inp, MarkUsedInput):
        assert time
        return run_mark_used(inp, repo, time)

    elif isinstance(inp, CreateInviteInput):
        assert policy and time
        return run_create(inp, repo, policy, time)

    elif isinstance(inp, UpdateInviteInput):
        assert policy
        return run_update(inp, repo, policy)

    elif isinstance(inp, DeleteInviteInput):
        assert policy
        return run_delete(inp, repo, policy)

    elif isinstance(inp, ListInvitesInput):
        assert policy
        return run_list(inp, repo, policy)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
