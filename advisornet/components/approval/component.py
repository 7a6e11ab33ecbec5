from typing import cast

from advisornet.domain.entities import ApprovalStatus
from advisornet.domain.policy import PolicyEngine

from .models import (
    AccessCheckInput,
    AccessOutput,
    DecideInput,
    ListPendingInput,
    ProfileListOutput,
    ProfileOutput,
)
from .ports import ProfileRepoPort, TimePort

DECISIONS = ("approved", "rejected")

PENDING_MESSAGE = "Your account is pending approval"
REJECTED_MESSAGE = "Your account has been rejected"


def run_check_access(inp: AccessCheckInput, policy: PolicyEngine) -> AccessOutput:
    """
    The approval gate shared by every member-only operation.

    Admins pass on admin routes even without an approved profile.
    """
    if inp.admin_route and policy.is_admin(inp.user):
        return AccessOutput(allowed=True)

    profile = inp.profile
    if profile is None:
        return AccessOutput(error="Profile not found")
    if profile.approval_status == "pending":
        return AccessOutput(error=PENDING_MESSAGE)
    if profile.approval_status == "rejected":
        return AccessOutput(error=REJECTED_MESSAGE)
    return AccessOutput(allowed=True)


def run_list_pending(
    inp: ListPendingInput, repo: ProfileRepoPort, policy: PolicyEngine
) -> ProfileListOutput:
    if not policy.can_moderate_profiles(inp.actor):
        return ProfileListOutput(error="Access denied", code="forbidden")
    pending = sorted(repo.list_by_status("pending"), key=lambda p: p.created_at, reverse=True)
    return ProfileListOutput(profiles=pending, success=True)


def run_decide(
    inp: DecideInput,
    repo: ProfileRepoPort,
    policy: PolicyEngine,
    time: TimePort,
) -> ProfileOutput:
    if not policy.can_moderate_profiles(inp.actor):
        return ProfileOutput(error="Access denied", code="forbidden")

    if inp.decision not in DECISIONS:
        return ProfileOutput(error=f"Unknown decision: {inp.decision}", code="invalid")

    profile = repo.get_by_id(inp.profile_id)
    if not profile:
        return ProfileOutput(error="Profile not found", code="not_found")

    # Approved and rejected are terminal
    if profile.approval_status != "pending":
        return ProfileOutput(
            profile=profile,
            error=f"Profile is already {profile.approval_status}",
            code="conflict",
        )

    profile.approval_status = cast(ApprovalStatus, inp.decision)
    profile.updated_at = time.now_utc()
    repo.save(profile)
    return ProfileOutput(profile=profile, success=True)


def run(
    inp: ListPendingInput | DecideInput | AccessCheckInput,
    *,
    policy: PolicyEngine,
    repo: ProfileRepoPort | None = None,
    time: TimePort | None = None,
) -> ProfileListOutput | ProfileOutput | AccessOutput:
    if isinstance(inp, AccessCheckInput):
        return run_check_access(inp, policy)

    elif isinstance(inp, ListPendingInput):
        assert repo
        return run_list_pending(inp, repo, policy)

    elif isinstance(inp, DecideInput):
        assert repo and time
        return run_decide(inp, repo, policy, time)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
