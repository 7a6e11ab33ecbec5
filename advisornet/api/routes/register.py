from typing import Any

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from advisornet.api.deps import (
    get_auth_adapter,
    get_clock,
    get_file_store,
    get_invite_repo,
    get_policy,
    get_profile_repo,
    get_rules,
    get_user_repo,
    to_uploaded_file,
)
from advisornet.api.errors import raise_for_failure
from advisornet.api.schemas import (
    InviteValidationResponse,
    ProfileResponse,
    RegisterResponse,
    UserResponse,
)
from advisornet.components.invite import ValidateInviteInput, run_validate
from advisornet.components.registration import RegisterInput, run_register
from advisornet.rules.models import Rules

router = APIRouter()


@router.get("/validate", response_model=InviteValidationResponse)
def validate_invite(
    invite: str | None = None,
    invite_token: str | None = Query(None, alias="inviteToken"),
    invite_repo: Any = Depends(get_invite_repo),
    policy: Any = Depends(get_policy),
    clock: Any = Depends(get_clock),
) -> InviteValidationResponse:
    """Check a registration link's token before showing the form."""
    if not policy.can_register():
        return InviteValidationResponse(valid=False, error="Registration is closed")
    result = run_validate(ValidateInviteInput(token=invite or invite_token), invite_repo, clock)
    return InviteValidationResponse(valid=result.valid, error=result.error)


@router.post("", response_model=RegisterResponse, status_code=201)
def register(
    email: str = Form(...),
    password: str = Form(...),
    confirm_password: str = Form(...),
    full_name: str = Form(...),
    user_type: str = Form(...),
    token: str | None = Form(None),
    contact_number: str | None = Form(None),
    organisation: str | None = Form(None),
    avatar: UploadFile | None = File(None),
    user_repo: Any = Depends(get_user_repo),
    profile_repo: Any = Depends(get_profile_repo),
    invite_repo: Any = Depends(get_invite_repo),
    hasher: Any = Depends(get_auth_adapter),
    store: Any = Depends(get_file_store),
    rules: Rules = Depends(get_rules),
    clock: Any = Depends(get_clock),
) -> RegisterResponse:
    """Invite-gated sign-up; the new profile waits for admin approval."""
    inp = RegisterInput(
        email=email,
        password=password,
        confirm_password=confirm_password,
        full_name=full_name,
        user_type=user_type,
        token=token,
        contact_number=contact_number,
        organisation=organisation,
        avatar=to_uploaded_file(avatar),
    )
    result = run_register(
        inp,
        user_repo=user_repo,
        profile_repo=profile_repo,
        invite_repo=invite_repo,
        hasher=hasher,
        store=store,
        rules=rules,
        time=clock,
    )
    if not result.success or not result.user or not result.profile:
        raise_for_failure(result.error, result.code)

    return RegisterResponse(
        user=UserResponse.model_validate(result.user),
        profile=ProfileResponse.model_validate(result.profile),
        avatar_skipped=result.avatar_skipped,
    )
