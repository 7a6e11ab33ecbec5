from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, File, UploadFile

from advisornet.api.deps import (
    get_clock,
    get_current_user,
    get_file_store,
    get_policy,
    get_profile_repo,
    require_approved_or_admin,
    require_approved_profile,
    to_uploaded_file,
)
from advisornet.api.errors import raise_for_failure
from advisornet.api.schemas import ProfileResponse
from advisornet.components.profiles import (
    GetProfileInput,
    SessionContextOutput,
    UpdateProfileInput,
    UploadAvatarInput,
    run_get_profile,
    run_update_profile,
    run_upload_avatar,
)
from advisornet.domain.entities import Profile, User

router = APIRouter()


@router.put("/me", response_model=ProfileResponse)
def update_my_profile(
    fields: dict[str, Any] = Body(...),
    current_user: User = Depends(get_current_user),
    _profile: Profile = Depends(require_approved_profile),
    repo: Any = Depends(get_profile_repo),
    policy: Any = Depends(get_policy),
    clock: Any = Depends(get_clock),
) -> Any:
    """
    Edit the caller's own profile.

    Tag fields accept a list or a comma-separated string. Identity, type and
    approval fields are refused.
    """
    result = run_update_profile(
        UpdateProfileInput(user=current_user, fields=fields), repo, policy, clock
    )
    if not result.success:
        raise_for_failure(result.error, result.code)
    return result.profile


@router.post("/me/avatar", response_model=ProfileResponse)
def upload_my_avatar(
    file: UploadFile = File(...),
    current_user: User = Depends(get_current_user),
    _profile: Profile = Depends(require_approved_profile),
    repo: Any = Depends(get_profile_repo),
    store: Any = Depends(get_file_store),
    policy: Any = Depends(get_policy),
    clock: Any = Depends(get_clock),
) -> Any:
    uploaded = to_uploaded_file(file)
    if uploaded is None:
        raise_for_failure("File is required", "invalid")
    result = run_upload_avatar(
        UploadAvatarInput(user=current_user, file=uploaded), repo, store, policy, clock
    )
    if not result.success:
        raise_for_failure(result.error, result.code)
    return result.profile


@router.get("/{profile_id}", response_model=ProfileResponse)
def get_profile(
    profile_id: UUID,
    ctx: SessionContextOutput = Depends(require_approved_or_admin),
    repo: Any = Depends(get_profile_repo),
    policy: Any = Depends(get_policy),
) -> Any:
    assert ctx.user
    inp = GetProfileInput(viewer=ctx.user, profile_id=profile_id)
    result = run_get_profile(inp, repo, policy)
    if not result.success:
        raise_for_failure(result.error, result.code)
    return result.profile
