from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, UploadFile

from advisornet.api.deps import (
    get_clock,
    get_current_user,
    get_file_store,
    get_policy,
    get_profile_repo,
    get_publication_repo,
    require_approved_or_admin,
    require_approved_profile,
    to_uploaded_file,
)
from advisornet.api.errors import raise_for_failure
from advisornet.api.schemas import PublicationResponse
from advisornet.components.profiles import SessionContextOutput
from advisornet.components.publications import (
    CreatePublicationInput,
    DeletePublicationInput,
    ListPublicationsInput,
    UpdatePublicationInput,
    run_create,
    run_delete,
    run_list,
    run_update,
)
from advisornet.domain.entities import Profile, User

router = APIRouter()


@router.get("", response_model=list[PublicationResponse])
def list_publications(
    profile_id: UUID,
    ctx: SessionContextOutput = Depends(require_approved_or_admin),
    repo: Any = Depends(get_publication_repo),
    policy: Any = Depends(get_policy),
) -> Any:
    """Publications of one profile, newest first."""
    assert ctx.user
    inp = ListPublicationsInput(viewer=ctx.user, profile_id=profile_id)
    result = run_list(inp, repo, policy)
    if not result.success:
        raise_for_failure(result.error, result.code)
    return result.publications


@router.post("", response_model=PublicationResponse, status_code=201)
def create_publication(
    title: str = Form(...),
    description: str | None = Form(None),
    publication_type: str = Form("paper"),
    external_url: str | None = Form(None),
    file: UploadFile | None = File(None),
    current_user: User = Depends(get_current_user),
    _profile: Profile = Depends(require_approved_profile),
    repo: Any = Depends(get_publication_repo),
    profile_repo: Any = Depends(get_profile_repo),
    store: Any = Depends(get_file_store),
    policy: Any = Depends(get_policy),
    clock: Any = Depends(get_clock),
) -> Any:
    inp = CreatePublicationInput(
        user=current_user,
        title=title,
        description=description,
        publication_type=publication_type,
        external_url=external_url,
        file=to_uploaded_file(file),
    )
    result = run_create(inp, repo, profile_repo, store, policy, clock)
    if not result.success:
        raise_for_failure(result.error, result.code)
    return result.publication


@router.put("/{publication_id}", response_model=PublicationResponse)
def update_publication(
    publication_id: UUID,
    title: str | None = Form(None),
    description: str | None = Form(None),
    publication_type: str | None = Form(None),
    external_url: str | None = Form(None),
    remove_file: bool = Form(False),
    file: UploadFile | None = File(None),
    current_user: User = Depends(get_current_user),
    _profile: Profile = Depends(require_approved_profile),
    repo: Any = Depends(get_publication_repo),
    profile_repo: Any = Depends(get_profile_repo),
    store: Any = Depends(get_file_store),
    policy: Any = Depends(get_policy),
    clock: Any = Depends(get_clock),
) -> Any:
    """Edit an owned publication; a new file replaces the stored one."""
    inp = UpdatePublicationInput(
        user=current_user,
        publication_id=publication_id,
        title=title,
        description=description,
        publication_type=publication_type,
        external_url=external_url,
        file=to_uploaded_file(file),
        remove_file=remove_file,
    )
    result = run_update(inp, repo, profile_repo, store, policy, clock)
    if not result.success:
        raise_for_failure(result.error, result.code)
    return result.publication


@router.delete("/{publication_id}")
def delete_publication(
    publication_id: UUID,
    current_user: User = Depends(get_current_user),
    _profile: Profile = Depends(require_approved_profile),
    repo: Any = Depends(get_publication_repo),
    profile_repo: Any = Depends(get_profile_repo),
    store: Any = Depends(get_file_store),
    policy: Any = Depends(get_policy),
) -> dict[str, str]:
    result = run_delete(
        DeletePublicationInput(user=current_user, publication_id=publication_id),
        repo,
        profile_repo,
        store,
        policy,
    )
    if not result.success:
        raise_for_failure(result.error, result.code)
    return {"status": "deleted"}
