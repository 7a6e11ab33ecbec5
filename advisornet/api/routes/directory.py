from typing import Any

from fastapi import APIRouter, Depends

from advisornet.api.deps import get_policy, get_profile_repo, require_approved_or_admin
from advisornet.api.errors import raise_for_failure
from advisornet.api.schemas import DirectoryResponse, ProfileResponse
from advisornet.components.directory import BrowseInput, run_browse
from advisornet.components.profiles import SessionContextOutput

router = APIRouter()


def _browse(
    user_type: str,
    search: str | None,
    location: str | None,
    ctx: SessionContextOutput,
    repo: Any,
    policy: Any,
) -> DirectoryResponse:
    assert ctx.user
    inp = BrowseInput(
        viewer=ctx.user,
        user_type=user_type,
        search=search,
        location=location,
    )
    result = run_browse(inp, repo, policy)
    if not result.success:
        raise_for_failure(result.error, result.code)
    return DirectoryResponse(
        profiles=[ProfileResponse.model_validate(p) for p in result.profiles],
        locations=result.locations,
        total=result.total,
    )


@router.get("/advisors", response_model=DirectoryResponse)
def list_advisors(
    search: str | None = None,
    location: str | None = None,
    ctx: SessionContextOutput = Depends(require_approved_or_admin),
    repo: Any = Depends(get_profile_repo),
    policy: Any = Depends(get_policy),
) -> DirectoryResponse:
    """Approved advisors, filtered by free text and location."""
    return _browse("advisor", search, location, ctx, repo, policy)


@router.get("/laboratories", response_model=DirectoryResponse)
def list_laboratories(
    search: str | None = None,
    location: str | None = None,
    ctx: SessionContextOutput = Depends(require_approved_or_admin),
    repo: Any = Depends(get_profile_repo),
    policy: Any = Depends(get_policy),
) -> DirectoryResponse:
    """Approved laboratories, filtered by free text and location."""
    return _browse("laboratory", search, location, ctx, repo, policy)
