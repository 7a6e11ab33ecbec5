from collections.abc import Iterable
from typing import cast

from advisornet.domain.entities import Profile, UserType
from advisornet.domain.policy import PolicyEngine

from .models import BrowseInput, DirectoryOutput
from .ports import ProfileRepoPort

ALL_LOCATIONS = "all"
SEARCH_FIELDS = ("full_name", "headline", "bio", "organisation")


def _matches_search(profile: Profile, needle: str) -> bool:
    for name in SEARCH_FIELDS:
        value = getattr(profile, name)
        if value and needle in value.lower():
            return True
    return False


def filter_profiles(
    profiles: Iterable[Profile], search: str | None = None, location: str | None = None
) -> list[Profile]:
    """
    Keep profiles matching both the search text and the location.

    Search is a case-insensitive substring over name, headline, bio and
    organisation. An empty location or "all" disables location filtering;
    otherwise it must equal the profile location exactly.
    """
    needle = (search or "").strip().lower()
    wanted = (location or "").strip()
    filter_location = bool(wanted) and wanted != ALL_LOCATIONS

    out = []
    for p in profiles:
        if needle and not _matches_search(p, needle):
            continue
        if filter_location and p.location != wanted:
            continue
        out.append(p)
    return out


def unique_locations(profiles: Iterable[Profile]) -> list[str]:
    return sorted({p.location for p in profiles if p.location})


def run_browse(
    inp: BrowseInput, repo: ProfileRepoPort, policy: PolicyEngine
) -> DirectoryOutput:
    if inp.user_type not in ("advisor", "laboratory"):
        return DirectoryOutput(error=f"Unknown directory: {inp.user_type}", code="not_found")

    if not policy.can_browse_directory(inp.viewer):
        return DirectoryOutput(error="Access denied", code="forbidden")

    approved = [
        p
        for p in repo.list_by_type(cast(UserType, inp.user_type), "approved")
        if p.approval_status == "approved" and p.user_type == inp.user_type
    ]
    return DirectoryOutput(
        profiles=filter_profiles(approved, inp.search, inp.location),
        locations=unique_locations(approved),
        total=len(approved),
        success=True,
    )


def run(inp: BrowseInput, *, repo: ProfileRepoPort, policy: PolicyEngine) -> DirectoryOutput:
    if not isinstance(inp, BrowseInput):
        raise ValueError(f"Unknown input type: {type(inp)}")
    return run_browse(inp, repo, policy)
