import logging
from typing import Any
from uuid import uuid4

from advisornet.domain.entities import TAG_FIELDS
from advisornet.domain.policy import PolicyEngine, is_approved
from advisornet.domain.tags import parse_tags
from advisornet.domain.uploads import AVATARS_BUCKET, check_upload

from .models import (
    GetProfileInput,
    ProfileOutput,
    SessionContextInput,
    SessionContextOutput,
    UpdateProfileInput,
    UploadAvatarInput,
)
from .ports import FileStorePort, ProfileRepoPort, TimePort

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    "headline",
    "bio",
    "location",
    "organisation",
    "contact_number",
    "linkedin_url",
    "website_url",
    "education",
    "experience",
    "company_type",
    "company_size",
)

# Owned by registration and moderation, never by self-edit
LOCKED_FIELDS = (
    "id",
    "user_id",
    "email",
    "user_type",
    "approval_status",
    "invite_token_id",
    "avatar_url",
    "created_at",
    "updated_at",
)


def _clean(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_year(value: Any) -> tuple[int | None, str | None]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None, None
    try:
        year = int(str(value).strip())
    except ValueError:
        return None, "Founded year must be a number"
    if year < 1000 or year > 9999:
        return None, "Founded year must be a four digit year"
    return year, None


def run_get_profile(
    inp: GetProfileInput, repo: ProfileRepoPort, policy: PolicyEngine
) -> ProfileOutput:
    if not policy.can_view_profiles(inp.viewer):
        return ProfileOutput(error="Access denied", code="forbidden")

    profile = repo.get_by_id(inp.profile_id)
    if not profile:
        return ProfileOutput(error="Profile not found", code="not_found")

    # Unapproved profiles are only visible to their owner and admins
    owner = profile.user_id == inp.viewer.id
    if not is_approved(profile) and not owner and not policy.is_admin(inp.viewer):
        return ProfileOutput(error="Profile not found", code="not_found")

    return ProfileOutput(profile=profile, success=True)


def run_update_profile(
    inp: UpdateProfileInput, repo: ProfileRepoPort, policy: PolicyEngine, time: TimePort
) -> ProfileOutput:
    if not policy.can_edit_own_profile(inp.user):
        return ProfileOutput(error="Access denied", code="forbidden")

    profile = repo.get_by_user_id(inp.user.id)
    if not profile:
        return ProfileOutput(error="Profile not found", code="not_found")

    locked = sorted(k for k in inp.fields if k in LOCKED_FIELDS)
    if locked:
        return ProfileOutput(error=f"Field cannot be changed: {', '.join(locked)}", code="invalid")

    known = {"full_name", "founded_year", *TEXT_FIELDS, *TAG_FIELDS}
    unknown = sorted(k for k in inp.fields if k not in known)
    if unknown:
        return ProfileOutput(error=f"Unknown field: {', '.join(unknown)}", code="invalid")

    updated = profile.model_copy(deep=True)
    for name, value in inp.fields.items():
        if name == "full_name":
            full_name = _clean(value)
            if not full_name:
                return ProfileOutput(error="Full name is required", code="invalid")
            updated.full_name = full_name
        elif name == "founded_year":
            year, problem = _parse_year(value)
            if problem:
                return ProfileOutput(error=problem, code="invalid")
            updated.founded_year = year
        elif name in TAG_FIELDS:
            setattr(updated, name, parse_tags(value))
        else:
            setattr(updated, name, _clean(value))

    updated.updated_at = time.now_utc()
    repo.save(updated)
    return ProfileOutput(profile=updated, success=True)


def _avatar_key(profile_url: str | None, store: FileStorePort) -> str | None:
    """Storage key of an avatar we host, or None for external or missing URLs."""
    if not profile_url:
        return None
    prefix = store.public_url(AVATARS_BUCKET, "")
    if profile_url.startswith(prefix):
        return profile_url[len(prefix) :]
    return None


def run_upload_avatar(
    inp: UploadAvatarInput,
    repo: ProfileRepoPort,
    store: FileStorePort,
    policy: PolicyEngine,
    time: TimePort,
) -> ProfileOutput:
    if not policy.can_edit_own_profile(inp.user):
        return ProfileOutput(error="Access denied", code="forbidden")

    profile = repo.get_by_user_id(inp.user.id)
    if not profile:
        return ProfileOutput(error="Profile not found", code="not_found")

    problem = check_upload(inp.file, AVATARS_BUCKET, policy.rules.uploads)
    if problem:
        return ProfileOutput(error=problem, code="invalid")

    key = store.save(AVATARS_BUCKET, f"{inp.user.id}/{uuid4().hex}.{inp.file.extension}", inp.file.data)
    previous = _avatar_key(profile.avatar_url, store)

    profile.avatar_url = store.public_url(AVATARS_BUCKET, key)
    profile.updated_at = time.now_utc()
    repo.save(profile)

    if previous and previous != key:
        try:
            store.delete(AVATARS_BUCKET, previous)
        except (OSError, ValueError) as e:
            logger.warning("Could not remove old avatar %s: %s", previous, e)

    return ProfileOutput(profile=profile, success=True)


def run_session_context(
    inp: SessionContextInput, repo: ProfileRepoPort, policy: PolicyEngine
) -> SessionContextOutput:
    profile = repo.get_by_user_id(inp.user.id)
    return SessionContextOutput(
        user=inp.user,
        profile=profile,
        is_admin=policy.is_admin(inp.user),
        is_approved=is_approved(profile),
        success=True,
    )


def run(
    inp: GetProfileInput | UpdateProfileInput | UploadAvatarInput | SessionContextInput,
    *,
    repo: ProfileRepoPort,
    policy: PolicyEngine | None = None,
    store: FileStorePort | None = None,
    time: TimePort | None = None,
) -> ProfileOutput | SessionContextOutput:
    if isinstance(inp, GetProfileInput):
        assert policy
        return run_get_profile(inp, repo, policy)

    elif isinstance(inp, UpdateProfileInput):
        assert policy and time
        return run_update_profile(inp, repo, policy, time)

    elif isinstance(inp, UploadAvatarInput):
        assert store and policy and time
        return run_upload_avatar(inp, repo, store, policy, time)

    elif isinstance(inp, SessionContextInput):
        assert policy
        return run_session_context(inp, repo, policy)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
