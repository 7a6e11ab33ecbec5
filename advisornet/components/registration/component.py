"""
Registration workflow.

Turns a valid invitation plus a form submission into a user identity and a
pending profile. Steps run in order and stop at the first failure:

0. sign-up open to the public (rbac.public_permissions)
1. field validation (nothing written)
2. invitation check (nothing written)
3. identity creation
4. optional avatar upload (failures are logged and skipped)
5. pending profile creation (failure removes the identity and avatar)
6. invitation marked as used

No session is issued; the member signs in once an admin approves them.
"""

import logging
from typing import cast
from uuid import uuid4

from advisornet.components.invite import (
    INVALID_INVITATION,
    MarkUsedInput,
    ValidateInviteInput,
    run_mark_used,
    run_validate,
)
from advisornet.domain.entities import Profile, User, UserType
from advisornet.domain.errors import ConflictError
from advisornet.domain.policy import PolicyEngine
from advisornet.domain.uploads import AVATARS_BUCKET, UploadedFile, check_upload
from advisornet.rules.models import Rules

from .models import RegisterInput, RegisterOutput
from .ports import (
    FileStorePort,
    InviteTokenRepoPort,
    PasswordHasherPort,
    ProfileRepoPort,
    TimePort,
    UserRepoPort,
)

logger = logging.getLogger(__name__)

USER_TYPES = ("advisor", "laboratory")


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_fields(inp: RegisterInput, min_password_length: int) -> str | None:
    """Return the first field error, or None when the submission is well formed."""
    email = inp.email.strip()
    if not email or "@" not in email:
        return "A valid email is required"
    if not inp.full_name.strip():
        return "Full name is required"
    if inp.user_type not in USER_TYPES:
        return "User type must be advisor or laboratory"
    if inp.password != inp.confirm_password:
        return "Passwords do not match"
    if len(inp.password) < min_password_length:
        return f"Password must be at least {min_password_length} characters"
    return None


def _upload_avatar(
    user: User, avatar: UploadedFile, store: FileStorePort, rules: Rules
) -> tuple[str, str] | None:
    """Store the avatar; returns (key, public url) or None when skipped."""
    problem = check_upload(avatar, AVATARS_BUCKET, rules.uploads)
    if problem:
        logger.warning("Avatar skipped for %s: %s", user.email, problem)
        return None
    path = f"{user.id}/{uuid4().hex}.{avatar.extension}"
    try:
        key = store.save(AVATARS_BUCKET, path, avatar.data)
    except (OSError, ValueError) as e:
        logger.warning("Avatar upload failed for %s: %s", user.email, e)
        return None
    return key, store.public_url(AVATARS_BUCKET, key)


def run_register(
    inp: RegisterInput,
    *,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    invite_repo: InviteTokenRepoPort,
    hasher: PasswordHasherPort,
    store: FileStorePort,
    rules: Rules,
    time: TimePort,
) -> RegisterOutput:
    # 0. Open
    if not PolicyEngine(rules).can_register():
        return RegisterOutput(error="Registration is closed", code="forbidden")

    # 1. Fields
    field_error = validate_fields(inp, rules.auth.password.min_length)
    if field_error:
        return RegisterOutput(error=field_error, code="invalid")

    # 2. Invitation
    check = run_validate(ValidateInviteInput(token=inp.token), invite_repo, time)
    if not check.valid or check.token_id is None:
        return RegisterOutput(error=INVALID_INVITATION, code="invalid_invitation")

    # 3. Identity
    email = inp.email.strip().lower()
    if user_repo.get_by_email(email):
        return RegisterOutput(error="Email already registered", code="conflict")

    now = time.now_utc()
    user = User(
        id=uuid4(),
        email=email,
        password_hash=hasher.hash_password(inp.password),
        roles=["user"],
        status="active",
        created_at=now,
        updated_at=now,
    )
    try:
        user_repo.save(user)
    except ConflictError:
        return RegisterOutput(error="Email already registered", code="conflict")

    # 4. Avatar
    avatar_key: str | None = None
    avatar_url: str | None = None
    avatar_skipped = False
    if inp.avatar is not None:
        stored = _upload_avatar(user, inp.avatar, store, rules)
        if stored:
            avatar_key, avatar_url = stored
        else:
            avatar_skipped = True

    # 5. Profile
    profile = Profile(
        id=uuid4(),
        user_id=user.id,
        email=email,
        full_name=inp.full_name.strip(),
        user_type=cast(UserType, inp.user_type),
        approval_status="pending",
        contact_number=_clean(inp.contact_number),
        organisation=_clean(inp.organisation),
        avatar_url=avatar_url,
        invite_token_id=check.token_id,
        created_at=now,
        updated_at=now,
    )
    try:
        profile_repo.save(profile)
    except Exception:
        logger.exception("Profile creation failed for %s; removing identity", email)
        user_repo.delete(user.id)
        if avatar_key:
            store.delete(AVATARS_BUCKET, avatar_key)
        return RegisterOutput(error="Profile creation failed", code="failed")

    # 6. Consume the invitation
    marked = run_mark_used(MarkUsedInput(token_id=check.token_id, user_id=user.id), invite_repo, time)
    if not marked.success:
        logger.warning("Could not mark invite %s as used: %s", check.token_id, marked.error)

    return RegisterOutput(
        user=user, profile=profile, avatar_skipped=avatar_skipped, success=True
    )


def run(
    inp: RegisterInput,
    *,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    invite_repo: InviteTokenRepoPort,
    hasher: PasswordHasherPort,
    store: FileStorePort,
    rules: Rules,
    time: TimePort,
) -> RegisterOutput:
    if not isinstance(inp, RegisterInput):
        raise ValueError(f"Unknown input type: {type(inp)}")
    return run_register(
        inp,
        user_repo=user_repo,
        profile_repo=profile_repo,
        invite_repo=invite_repo,
        hasher=hasher,
        store=store,
        rules=rules,
        time=time,
    )
