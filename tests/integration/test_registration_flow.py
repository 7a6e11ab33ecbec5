from datetime import timedelta

import pytest

from advisornet.components.invite import CreateInviteInput, run_create
from advisornet.components.registration import RegisterInput, run_register
from advisornet.domain.entities import InviteToken, User
from advisornet.domain.uploads import UploadedFile


@pytest.fixture
def admin(test_ctx):
    return test_ctx.user_repo.save(
        User(email="admin@example.com", password_hash="h", roles=["admin"])
    )


def _register(ctx, token, email="ada@example.com", avatar=None):
    return run_register(
        RegisterInput(
            email=email,
            password="secret1",
            confirm_password="secret1",
            full_name="Ada Lovelace",
            user_type="advisor",
            token=token,
            organisation="Analytical Labs",
            avatar=avatar,
        ),
        user_repo=ctx.user_repo,
        profile_repo=ctx.profile_repo,
        invite_repo=ctx.invite_repo,
        hasher=ctx.auth_adapter,
        store=ctx.store,
        rules=ctx.rules,
        time=ctx.clock,
    )


def test_invite_to_pending_profile(test_ctx, admin):
    created = run_create(
        CreateInviteInput(actor=admin), test_ctx.invite_repo, test_ctx.policy, test_ctx.clock
    )
    assert created.success
    token = created.invite.token

    avatar = UploadedFile("face.png", "image/png", b"\x89PNG")
    result = _register(test_ctx, token, avatar=avatar)

    assert result.success, result.error
    profile = test_ctx.profile_repo.get_by_user_id(result.user.id)
    assert profile is not None
    assert profile.approval_status == "pending"
    assert profile.organisation == "Analytical Labs"
    assert profile.invite_token_id == created.invite.id
    assert profile.avatar_url.startswith("http://testserver/files/avatars/")

    key = profile.avatar_url.removeprefix("http://testserver/files/avatars/")
    assert test_ctx.store.get("avatars", key) == b"\x89PNG"

    invite = test_ctx.invite_repo.get_by_id(created.invite.id)
    assert invite.used_at is not None
    assert invite.used_by == result.user.id

    # Stored password verifies
    user = test_ctx.user_repo.get_by_email("ada@example.com")
    assert test_ctx.auth_adapter.verify_password("secret1", user.password_hash)


def test_used_token_cannot_register_again(test_ctx, admin):
    created = run_create(
        CreateInviteInput(actor=admin), test_ctx.invite_repo, test_ctx.policy, test_ctx.clock
    )
    assert _register(test_ctx, created.invite.token).success

    second = _register(test_ctx, created.invite.token, email="bob@example.com")

    assert not second.success
    assert second.code == "invalid_invitation"
    assert test_ctx.user_repo.get_by_email("bob@example.com") is None


def test_expired_token_creates_nothing(test_ctx):
    now = test_ctx.clock.now_utc()
    test_ctx.invite_repo.save(InviteToken(token="stale", expires_at=now - timedelta(days=1)))

    result = _register(test_ctx, "stale")

    assert not result.success
    assert result.error == "Invalid Invitation"
    assert test_ctx.user_repo.count() == 0
    assert test_ctx.profile_repo.list_by_status("pending") == []


def test_duplicate_email_refused(test_ctx):
    now = test_ctx.clock.now_utc()
    for token in ("one", "two"):
        test_ctx.invite_repo.save(InviteToken(token=token, expires_at=now + timedelta(days=1)))

    assert _register(test_ctx, "one").success
    again = _register(test_ctx, "two", email="ADA@example.com")

    assert again.code == "conflict"
    # The second token stays usable
    assert test_ctx.invite_repo.get_by_token("two").used_at is None
