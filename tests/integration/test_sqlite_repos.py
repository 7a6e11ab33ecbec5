from datetime import UTC, datetime, timedelta
from uuid import uuid4

import pytest

from advisornet.adapters.sqlite.repos import (
    SQLiteConnectionRepo,
    SQLiteInviteTokenRepo,
    SQLiteProfileRepo,
    SQLitePublicationRepo,
    SQLiteUserRepo,
)
from advisornet.domain.entities import Connection, InviteToken, Profile, Publication, User
from advisornet.domain.errors import ConflictError

T0 = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def users(db_path):
    return SQLiteUserRepo(db_path)


@pytest.fixture
def profiles(db_path):
    return SQLiteProfileRepo(db_path)


def _profile(users, profiles, name, user_type="advisor", status="approved", **extra):
    user = users.save(User(email=f"{name.lower().replace(' ', '.')}@example.com", password_hash="h"))
    return profiles.save(
        Profile(
            user_id=user.id,
            email=user.email,
            full_name=name,
            user_type=user_type,
            approval_status=status,
            **extra,
        )
    )


# --- Users ---


def test_user_roundtrip_with_roles(users):
    user = User(email="ada@example.com", password_hash="h", roles=["admin", "user"])
    users.save(user)

    loaded = users.get_by_id(user.id)
    assert loaded is not None
    assert loaded.email == "ada@example.com"
    assert sorted(loaded.roles) == ["admin", "user"]
    assert loaded.created_at.tzinfo is not None


def test_user_email_lookup_ignores_case(users):
    users.save(User(email="ada@example.com", password_hash="h"))
    assert users.get_by_email("ADA@Example.com") is not None
    assert users.get_by_email("nobody@example.com") is None


def test_duplicate_email_conflicts(users):
    users.save(User(email="ada@example.com", password_hash="h"))
    with pytest.raises(ConflictError):
        users.save(User(email="ada@example.com", password_hash="h2"))


def test_role_update_replaces_assignments(users):
    user = users.save(User(email="ada@example.com", password_hash="h", roles=["user"]))
    user.roles = ["admin"]
    users.save(user)
    assert users.get_by_id(user.id).roles == ["admin"]


def test_deleting_user_cascades_profile(users, profiles):
    profile = _profile(users, profiles, "Ada")
    users.delete(profile.user_id)
    assert profiles.get_by_id(profile.id) is None
    assert users.count() == 0


# --- Invite tokens ---


def test_invite_roundtrip(db_path):
    repo = SQLiteInviteTokenRepo(db_path)
    invite = repo.save(InviteToken(token="abc", expires_at=T0 + timedelta(days=30)))

    loaded = repo.get_by_token("abc")
    assert loaded is not None
    assert loaded.id == invite.id
    assert loaded.is_active is True
    assert loaded.expires_at == T0 + timedelta(days=30)
    assert loaded.used_at is None


def test_invite_token_unique(db_path):
    repo = SQLiteInviteTokenRepo(db_path)
    repo.save(InviteToken(token="abc", expires_at=T0))
    with pytest.raises(ConflictError):
        repo.save(InviteToken(token="abc", expires_at=T0))


def test_deactivate_all_except(db_path):
    repo = SQLiteInviteTokenRepo(db_path)
    keep = repo.save(InviteToken(token="keep", expires_at=T0))
    repo.save(InviteToken(token="other", expires_at=T0))

    repo.deactivate_all_except(keep.id)

    assert repo.get_by_token("keep").is_active is True
    assert repo.get_by_token("other").is_active is False


def test_invites_listed_newest_first(db_path):
    repo = SQLiteInviteTokenRepo(db_path)
    repo.save(InviteToken(token="old", expires_at=T0, created_at=T0))
    repo.save(InviteToken(token="new", expires_at=T0, created_at=T0 + timedelta(hours=1)))
    assert [i.token for i in repo.list_all()] == ["new", "old"]


# --- Profiles ---


def test_profile_tags_stored_as_lists(users, profiles):
    profile = _profile(
        users, profiles, "Ada", expertise=["Oncology", "Immunology"], languages=["English"]
    )

    loaded = profiles.get_by_id(profile.id)
    assert loaded.expertise == ["Oncology", "Immunology"]
    assert loaded.languages == ["English"]
    assert loaded.services == []


def test_one_profile_per_user(users, profiles):
    profile = _profile(users, profiles, "Ada")
    with pytest.raises(ConflictError):
        profiles.save(
            Profile(user_id=profile.user_id, email="x@example.com", full_name="Twin", user_type="advisor")
        )


def test_list_by_type_only_returns_matching_status(users, profiles):
    _profile(users, profiles, "zed", status="approved")
    _profile(users, profiles, "Amy", status="approved")
    _profile(users, profiles, "Pending Pat", status="pending")
    _profile(users, profiles, "Lab One", user_type="laboratory", status="approved")

    advisors = profiles.list_by_type("advisor")
    assert [p.full_name for p in advisors] == ["Amy", "zed"]
    assert [p.full_name for p in profiles.list_by_type("advisor", "pending")] == ["Pending Pat"]


def test_get_many(users, profiles):
    a = _profile(users, profiles, "Ada")
    b = _profile(users, profiles, "Bob")
    found = profiles.get_many([a.id, b.id, uuid4()])
    assert set(found) == {a.id, b.id}
    assert profiles.get_many([]) == {}


# --- Connections ---


def test_one_connection_per_pair(users, profiles, db_path):
    repo = SQLiteConnectionRepo(db_path)
    a = _profile(users, profiles, "Ada")
    b = _profile(users, profiles, "Bob")
    repo.save(Connection(sender_id=a.id, receiver_id=b.id))

    with pytest.raises(ConflictError):
        repo.save(Connection(sender_id=b.id, receiver_id=a.id))
    with pytest.raises(ConflictError):
        repo.save(Connection(sender_id=a.id, receiver_id=b.id))


def test_self_connection_rejected(users, profiles, db_path):
    repo = SQLiteConnectionRepo(db_path)
    a = _profile(users, profiles, "Ada")
    with pytest.raises(ConflictError):
        repo.save(Connection(sender_id=a.id, receiver_id=a.id))


def test_get_between_either_direction(users, profiles, db_path):
    repo = SQLiteConnectionRepo(db_path)
    a = _profile(users, profiles, "Ada")
    b = _profile(users, profiles, "Bob")
    row = repo.save(Connection(sender_id=a.id, receiver_id=b.id))

    assert repo.get_between(b.id, a.id).id == row.id
    assert [c.id for c in repo.list_for_profile(b.id)] == [row.id]

    row.status = "accepted"
    repo.save(row)
    assert repo.get_by_id(row.id).status == "accepted"


# --- Publications ---


def test_publications_newest_first(users, profiles, db_path):
    repo = SQLitePublicationRepo(db_path)
    owner = _profile(users, profiles, "Ada")
    repo.save(Publication(profile_id=owner.id, title="Old", created_at=T0))
    repo.save(Publication(profile_id=owner.id, title="New", created_at=T0 + timedelta(days=1)))

    assert [p.title for p in repo.list_by_profile(owner.id)] == ["New", "Old"]


def test_publication_update_and_delete(users, profiles, db_path):
    repo = SQLitePublicationRepo(db_path)
    owner = _profile(users, profiles, "Ada")
    pub = repo.save(Publication(profile_id=owner.id, title="Draft", file_path="k.pdf"))

    pub.title = "Final"
    pub.file_path = None
    repo.save(pub)
    loaded = repo.get_by_id(pub.id)
    assert loaded.title == "Final"
    assert loaded.file_path is None

    repo.delete(pub.id)
    assert repo.get_by_id(pub.id) is None
