"""
Publications component unit tests.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from advisornet.components.publications import (
    CreatePublicationInput,
    DeletePublicationInput,
    ListPublicationsInput,
    UpdatePublicationInput,
    run,
    run_create,
    run_delete,
    run_list,
    run_update,
)
from advisornet.domain.entities import Profile, Publication, User
from advisornet.domain.policy import PolicyEngine
from advisornet.domain.uploads import UploadedFile
from advisornet.rules.loader import load_rules

RULES_PATH = Path(__file__).resolve().parents[4] / "rules.yaml"


class MockPublicationRepo:
    def __init__(self) -> None:
        self._items: dict[UUID, Publication] = {}

    def save(self, publication: Publication) -> Publication:
        self._items[publication.id] = publication
        return publication

    def get_by_id(self, publication_id: UUID) -> Publication | None:
        return self._items.get(publication_id)

    def list_by_profile(self, profile_id: UUID) -> list[Publication]:
        return [p for p in self._items.values() if p.profile_id == profile_id]

    def delete(self, publication_id: UUID) -> None:
        self._items.pop(publication_id, None)


class MockProfileRepo:
    def __init__(self, profiles: list[Profile]) -> None:
        self._profiles = profiles

    def get_by_user_id(self, user_id: UUID) -> Profile | None:
        return next((p for p in self._profiles if p.user_id == user_id), None)


class MockFileStore:
    def __init__(self) -> None:
        self.files: dict[tuple[str, str], bytes] = {}

    def save(self, bucket: str, path: str, data: bytes) -> str:
        self.files[(bucket, path)] = data
        return path

    def delete(self, bucket: str, path: str) -> None:
        self.files.pop((bucket, path), None)

    def public_url(self, bucket: str, path: str) -> str:
        return f"http://testserver/files/{bucket}/{path}"


class MockTimePort:
    def __init__(self, fixed_time: datetime | None = None) -> None:
        self._time = fixed_time or datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)

    def now_utc(self) -> datetime:
        return self._time

    def advance(self, delta: timedelta) -> None:
        self._time = self._time + delta


def _pdf(name: str = "paper.pdf") -> UploadedFile:
    return UploadedFile(filename=name, content_type="application/pdf", data=b"%PDF-1.4 test")


@pytest.fixture
def policy() -> PolicyEngine:
    return PolicyEngine(load_rules(RULES_PATH))


@pytest.fixture
def owner() -> User:
    return User(email="owner@example.com", password_hash="h")


@pytest.fixture
def other() -> User:
    return User(email="other@example.com", password_hash="h")


@pytest.fixture
def owner_profile(owner: User) -> Profile:
    return Profile(
        user_id=owner.id,
        email=owner.email,
        full_name="Owner",
        user_type="advisor",
        approval_status="approved",
    )


@pytest.fixture
def other_profile(other: User) -> Profile:
    return Profile(
        user_id=other.id,
        email=other.email,
        full_name="Other",
        user_type="laboratory",
        approval_status="approved",
    )


@pytest.fixture
def profiles(owner_profile: Profile, other_profile: Profile) -> MockProfileRepo:
    return MockProfileRepo([owner_profile, other_profile])


@pytest.fixture
def repo() -> MockPublicationRepo:
    return MockPublicationRepo()


@pytest.fixture
def store() -> MockFileStore:
    return MockFileStore()


@pytest.fixture
def time_port() -> MockTimePort:
    return MockTimePort()


def _create(inp, repo, profiles, store, policy, time_port):
    return run_create(inp, repo, profiles, store, policy, time_port)


class TestCreate:
    def test_with_file(self, repo, profiles, store, policy, time_port, owner, owner_profile) -> None:
        result = _create(
            CreatePublicationInput(
                user=owner,
                title="  Tumour markers  ",
                description=" ",
                publication_type="report",
                file=_pdf(),
            ),
            repo,
            profiles,
            store,
            policy,
            time_port,
        )

        assert result.success
        pub = result.publication
        assert pub is not None
        assert pub.title == "Tumour markers"
        assert pub.description is None
        assert pub.publication_type == "report"
        assert pub.profile_id == owner_profile.id
        millis = int(time_port.now_utc().timestamp() * 1000)
        assert pub.file_path is not None
        assert re.fullmatch(rf"{owner.id}/{millis}-[0-9a-f]{{32}}\.pdf", pub.file_path)
        assert pub.file_url == f"http://testserver/files/publications/{pub.file_path}"
        assert ("publications", pub.file_path) in store.files

    def test_default_type_is_paper(self, repo, profiles, store, policy, time_port, owner) -> None:
        result = _create(
            CreatePublicationInput(user=owner, title="Notes", external_url="https://doi.org/x"),
            repo,
            profiles,
            store,
            policy,
            time_port,
        )
        assert result.publication is not None
        assert result.publication.publication_type == "paper"
        assert result.publication.file_url is None
        assert result.publication.external_url == "https://doi.org/x"

    def test_title_required(self, repo, profiles, store, policy, time_port, owner) -> None:
        result = _create(
            CreatePublicationInput(user=owner, title="   ", file=_pdf()),
            repo,
            profiles,
            store,
            policy,
            time_port,
        )
        assert result.code == "invalid"
        assert result.error == "Title is required"
        assert store.files == {}

    def test_unknown_type(self, repo, profiles, store, policy, time_port, owner) -> None:
        result = _create(
            CreatePublicationInput(user=owner, title="X", publication_type="blog"),
            repo,
            profiles,
            store,
            policy,
            time_port,
        )
        assert result.code == "invalid"


    def test_publish_permission_required(self, repo, profiles, store, time_port, owner) -> None:
        rules = load_rules(RULES_PATH)
        rules.rbac.roles["user"] = ["directory:browse", "publications:view"]

        result = _create(
            CreatePublicationInput(user=owner, title="Notes", file=_pdf()),
            repo,
            profiles,
            store,
            PolicyEngine(rules),
            time_port,
        )

        assert result.code == "forbidden"
        assert store.files == {}

class TestUpdateDelete:
    @pytest.fixture
    def existing(self, repo, profiles, store, policy, time_port, owner) -> Publication:
        result = _create(
            CreatePublicationInput(user=owner, title="Draft", file=_pdf()),
            repo,
            profiles,
            store,
            policy,
            time_port,
        )
        assert result.publication is not None
        return result.publication

    def test_owner_updates_and_replaces_file(
        self, repo, profiles, store, policy, time_port, owner, existing
    ) -> None:
        old_key = existing.file_path
        time_port.advance(timedelta(seconds=5))

        result = run_update(
            UpdatePublicationInput(
                user=owner,
                publication_id=existing.id,
                title="Final",
                file=_pdf("final.pdf"),
            ),
            repo,
            profiles,
            store,
            policy,
            time_port,
        )

        assert result.success
        assert result.publication is not None
        assert result.publication.title == "Final"
        assert result.publication.file_path != old_key
        assert ("publications", old_key) not in store.files
        assert len(store.files) == 1

    def test_remove_file(self, repo, profiles, store, policy, time_port, owner, existing) -> None:
        result = run_update(
            UpdatePublicationInput(user=owner, publication_id=existing.id, remove_file=True),
            repo,
            profiles,
            store,
            policy,
            time_port,
        )
        assert result.publication is not None
        assert result.publication.file_url is None
        assert store.files == {}

    def test_non_owner_forbidden(
        self, repo, profiles, store, policy, time_port, other, existing
    ) -> None:
        update = run_update(
            UpdatePublicationInput(user=other, publication_id=existing.id, title="Mine"),
            repo,
            profiles,
            store,
            policy,
            time_port,
        )
        delete = run_delete(
            DeletePublicationInput(user=other, publication_id=existing.id), repo, profiles, store, policy
        )

        assert update.code == "forbidden"
        assert delete.code == "forbidden"
        assert repo.get_by_id(existing.id).title == "Draft"  # type: ignore[union-attr]

    def test_revoked_publish_permission(self, repo, profiles, store, time_port, owner, existing) -> None:
        rules = load_rules(RULES_PATH)
        rules.rbac.roles["user"] = []
        locked = PolicyEngine(rules)

        update = run_update(
            UpdatePublicationInput(user=owner, publication_id=existing.id, title="Final"),
            repo,
            profiles,
            store,
            locked,
            time_port,
        )
        delete = run_delete(
            DeletePublicationInput(user=owner, publication_id=existing.id), repo, profiles, store, locked
        )

        assert update.code == "forbidden"
        assert delete.code == "forbidden"
        assert repo.get_by_id(existing.id).title == "Draft"  # type: ignore[union-attr]

    def test_delete_removes_file(self, repo, profiles, store, policy, owner, existing) -> None:
        result = run_delete(
            DeletePublicationInput(user=owner, publication_id=existing.id), repo, profiles, store, policy
        )

        assert result.success
        assert repo.get_by_id(existing.id) is None
        assert store.files == {}

    def test_missing(self, repo, profiles, store, policy, owner) -> None:
        result = run_delete(
            DeletePublicationInput(user=owner, publication_id=uuid4()), repo, profiles, store, policy
        )
        assert result.code == "not_found"


class TestList:
    def test_newest_first_for_approved_viewer(
        self, repo, profiles, store, policy, time_port, owner, other, owner_profile, other_profile
    ) -> None:
        _create(CreatePublicationInput(user=owner, title="First"), repo, profiles, store, policy, time_port)
        time_port.advance(timedelta(days=1))
        _create(CreatePublicationInput(user=owner, title="Second"), repo, profiles, store, policy, time_port)

        result = run_list(
            ListPublicationsInput(viewer=other, profile_id=owner_profile.id),
            repo,
            policy,
        )

        assert [p.title for p in result.publications] == ["Second", "First"]

    def test_view_permission_required(self, repo, other, owner_profile) -> None:
        rules = load_rules(RULES_PATH)
        rules.rbac.roles["user"] = ["directory:browse"]
        result = run(
            ListPublicationsInput(viewer=other, profile_id=owner_profile.id),
            repo=repo,
            policy=PolicyEngine(rules),
        )
        assert result.code == "forbidden"  # type: ignore[union-attr]

    def test_admin_lists_without_profile(self, repo, policy, owner_profile) -> None:
        admin = User(email="admin@example.com", password_hash="h", roles=["admin"])
        result = run_list(ListPublicationsInput(viewer=admin, profile_id=owner_profile.id), repo, policy)
        assert result.success
