"""
Approval component unit tests.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from advisornet.components.approval import (
    PENDING_MESSAGE,
    REJECTED_MESSAGE,
    AccessCheckInput,
    DecideInput,
    ListPendingInput,
    run,
    run_check_access,
    run_decide,
    run_list_pending,
)
from advisornet.domain.entities import ApprovalStatus, Profile, User
from advisornet.domain.policy import PolicyEngine
from advisornet.rules.loader import load_rules

RULES_PATH = Path(__file__).resolve().parents[4] / "rules.yaml"


class MockProfileRepo:
    def __init__(self) -> None:
        self._profiles: dict[UUID, Profile] = {}

    def get_by_id(self, profile_id: UUID) -> Profile | None:
        return self._profiles.get(profile_id)

    def list_by_status(self, approval_status: ApprovalStatus) -> list[Profile]:
        return [p for p in self._profiles.values() if p.approval_status == approval_status]

    def save(self, profile: Profile) -> Profile:
        self._profiles[profile.id] = profile
        return profile


class MockTimePort:
    def __init__(self, fixed_time: datetime | None = None) -> None:
        self._time = fixed_time or datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)

    def now_utc(self) -> datetime:
        return self._time


@pytest.fixture
def repo() -> MockProfileRepo:
    return MockProfileRepo()


@pytest.fixture
def time_port() -> MockTimePort:
    return MockTimePort()


@pytest.fixture
def policy() -> PolicyEngine:
    return PolicyEngine(load_rules(RULES_PATH))


@pytest.fixture
def admin_user() -> User:
    return User(email="admin@example.com", password_hash="hashed", roles=["admin"])


@pytest.fixture
def member() -> User:
    return User(email="member@example.com", password_hash="hashed", roles=["user"])


def _profile(
    name: str, status: ApprovalStatus = "pending", created_at: datetime | None = None
) -> Profile:
    return Profile(
        user_id=uuid4(),
        email=f"{name.lower()}@example.com",
        full_name=name,
        user_type="advisor",
        approval_status=status,
        created_at=created_at or datetime(2024, 6, 1, tzinfo=UTC),
    )


class TestListPending:
    def test_newest_first_and_only_pending(
        self, repo: MockProfileRepo, policy: PolicyEngine, admin_user: User
    ) -> None:
        base = datetime(2024, 6, 1, tzinfo=UTC)
        old = repo.save(_profile("Old", created_at=base))
        new = repo.save(_profile("New", created_at=base + timedelta(days=1)))
        repo.save(_profile("Done", status="approved"))

        result = run_list_pending(ListPendingInput(actor=admin_user), repo, policy)

        assert result.success
        assert [p.id for p in result.profiles] == [new.id, old.id]

    def test_members_denied(
        self, repo: MockProfileRepo, policy: PolicyEngine, member: User
    ) -> None:
        result = run_list_pending(ListPendingInput(actor=member), repo, policy)
        assert not result.success
        assert result.code == "forbidden"


class TestDecide:
    @pytest.mark.parametrize("decision", ["approved", "rejected"])
    def test_pending_transitions(
        self,
        repo: MockProfileRepo,
        policy: PolicyEngine,
        time_port: MockTimePort,
        admin_user: User,
        decision: str,
    ) -> None:
        profile = repo.save(_profile("Ada"))

        result = run_decide(
            DecideInput(actor=admin_user, profile_id=profile.id, decision=decision),
            repo,
            policy,
            time_port,
        )

        assert result.success
        assert repo.get_by_id(profile.id).approval_status == decision  # type: ignore[union-attr]
        assert result.profile is not None
        assert result.profile.updated_at == time_port.now_utc()

    @pytest.mark.parametrize("current", ["approved", "rejected"])
    @pytest.mark.parametrize("decision", ["approved", "rejected"])
    def test_terminal_states_do_not_reopen(
        self,
        repo: MockProfileRepo,
        policy: PolicyEngine,
        time_port: MockTimePort,
        admin_user: User,
        current: ApprovalStatus,
        decision: str,
    ) -> None:
        profile = repo.save(_profile("Ada", status=current))

        result = run_decide(
            DecideInput(actor=admin_user, profile_id=profile.id, decision=decision),
            repo,
            policy,
            time_port,
        )

        assert not result.success
        assert result.code == "conflict"
        assert repo.get_by_id(profile.id).approval_status == current  # type: ignore[union-attr]

    def test_missing_profile(
        self, repo: MockProfileRepo, policy: PolicyEngine, time_port: MockTimePort, admin_user: User
    ) -> None:
        result = run_decide(
            DecideInput(actor=admin_user, profile_id=uuid4(), decision="approved"),
            repo,
            policy,
            time_port,
        )
        assert result.code == "not_found"

    def test_unknown_decision(
        self, repo: MockProfileRepo, policy: PolicyEngine, time_port: MockTimePort, admin_user: User
    ) -> None:
        profile = repo.save(_profile("Ada"))
        result = run_decide(
            DecideInput(actor=admin_user, profile_id=profile.id, decision="pending"),
            repo,
            policy,
            time_port,
        )
        assert result.code == "invalid"

    def test_members_cannot_decide(
        self, repo: MockProfileRepo, policy: PolicyEngine, time_port: MockTimePort, member: User
    ) -> None:
        profile = repo.save(_profile("Ada"))
        result = run_decide(
            DecideInput(actor=member, profile_id=profile.id, decision="approved"),
            repo,
            policy,
            time_port,
        )
        assert result.code == "forbidden"
        assert repo.get_by_id(profile.id).approval_status == "pending"  # type: ignore[union-attr]


class TestAccessGate:
    def test_approved_profile_allowed(self, policy: PolicyEngine, member: User) -> None:
        out = run_check_access(AccessCheckInput(user=member, profile=_profile("A", "approved")), policy)
        assert out.allowed

    @pytest.mark.parametrize(
        "status,message", [("pending", PENDING_MESSAGE), ("rejected", REJECTED_MESSAGE)]
    )
    def test_unapproved_profile_refused(
        self, policy: PolicyEngine, member: User, status: ApprovalStatus, message: str
    ) -> None:
        out = run_check_access(AccessCheckInput(user=member, profile=_profile("A", status)), policy)
        assert not out.allowed
        assert out.error == message

    def test_missing_profile_refused(self, policy: PolicyEngine, member: User) -> None:
        out = run_check_access(AccessCheckInput(user=member, profile=None), policy)
        assert not out.allowed

    def test_admin_bypass_only_on_admin_routes(
        self, policy: PolicyEngine, admin_user: User
    ) -> None:
        assert run_check_access(
            AccessCheckInput(user=admin_user, profile=None, admin_route=True), policy
        ).allowed
        assert not run_check_access(
            AccessCheckInput(user=admin_user, profile=None, admin_route=False), policy
        ).allowed

    def test_run_dispatches(self, policy: PolicyEngine, member: User) -> None:
        out = run(AccessCheckInput(user=member, profile=_profile("A", "approved")), policy=policy)
        assert out.allowed  # type: ignore[union-attr]
