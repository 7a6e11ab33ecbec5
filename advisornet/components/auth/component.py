from uuid import uuid4

from advisornet.components.approval import AccessCheckInput, run_check_access
from advisornet.domain.entities import User
from advisornet.domain.policy import PolicyEngine

from .models import AuthOutput, BootstrapAdminInput, BootstrapOutput, LoginInput
from .ports import (
    AuthAdapterPort,
    PasswordHasherPort,
    ProfileRepoPort,
    TimePort,
    UserRepoPort,
)

INVALID_CREDENTIALS = "Invalid credentials"


def run_login(
    inp: LoginInput,
    user_repo: UserRepoPort,
    profile_repo: ProfileRepoPort,
    auth_adapter: AuthAdapterPort,
    policy: PolicyEngine,
) -> AuthOutput:
    """
    Check credentials and issue a session token.

    Members whose profile is not approved are refused here rather than
    signed in and bounced later.
    """
    user = user_repo.get_by_email(inp.email.strip().lower())
    if not user:
        return AuthOutput(error=INVALID_CREDENTIALS, code="unauthorized")

    if not auth_adapter.verify_password(inp.password, user.password_hash):
        return AuthOutput(error=INVALID_CREDENTIALS, code="unauthorized")

    if user.status != "active":
        return AuthOutput(error="User account is disabled", code="forbidden")

    profile = profile_repo.get_by_user_id(user.id)
    gate = run_check_access(
        AccessCheckInput(user=user, profile=profile, admin_route=True), policy
    )
    if not gate.allowed:
        return AuthOutput(user=user, profile=profile, error=gate.error, code="forbidden")

    token = auth_adapter.create_token(user.id, policy.rules.auth.sessions.ttl_minutes)
    return AuthOutput(user=user, profile=profile, token=token, success=True)


def run_bootstrap_admin(
    inp: BootstrapAdminInput,
    user_repo: UserRepoPort,
    auth_adapter: PasswordHasherPort,
    policy: PolicyEngine,
    time: TimePort,
) -> BootstrapOutput:
    """Create the day-0 admin when the system has no users yet."""
    if not policy.rules.ops.bootstrap_admin.enabled_if_no_users:
        return BootstrapOutput(success=True)

    if user_repo.count() > 0:
        return BootstrapOutput(success=True)

    email = inp.email.strip().lower()
    if not email or not inp.password:
        return BootstrapOutput(error="Bootstrap email and password are required")

    min_length = policy.rules.auth.password.min_length
    if len(inp.password) < min_length:
        return BootstrapOutput(error=f"Password must be at least {min_length} characters")

    now = time.now_utc()
    admin = User(
        id=uuid4(),
        email=email,
        password_hash=auth_adapter.hash_password(inp.password),
        roles=["admin"],
        status="active",
        created_at=now,
        updated_at=now,
    )
    user_repo.save(admin)
    return BootstrapOutput(user=admin, created=True, success=True)


def run(
    inp: LoginInput | BootstrapAdminInput,
    *,
    user_repo: UserRepoPort,
    auth_adapter: AuthAdapterPort,
    policy: PolicyEngine,
    profile_repo: ProfileRepoPort | None = None,
    time: TimePort | None = None,
) -> AuthOutput | BootstrapOutput:
    if isinstance(inp, LoginInput):
        assert profile_repo
        return run_login(inp, user_repo, profile_repo, auth_adapter, policy)

    elif isinstance(inp, BootstrapAdminInput):
        assert time
        return run_bootstrap_admin(inp, user_repo, auth_adapter, policy, time)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
