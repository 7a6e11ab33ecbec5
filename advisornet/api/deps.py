import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated
from uuid import UUID

from fastapi import Depends, HTTPException, Request, UploadFile, status
from fastapi.security import OAuth2PasswordBearer

from advisornet.adapters.auth.crypto import JWTAuthAdapter
from advisornet.adapters.clock import SystemClock
from advisornet.adapters.dev_email import DevEmailAdapter
from advisornet.adapters.fs.filestore import FileSystemStore
from advisornet.adapters.function_email import FunctionEmailAdapter
from advisornet.adapters.sqlite.repos import (
    SQLiteConnectionRepo,
    SQLiteInviteTokenRepo,
    SQLiteProfileRepo,
    SQLitePublicationRepo,
    SQLiteUserRepo,
)
from advisornet.components.approval import AccessCheckInput, run_check_access
from advisornet.components.profiles import SessionContextInput, run_session_context
from advisornet.components.profiles.models import SessionContextOutput
from advisornet.domain.entities import Profile, User
from advisornet.domain.policy import PolicyEngine
from advisornet.domain.uploads import UploadedFile
from advisornet.ports.email import EmailPort
from advisornet.rules.loader import load_rules
from advisornet.rules.models import Rules


# --- Settings ---
DEV_SECRET_KEY = "dev-secret-unsafe"


class Settings:
    def __init__(self, data_dir: str | None = None, base_dir: Path | None = None) -> None:
        self.base_dir = base_dir or Path(os.getcwd())
        self.data_dir = Path(data_dir or os.environ.get("ADVISORNET_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "advisornet.db")
        self.storage_dir = self.data_dir / "storage"
        self.public_url = os.environ.get(
            "ADVISORNET_PUBLIC_URL", "http://localhost:8000"
        ).rstrip("/")
        self.email_function_url = os.environ.get("ADVISORNET_EMAIL_FUNCTION_URL")
        self.email_function_key = os.environ.get("ADVISORNET_EMAIL_FUNCTION_KEY")
        self.secret_key = os.environ.get("ADVISORNET_SECRET_KEY", DEV_SECRET_KEY)
        self.rules_path = self.base_dir / "rules.yaml"
        self.migrations_dir = self.base_dir / "migrations"


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def _load_rules_cached(path: Path) -> Rules:
    return load_rules(path)


def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return _load_rules_cached(settings.rules_path)


# --- Repos ---
def get_user_repo(settings: Settings = Depends(get_settings)) -> SQLiteUserRepo:
    return SQLiteUserRepo(settings.db_path)


def get_invite_repo(settings: Settings = Depends(get_settings)) -> SQLiteInviteTokenRepo:
    return SQLiteInviteTokenRepo(settings.db_path)


def get_profile_repo(settings: Settings = Depends(get_settings)) -> SQLiteProfileRepo:
    return SQLiteProfileRepo(settings.db_path)


def get_connection_repo(settings: Settings = Depends(get_settings)) -> SQLiteConnectionRepo:
    return SQLiteConnectionRepo(settings.db_path)


def get_publication_repo(settings: Settings = Depends(get_settings)) -> SQLitePublicationRepo:
    return SQLitePublicationRepo(settings.db_path)


# --- Services ---
def get_policy(rules: Rules = Depends(get_rules)) -> PolicyEngine:
    return PolicyEngine(rules)


def get_file_store(settings: Settings = Depends(get_settings)) -> FileSystemStore:
    return FileSystemStore(
        base_path=str(settings.storage_dir), public_base_url=settings.public_url
    )


# Adapters needed for component injection
def get_auth_adapter(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> JWTAuthAdapter:
    return JWTAuthAdapter.from_rules(settings.secret_key, rules.auth)


_clock_instance: SystemClock | None = None


def get_clock() -> SystemClock:
    """Get clock singleton."""
    global _clock_instance
    if _clock_instance is None:
        _clock_instance = SystemClock()
    return _clock_instance


# Dev email keeps its log of messages across requests
_dev_email_instance: DevEmailAdapter | None = None


def get_dev_email(rules: Rules = Depends(get_rules)) -> DevEmailAdapter:
    global _dev_email_instance
    if _dev_email_instance is None:
        _dev_email_instance = DevEmailAdapter(
            brand_name=rules.project.brand_name,
            bio_preview_chars=rules.connections.bio_preview_chars,
        )
    return _dev_email_instance


def get_email(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> EmailPort:
    """HTTP email function when configured, otherwise the log-only dev adapter."""
    if settings.email_function_url:
        return FunctionEmailAdapter(
            settings.email_function_url, api_key=settings.email_function_key
        )
    return get_dev_email(rules)


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


async def get_current_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    user_repo: SQLiteUserRepo = Depends(get_user_repo),
    auth_adapter: JWTAuthAdapter = Depends(get_auth_adapter),
) -> User:
    # Cookie first (HttpOnly), then the Authorization header
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ", 1)[1]

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = auth_adapter.decode_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None or not isinstance(user_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    try:
        user = user_repo.get_by_id(UUID(user_id))
    except ValueError:
        user = None
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )

    if user.status != "active":
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is disabled",
        )

    return user


def get_session_context(
    user: User = Depends(get_current_user),
    profile_repo: SQLiteProfileRepo = Depends(get_profile_repo),
    policy: PolicyEngine = Depends(get_policy),
) -> SessionContextOutput:
    return run_session_context(SessionContextInput(user=user), profile_repo, policy)


def require_approved_profile(
    ctx: SessionContextOutput = Depends(get_session_context),
    policy: PolicyEngine = Depends(get_policy),
) -> Profile:
    """
    Approval gate for member routes.

    Resolves to the caller's approved profile or refuses with 403.
    """
    assert ctx.user
    gate = run_check_access(AccessCheckInput(user=ctx.user, profile=ctx.profile), policy)
    if not gate.allowed or ctx.profile is None:
        raise HTTPException(status_code=403, detail=gate.error or "Access denied")
    return ctx.profile


def require_approved_or_admin(
    ctx: SessionContextOutput = Depends(get_session_context),
    policy: PolicyEngine = Depends(get_policy),
) -> SessionContextOutput:
    """
    Approval gate for read routes admins also use.

    Admins pass with or without a profile; everyone else needs an
    approved one.
    """
    assert ctx.user
    gate = run_check_access(
        AccessCheckInput(user=ctx.user, profile=ctx.profile, admin_route=True), policy
    )
    if not gate.allowed:
        raise HTTPException(status_code=403, detail=gate.error or "Access denied")
    return ctx


def require_admin(
    user: User = Depends(get_current_user),
    policy: PolicyEngine = Depends(get_policy),
) -> User:
    if not policy.is_admin(user):
        raise HTTPException(status_code=403, detail="Access denied")
    return user


# --- Uploads ---
def to_uploaded_file(upload: UploadFile | None) -> UploadedFile | None:
    """Read a multipart upload; an empty file field counts as no file."""
    if upload is None or not upload.filename:
        return None
    return UploadedFile(
        filename=upload.filename,
        content_type=upload.content_type or "application/octet-stream",
        data=upload.file.read(),
    )
