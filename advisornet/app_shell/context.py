from __future__ import annotations

from dataclasses import dataclass

from advisornet.adapters.auth.crypto import Argon2AuthAdapter
from advisornet.adapters.clock import SystemClock
from advisornet.adapters.fs.filestore import FileSystemStore
from advisornet.adapters.sqlite.repos import (
    SQLiteConnectionRepo,
    SQLiteInviteTokenRepo,
    SQLiteProfileRepo,
    SQLitePublicationRepo,
    SQLiteUserRepo,
)
from advisornet.domain.policy import PolicyEngine
from advisornet.rules.models import Rules


@dataclass
class ServiceContext:
    """Repos and adapters wired for code that runs outside a request (CLI, startup)."""

    user_repo: SQLiteUserRepo
    invite_repo: SQLiteInviteTokenRepo
    profile_repo: SQLiteProfileRepo
    connection_repo: SQLiteConnectionRepo
    publication_repo: SQLitePublicationRepo
    store: FileSystemStore
    auth_adapter: Argon2AuthAdapter
    policy: PolicyEngine
    rules: Rules
    clock: SystemClock
    public_url: str = ""

    @classmethod
    def create(
        cls, db_path: str, fs_path: str, rules: Rules, public_url: str = ""
    ) -> ServiceContext:
        return cls(
            user_repo=SQLiteUserRepo(db_path),
            invite_repo=SQLiteInviteTokenRepo(db_path),
            profile_repo=SQLiteProfileRepo(db_path),
            connection_repo=SQLiteConnectionRepo(db_path),
            publication_repo=SQLitePublicationRepo(db_path),
            store=FileSystemStore(fs_path, public_base_url=public_url),
            auth_adapter=Argon2AuthAdapter(),
            policy=PolicyEngine(rules),
            rules=rules,
            clock=SystemClock(),
            public_url=public_url,
        )
