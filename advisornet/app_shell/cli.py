import argparse
import logging
import sys
from uuid import UUID

from advisornet.adapters.sqlite.migrator import SQLiteMigrator
from advisornet.api.deps import Settings
from advisornet.app_shell.bootstrap import bootstrap_system
from advisornet.app_shell.context import ServiceContext
from advisornet.components.approval import DecideInput, run_decide
from advisornet.components.invite import (
    CreateInviteInput,
    DeleteInviteInput,
    ListInvitesInput,
    UpdateInviteInput,
    build_invite_url,
    run_create,
    run_delete,
    run_list,
    run_update,
)
from advisornet.domain.entities import User
from advisornet.rules.loader import load_rules

logger = logging.getLogger("cli")


def get_context(settings: Settings) -> ServiceContext:
    if not settings.rules_path.exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)

    rules = load_rules(settings.rules_path)
    return ServiceContext.create(
        settings.db_path, str(settings.storage_dir), rules, public_url=settings.public_url
    )


def _admin(ctx: ServiceContext, email: str) -> User:
    admin = ctx.user_repo.get_by_email(email)
    if not admin or not ctx.policy.is_admin(admin):
        logger.error("Admin %s not found. Invoke with a valid admin email.", email)
        sys.exit(1)
    return admin


def _fail(message: str | None) -> None:
    logger.error(message or "Command failed")
    sys.exit(1)


def handle_migrate(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(settings.db_path, str(settings.migrations_dir))
    applied = migrator.run_migrations()
    print(f"Applied {len(applied)} migration(s).")


def handle_bootstrap(ctx: ServiceContext) -> None:
    result = bootstrap_system(ctx)
    if result is None or not result.created:
        print("No admin created.")
        return
    assert result.user
    print(f"Admin created: {result.user.email}")


def handle_invite(ctx: ServiceContext, args: argparse.Namespace) -> None:
    admin = _admin(ctx, args.admin_email)
    registration_path = ctx.rules.invites.registration_path

    if args.invite_command == "create":
        created = run_create(
            CreateInviteInput(actor=admin, token=args.token, days_valid=args.days),
            ctx.invite_repo,
            ctx.policy,
            ctx.clock,
        )
        if not created.success or not created.invite:
            _fail(created.error)
            return
        print(f"Token: {created.invite.token}")
        print(f"Expires: {created.invite.expires_at.isoformat()}")
        print(f"Link: {build_invite_url(ctx.public_url, created.invite.token, registration_path)}")

    elif args.invite_command == "list":
        listed = run_list(ListInvitesInput(actor=admin), ctx.invite_repo, ctx.policy)
        for invite in listed.invites:
            state = "active" if invite.is_active else "inactive"
            used = f" used {invite.used_at.isoformat()}" if invite.used_at else ""
            print(f"{invite.id}  {invite.token}  {state}  expires {invite.expires_at.isoformat()}{used}")

    elif args.invite_command == "toggle":
        current = ctx.invite_repo.get_by_id(UUID(args.token_id))
        if not current:
            _fail("Invite not found")
            return
        toggled = run_update(
            UpdateInviteInput(actor=admin, token_id=current.id, is_active=not current.is_active),
            ctx.invite_repo,
            ctx.policy,
        )
        if not toggled.success or not toggled.invite:
            _fail(toggled.error)
            return
        print(f"Invite {toggled.invite.id} is now {'active' if toggled.invite.is_active else 'inactive'}.")

    elif args.invite_command == "delete":
        deleted = run_delete(
            DeleteInviteInput(actor=admin, token_id=UUID(args.token_id)),
            ctx.invite_repo,
            ctx.policy,
        )
        if not deleted.success:
            _fail(deleted.error)
            return
        print("Invite deleted.")


def handle_decision(ctx: ServiceContext, args: argparse.Namespace, decision: str) -> None:
    admin = _admin(ctx, args.admin_email)
    result = run_decide(
        DecideInput(actor=admin, profile_id=UUID(args.profile_id), decision=decision),
        ctx.profile_repo,
        ctx.policy,
        ctx.clock,
    )
    if not result.success or not result.profile:
        _fail(result.error)
        return
    print(f"Profile {result.profile.full_name} is now {result.profile.approval_status}.")


def main() -> None:
    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="AdvisorNet CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("migrate", help="Apply pending database migrations")
    subparsers.add_parser("bootstrap", help="Create the first admin from environment")

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    # invite
    invite_parser = subparsers.add_parser("invite", help="Manage invitation tokens")
    invite_parser.add_argument(
        "--admin-email", required=True, help="Email of the admin performing the action"
    )
    invite_sub = invite_parser.add_subparsers(dest="invite_command", required=True)
    create_parser = invite_sub.add_parser("create", help="Create a token")
    create_parser.add_argument("--token", help="Use this token instead of a random one")
    create_parser.add_argument("--days", type=int, help="Days until the token expires")
    invite_sub.add_parser("list", help="List tokens")
    toggle_parser = invite_sub.add_parser("toggle", help="Flip a token's active flag")
    toggle_parser.add_argument("token_id")
    delete_parser = invite_sub.add_parser("delete", help="Delete a token")
    delete_parser.add_argument("token_id")

    # approve / reject
    for name, help_text in (("approve", "Approve a pending profile"), ("reject", "Reject a pending profile")):
        decision_parser = subparsers.add_parser(name, help=help_text)
        decision_parser.add_argument("profile_id")
        decision_parser.add_argument(
            "--admin-email", required=True, help="Email of the admin performing the action"
        )

    args = parser.parse_args()
    settings = Settings()

    if args.command == "migrate":
        handle_migrate(settings)
        return

    if args.command == "serve":
        import uvicorn

        uvicorn.run("advisornet.api.main:app", host=args.host, port=args.port)
        return

    ctx = get_context(settings)

    if args.command == "bootstrap":
        handle_bootstrap(ctx)
    elif args.command == "invite":
        handle_invite(ctx, args)
    elif args.command == "approve":
        handle_decision(ctx, args, "approved")
    elif args.command == "reject":
        handle_decision(ctx, args, "rejected")


if __name__ == "__main__":
    main()
