import logging
import os

from advisornet.app_shell.context import ServiceContext
from advisornet.components.auth import BootstrapAdminInput, BootstrapOutput, run_bootstrap_admin

logger = logging.getLogger(__name__)

EMAIL_ENV = "ADVISORNET_BOOTSTRAP_EMAIL"
PASSWORD_ENV = "ADVISORNET_BOOTSTRAP_PASSWORD"


def bootstrap_system(ctx: ServiceContext) -> BootstrapOutput | None:
    """
    Create the first admin account (day 0) from environment credentials.

    Does nothing once any user exists, or when the credentials are unset.
    """
    if not ctx.rules.ops.bootstrap_admin.enabled_if_no_users:
        return None
    if ctx.user_repo.count() > 0:
        return None

    email = os.environ.get(EMAIL_ENV)
    password = os.environ.get(PASSWORD_ENV)
    if not email or not password:
        logger.info(
            "System is empty but %s/%s not set. Skipping admin creation.",
            EMAIL_ENV,
            PASSWORD_ENV,
        )
        return None

    result = run_bootstrap_admin(
        BootstrapAdminInput(email=email, password=password),
        user_repo=ctx.user_repo,
        auth_adapter=ctx.auth_adapter,
        policy=ctx.policy,
        time=ctx.clock,
    )
    if result.created:
        logger.info("Bootstrap admin created for %s", email)
    elif not result.success:
        logger.error("Bootstrap admin not created: %s", result.error)
    return result
