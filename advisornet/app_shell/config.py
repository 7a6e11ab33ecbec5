import logging
import os
from pathlib import Path

from advisornet.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Operational configuration is unusable; the process should not start."""


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup.
    """
    ops = rules.ops

    # 1. Data dir must exist (created if missing) and be writable
    if ops.data_dir_required:
        try:
            data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"Cannot create data directory {data_dir}: {e}") from e
        if not os.access(data_dir, os.W_OK):
            raise ConfigError(f"Data directory {data_dir} is not writable")

    # 2. Required env
    missing = [name for name in ops.required_env if name not in os.environ]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    # 3. Bootstrap credentials are only needed on an empty database
    if ops.bootstrap_admin.enabled_if_no_users:
        unset = [n for n in ops.bootstrap_admin.required_env_when_enabled if not os.environ.get(n)]
        if unset:
            logger.warning(
                "Admin bootstrap is enabled but %s not set; an empty database "
                "will start without an admin.",
                ", ".join(unset),
            )

    # 4. Sessions signed with the built-in key are forgeable
    if not os.environ.get("ADVISORNET_SECRET_KEY"):
        logger.warning("ADVISORNET_SECRET_KEY is not set; using the development signing key.")

    logger.info("Configuration validated.")
