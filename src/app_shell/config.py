import logging
import os
from pathlib import Path

from src.rules.models import Rules

logger = logging.getLogger(__name__)


def validate_ops_rules(rules: Rules, data_dir: Path) -> None:
    """
    Validate operational requirements before startup.
    Raises RuntimeError when the environment cannot run the site.
    """
    missing = [name for name in rules.ops.required_env if name not in os.environ]
    if missing:
        raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    try:
        data_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise RuntimeError(f"Data directory {data_dir} is not writable: {e}") from e

    if os.environ.get("SITE_SECRET_KEY") is None:
        logger.warning("SITE_SECRET_KEY is not set; using the development signing key")

    logger.info("Configuration validated (rules %s)", rules.project.rules_version)
