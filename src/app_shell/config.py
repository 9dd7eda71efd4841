import logging
import os
import sys
from pathlib import Path

from src.rules.models import Rules

logger = logging.getLogger(__name__)


def missing_env(rules: Rules) -> list[str]:
    """Environment variables the rules need but the process lacks."""
    required = list(rules.ops.required_env)

    smtp = rules.mail.smtp
    if rules.mail.transport == "smtp" and smtp is not None:
        required.extend(name for name in (smtp.username_env, smtp.password_env) if name)

    return [name for name in required if name not in os.environ]


def validate_ops_rules(rules: Rules, base_dir: Path) -> None:
    """
    Validate operational requirements before startup.
    Exits the process when a required environment variable is missing.
    """
    missing = missing_env(rules)
    if missing:
        logger.critical("Missing required environment variables: %s", ", ".join(missing))
        sys.exit(1)

    locales_dir = base_dir / rules.newsletter.locales_dir
    if not locales_dir.is_dir():
        # Messages fall back to built-in English text
        logger.warning("Locale directory %s not found", locales_dir)

    logger.info("Configuration validated.")
