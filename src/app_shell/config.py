import logging
import os

from src.rules.models import Rules

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ("sqlite", "memory")


class ConfigurationError(RuntimeError):
    """Startup configuration is unusable."""


def validate_ops_rules(rules: Rules, storage: str) -> None:
    """
    Validate operational requirements before startup.
    Raises ConfigurationError listing every problem found.
    """
    problems = []

    if storage not in STORAGE_BACKENDS:
        problems.append(
            f"Unknown storage backend '{storage}' (expected one of {', '.join(STORAGE_BACKENDS)})"
        )

    missing = [env_var for env_var in rules.ops.required_env if env_var not in os.environ]
    if missing:
        problems.append(f"Missing required environment variables: {', '.join(missing)}")

    if rules.compliance.target_intensity <= 0:
        problems.append("compliance.target_intensity must be positive")

    if problems:
        raise ConfigurationError("; ".join(problems))

    logger.info("Configuration validated (storage=%s).", storage)
