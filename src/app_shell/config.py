import logging
import os
from pathlib import Path

from src.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised when the environment cannot run the service."""


def validate_ops_rules(
    rules: Rules,
    base_dir: Path,
    environment: str = "development",
    migrations_dir: Path | None = None,
) -> None:
    """
    Validate operational requirements before startup.

    Raises ConfigError listing everything that is missing.
    """
    ops = rules.ops
    problems: list[str] = []

    # 1. Required environment, stricter in production
    required = list(ops.required_env)
    if environment.lower() == "production":
        required += [v for v in ops.production_required_env if v not in required]
    missing = [v for v in required if not os.environ.get(v)]
    if missing:
        problems.append(f"Missing required environment variables: {', '.join(missing)}")

    # 2. Migrations must be shipped with the service
    migrations = migrations_dir if migrations_dir is not None else base_dir / "migrations"
    if not migrations.is_dir():
        problems.append(f"Migrations directory not found: {migrations}")

    if problems:
        raise ConfigError("; ".join(problems))

    logger.info("Configuration validated (%s)", environment)
