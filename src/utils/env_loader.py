"""Environment loading utility for the entire project.
Ensures environment variables are loaded from .env files.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

from utils.logging.logging_manager import LogManager


def find_env_file() -> str | None:
    """Find .env file in common locations.

    Returns:
        Path to the first .env file found, or None if not found.
    """
    project_root = Path(__file__).resolve().parent.parent.parent  # utils -> src -> project_root

    search_paths = [
        project_root / ".env",
        project_root / "src" / "domains" / "asana" / ".env",
        Path.cwd() / ".env",
    ]

    for env_path in search_paths:
        if env_path.is_file():
            return str(env_path)

    return None


def ensure_env_loaded(required_vars: list[str] | None = None) -> list[str]:
    """Load the project .env file (without overriding the process environment) and
    report required variables that are still missing.

    Call this at the beginning of every command.

    Args:
        required_vars: Environment variable names the caller needs.

    Returns:
        The names from ``required_vars`` that are still unset.
    """
    logger = LogManager.get_instance().get_logger("EnvLoader")

    env_file = find_env_file()
    if env_file:
        load_dotenv(env_file, override=False)
        logger.debug(f"Loaded environment variables from {env_file}")

    missing_vars = [var for var in required_vars or [] if not os.getenv(var)]
    if missing_vars:
        logger.warning(f"Required environment variables missing: {missing_vars}")
    return missing_vars
