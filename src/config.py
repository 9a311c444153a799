import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    """
    Configuration class for loading environment variables with validation.
    """

    # Logging settings
    LOG_DIR = os.getenv("LOG_DIR", "./logs")
    LOG_FILE = os.getenv("LOG_FILE", "kanban_metrics.log")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    if LOG_LEVEL not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ValueError(
            f"Invalid LOG_LEVEL: {LOG_LEVEL}. Must be one of 'DEBUG', 'INFO', "
            "'WARNING', 'ERROR', 'CRITICAL'."
        )
    LOG_OUTPUT = os.getenv("LOG_OUTPUT", "both").lower()
    if LOG_OUTPUT not in {"console", "file", "both"}:
        raise ValueError(
            f"Invalid LOG_OUTPUT: {LOG_OUTPUT}. Must be one of 'console', 'file', or 'both'."
        )

    LOG_RETENTION_HOURS = int(os.getenv("LOG_RETENTION_HOURS", "24"))

    # Output settings
    OUTPUT_DIR = os.getenv("OUTPUT_DIR", "./output")

    # Asana settings
    ASANA_BASE_URL = os.getenv("ASANA_BASE_URL", "https://app.asana.com/api/1.0")
    ASANA_ACCESS_TOKEN = os.getenv("ASANA_ACCESS_TOKEN")
    ASANA_MAX_RPS = int(os.getenv("ASANA_MAX_RPS", "2"))
    if not 0 < ASANA_MAX_RPS <= 1000:
        raise ValueError(f"Invalid ASANA_MAX_RPS: {ASANA_MAX_RPS}. Must be > 0 and <= 1000.")

    # Engine settings
    METRICS_MAX_WORKERS = int(os.getenv("METRICS_MAX_WORKERS", "4"))
    if METRICS_MAX_WORKERS < 1:
        raise ValueError(f"Invalid METRICS_MAX_WORKERS: {METRICS_MAX_WORKERS}. Must be >= 1.")

    # Additional settings
    USE_FILTER = os.getenv("USE_FILTER", "false").lower()
    if USE_FILTER not in {"true", "false"}:
        raise ValueError(
            f"Invalid USE_FILTER: {USE_FILTER}. Must be 'true' or 'false'."
        )
