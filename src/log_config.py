from config import Config
from utils.logging.logging_manager import LogLevel, LogManager

# LOG_LEVEL is validated by Config, so every accepted name is a LogLevel member
LOG_LEVEL_MAP = {level.name: level for level in LogLevel}

LogManager.initialize(
    log_dir=Config.LOG_DIR,
    log_file=Config.LOG_FILE,
    log_retention_hours=Config.LOG_RETENTION_HOURS,
    default_level=LOG_LEVEL_MAP[Config.LOG_LEVEL],
    use_filter=Config.USE_FILTER == "true",
    log_output=Config.LOG_OUTPUT,
)

log_manager = LogManager.get_instance()
