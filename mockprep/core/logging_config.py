"""
Logging setup for the MockPrep API.

Console output for humans, a rotating file for post-mortems. Secrets in
settings dumps go through sanitize_log_data first.
"""
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from mockprep.core.config import LOG_DIR

LOG_FILE_NAME = "mockprep.log"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5

CONSOLE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)-7s %(name)s %(funcName)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Request lines, SDK transport chatter
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "openai")

REDACTED = "***REDACTED***"
SENSITIVE_KEY_PARTS = ("password", "secret", "token", "api_key", "apikey", "authorization", "cookie")


def setup_logging(log_level: str = "INFO", log_dir: Optional[str] = LOG_DIR) -> None:
    """
    Configure the root logger. Safe to call more than once.

    Args:
        log_level: Level name; unknown names fall back to INFO
        log_dir: Directory for the rotating log file, or None for console only
    """
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    root.addHandler(console)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path / LOG_FILE_NAME, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
        )
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        root.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(part in lowered for part in SENSITIVE_KEY_PARTS)


def sanitize_log_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of data with secret-looking keys masked (nested dicts included). Empty values stay visible."""
    sanitized = {}
    for key, value in data.items():
        if isinstance(value, dict):
            sanitized[key] = sanitize_log_data(value)
        elif _is_sensitive(key) and value:
            sanitized[key] = REDACTED
        else:
            sanitized[key] = value
    return sanitized
