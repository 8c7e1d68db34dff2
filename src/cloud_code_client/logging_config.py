"""
Logging setup for applications embedding the client.

The library itself only creates module loggers; call ``setup_logging`` once
at startup to route them to the console and, optionally, a rotating file.
"""
import logging
import logging.config
from typing import Any, Dict, Optional

from cloud_code_client.services.configuration_service import ConfigurationService

# Configuration level names to Python log levels
LOG_LEVEL_MAPPING = {
    "Trace": "DEBUG",
    "Debug": "DEBUG",
    "Information": "INFO",
    "Warning": "WARNING",
    "Error": "ERROR",
    "Critical": "CRITICAL",
    "None": "CRITICAL"
}

# Chatty third-party loggers held at WARNING regardless of the configured level
QUIET_LOGGERS = ("httpx", "httpcore", "asyncio")

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DETAILED_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s [%(filename)s:%(lineno)d %(funcName)s]: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

MAX_LOG_FILE_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


def resolve_log_level(name: str) -> str:
    """Map a configured level name to a Python level name, defaulting to INFO."""
    level = LOG_LEVEL_MAPPING.get(name, name.upper())
    return level if level in LOG_LEVEL_MAPPING.values() else "INFO"


def setup_logging(config_service: ConfigurationService, log_file: Optional[str] = None) -> logging.Logger:
    """Configure root logging from the ``Logging`` settings section."""
    log_level = resolve_log_level(config_service.get_log_level())
    log_file = log_file or config_service.get_log_file()

    handlers: Dict[str, Dict[str, Any]] = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "level": log_level,
            "stream": "ext://sys.stdout",
        }
    }
    if log_file:
        handlers["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "formatter": "detailed",
            "level": log_level,
            "filename": str(log_file),
            "maxBytes": MAX_LOG_FILE_BYTES,
            "backupCount": LOG_FILE_BACKUPS,
            "encoding": "utf-8",
        }

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": LOG_FORMAT, "datefmt": DATE_FORMAT},
            "detailed": {"format": DETAILED_LOG_FORMAT, "datefmt": DATE_FORMAT},
        },
        "handlers": handlers,
        "root": {"level": log_level, "handlers": list(handlers)},
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
    })

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized - Level: {log_level}, File: {log_file or 'none'}")
    return logger
