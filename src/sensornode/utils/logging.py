"""Logging for the sensor node: rotating file, console, key redaction."""

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

from sensornode.config import NodeSettings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S%z"

# httpx logs every request URL at INFO, and uplink URLs carry the write key
QUIET_LOGGERS = ("httpx", "httpcore")

_API_KEY_PATTERN = re.compile(r"(api_key=)[^&\s'\"]+")


class RedactApiKeyFilter(logging.Filter):
    """Masks api_key query values in log messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _API_KEY_PATTERN.sub(r"\1***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logger(settings: NodeSettings, name: str = "sensornode") -> logging.Logger:
    """Configure the package logger from node settings.

    Component loggers (sensornode.boot, sensornode.report, ...) propagate
    here. The console handler writes to stderr so log lines stay apart from
    operator prompts on stdout. Calling it again only re-applies the level.

    Args:
        settings: Provides log_file, log_level (by name) and rotation limits
        name: Logger name

    Returns:
        Configured logger instance
    """
    level = logging.getLevelName(settings.log_level)
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for quiet in QUIET_LOGGERS:
        logging.getLogger(quiet).setLevel(max(level, logging.WARNING))

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    Path(settings.log_file).parent.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
    redact = RedactApiKeyFilter()

    handlers = [
        RotatingFileHandler(
            settings.log_file,
            maxBytes=settings.log_max_bytes,
            backupCount=settings.log_backup_count,
            encoding="utf-8",
        ),
        logging.StreamHandler(),
    ]
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.addFilter(redact)
        logger.addHandler(handler)

    return logger
