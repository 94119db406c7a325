"""
Logging setup for sqlcache, dood!

Everything is configured from the ``[logging]`` config section:

    [logging]
    level = "INFO"              # root level, name or number
    console = true              # log to stderr (default true)
    file = "logs/sqlcache.log"  # optional log file, parent dirs are created
    rotate = true               # rotate the file at midnight
    backup-count = 7            # rotated files to keep
    format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    [logging.levels]
    "sqlcache.database" = "DEBUG"

Handlers are attached to the root logger only, the ``levels`` table just
tunes the level of single loggers.
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Union

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_BACKUP_COUNT = 7
# Chatty libraries, they log every request on INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def parseLogLevel(value: Union[str, int]) -> int:
    """
    Convert a config level to a logging level, dood!

    Raises:
        ValueError: On unknown level names
    """
    if isinstance(value, int):
        return value
    level = logging.getLevelName(str(value).strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level '{value}', dood!")
    return level


def createHandlers(config: Dict[str, Any]) -> List[logging.Handler]:
    """Build root handlers for the ``console`` and ``file`` keys"""
    formatter = logging.Formatter(config.get("format", DEFAULT_FORMAT))
    handlers: List[logging.Handler] = []

    if config.get("console", True):
        handlers.append(logging.StreamHandler())

    logFile = config.get("file", None)
    if logFile:
        Path(logFile).parent.mkdir(parents=True, exist_ok=True)
        if config.get("rotate", False):
            handlers.append(
                TimedRotatingFileHandler(
                    filename=logFile,
                    when="midnight",
                    backupCount=int(config.get("backup-count", DEFAULT_BACKUP_COUNT)),
                    encoding="utf-8",
                )
            )
        else:
            handlers.append(logging.FileHandler(logFile, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def initLogging(config: Dict[str, Any]) -> None:
    """
    Configure logging from the ``[logging]`` config section, dood!

    Replaces (and closes) whatever handlers the root logger had, so it can be
    called again after a config reload.

    Raises:
        ValueError: On unknown level names
        OSError: If the log file can not be opened
    """
    rootLevel = parseLogLevel(config.get("level", "INFO"))
    levels = {name: parseLogLevel(level) for name, level in config.get("levels", {}).items()}
    handlers = createHandlers(config)

    rootLogger = logging.getLogger()
    for handler in rootLogger.handlers[:]:
        rootLogger.removeHandler(handler)
        handler.close()
    for handler in handlers:
        rootLogger.addHandler(handler)
    rootLogger.setLevel(rootLevel)

    if rootLevel < logging.WARNING:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)

    logger.info(
        f"Logging configured: level={logging.getLevelName(rootLevel)}, "
        f"handlers={[type(h).__name__ for h in handlers]}, levels={list(levels)}, dood!"
    )
