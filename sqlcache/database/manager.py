"""Database manager for sqlcache with configuration and wrapper initialization."""

import logging
from typing import Any, Dict

from .wrapper import DatabaseWrapper

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Manages database initialization and configuration.

    Initializes DatabaseWrapper from the ``[database]`` config section.
    """

    __slots__ = ("config", "db")

    def __init__(self, config: Dict[str, Any]):
        """Initialize DatabaseManager with configuration.

        Args:
            config: Database configuration dict with ``path``, optional ``timeout``
                    and optional ``attach`` (alias -> path) table
        """
        self.config = config
        dbPath = config.get("path", None)
        if not dbPath:
            raise ValueError("Database config must contain 'path', dood!")

        self.db = DatabaseWrapper(
            dbPath,
            attach=config.get("attach", None),
            timeout=float(config.get("timeout", 30.0)),
        )
        logger.info(f"Database initialized: {self.config}")

    def getDatabase(self) -> DatabaseWrapper:
        """Get the database wrapper instance.

        Returns:
            DatabaseWrapper instance for database operations
        """
        return self.db
