"""
sqlcache - SQL table backed caches with TOML configuration.
Command line entry point: inspect configuration, render and run provisioning DDL.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from sqlcache.cache import CacheManager, schemaFromConfig
from sqlcache.config import ConfigManager
from sqlcache.database import DatabaseManager
from sqlcache.logging_utils import initLogging
from sqlcache.sql import SQLBuilder, SqlDialect
from sqlcache.utils import jsonDumps

# Configure basic logging first
logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s", level=logging.INFO)
logger = logging.getLogger(__name__)


class SqlCacheApp:
    """Wires configuration, logging, database and caches together."""

    def __init__(self, configPath: str = "config.toml", config_dirs: Optional[List[str]] = None):
        self.configManager = ConfigManager(configPath, config_dirs)

        initLogging(self.configManager.getLoggingConfig())

        self.databaseManager = DatabaseManager(self.configManager.getDatabaseConfig())
        self.cacheManager = CacheManager.fromConfig(
            self.configManager.getCachesConfig(),
            self.databaseManager.getDatabase(),
        )

    def provision(self) -> None:
        """Provision all configured caches, dood!"""
        self.cacheManager.startAll()
        for cache in self.cacheManager.getCaches():
            print(jsonDumps(cache.getStats(), indent=2))

    def close(self) -> None:
        self.databaseManager.getDatabase().close()


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="sqlcache - SQL table backed caches, dood!")
    parser.add_argument(
        "-c",
        "--config",
        default="config.toml",
        help="Path to configuration file (default: config.toml)",
    )
    parser.add_argument(
        "--config-dir",
        action="append",
        help="Directory to search for .toml config files recursively (can be specified multiple times), dood!",
    )
    parser.add_argument(
        "--print-config",
        action="store_true",
        help="Pretty-print loaded configuration and exit, dood!",
    )
    parser.add_argument(
        "--print-ddl",
        action="store_true",
        help="Print CREATE SCHEMA/CREATE TABLE statements of all configured caches and exit, dood!",
    )
    parser.add_argument(
        "--dialect",
        default=SqlDialect.SQLFIRE.value,
        type=SqlDialect.fromName,
        help="SQL dialect for --print-ddl: sqlfire or sqlite (default: sqlfire)",
    )
    parser.add_argument(
        "--provision",
        action="store_true",
        help="Create missing schemas and tables of all configured caches, dood!",
    )
    args = parser.parse_args()
    args.config = os.path.abspath(args.config)

    if args.config_dir:
        args.config_dir = [os.path.abspath(dir_path) for dir_path in args.config_dir]

    return args


def prettyPrintConfig(config_manager: ConfigManager):
    """Pretty-print the loaded configuration, dood!"""
    print("=== sqlcache Configuration ===")
    print()
    print(jsonDumps(config_manager.config, indent=2))
    print()
    print("=== Configuration loaded successfully, dood! ===")


def printDDL(config_manager: ConfigManager, dialect: SqlDialect = SqlDialect.SQLFIRE):
    """Print provisioning DDL for every configured cache, dood!"""
    for name, cacheConfig in config_manager.getCachesConfig().items():
        builder = SQLBuilder(schemaFromConfig(name, cacheConfig), dialect)
        print(f"-- {name}")
        if dialect == SqlDialect.SQLITE:
            print(f"-- schema {builder.schema.schemaName} must be attached, see [database.attach]")
        else:
            print(builder.getCreateSchemaSQL() + ";")
        print(builder.getCreateSQL() + ";")
        print()


def main():
    """Main entry point."""
    args = parse_arguments()

    try:
        if args.print_config or args.print_ddl:
            config_manager = ConfigManager(args.config, args.config_dir)
            if args.print_config:
                prettyPrintConfig(config_manager)
            if args.print_ddl:
                printDDL(config_manager, args.dialect)
            sys.exit(0)

        app = SqlCacheApp(configPath=args.config, config_dirs=args.config_dir)
        try:
            if args.provision:
                app.provision()
            else:
                logger.info(f"Configured caches: {app.cacheManager.getCacheNames()}, use --provision to create them")
        finally:
            app.close()
    except KeyboardInterrupt:
        logger.info("Stopped by user")
    except Exception as e:
        logger.error(f"sqlcache failed: {e}")
        logger.exception(e)
        sys.exit(1)


if __name__ == "__main__":
    main()
