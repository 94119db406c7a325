"""
sqlcache - key-value caches stored in SQL tables, dood!

Subpackages:
- sqlcache.sql: column model, binders and statement rendering
- sqlcache.codec: byte encoding for BLOB value columns
- sqlcache.database: connections and table provisioning
- sqlcache.cache: cache implementations and the cache manager
- sqlcache.config: TOML configuration loading
"""

__version__ = "0.1.0"
