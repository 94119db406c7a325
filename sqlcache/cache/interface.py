"""
Abstract cache interface for sqlcache.cache, dood!

This module defines the generic CacheInterface that cache implementations
follow. It is a plain synchronous key-value contract, so caches can be
plugged into any code that memoizes expensive lookups, dood!
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional

from .types import K, V


class CacheInterface(ABC, Generic[K, V]):
    """
    Generic cache interface for any key-value storage, dood!

    Type Parameters:
        K: The key type
        V: The value type

    Example:
        >>> cache = createStringCache("json", db)
        >>> cache.put("user:123", '{"name": "Prinny"}')
        >>> cache.get("user:123")
        '{"name": "Prinny"}'
        >>> cache.evict("user:123")
        >>> cache.get("user:123") is None
        True
    """

    @abstractmethod
    def get(self, key: K) -> Optional[V]:
        """
        Get cached value by key, dood!

        Args:
            key: The cache key to retrieve

        Returns:
            Optional[V]: The cached value if found, None otherwise. A cached
            ``None`` can not be told apart from a miss.
        """
        pass

    @abstractmethod
    def put(self, key: K, value: V) -> None:
        """
        Store value in cache, replacing any previous value for the key, dood!

        Args:
            key: The cache key to store the value under
            value: The value to cache
        """
        pass

    @abstractmethod
    def evict(self, key: K) -> None:
        """
        Remove the entry for key, no-op if there is none, dood!

        Args:
            key: The cache key to remove
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove all entries, dood!"""
        pass

    @abstractmethod
    def getName(self) -> str:
        """Name the cache is registered under"""
        pass

    @abstractmethod
    def getNativeCache(self) -> Any:
        """Underlying storage object of the implementation"""
        pass

    @abstractmethod
    def getStats(self) -> Dict[str, Any]:
        """
        Get cache statistics, dood!

        Returns:
            Dict[str, Any]: Implementation-specific statistics and configuration
        """
        pass
