"""Interface for the key-value cache.

Defines the contract for storing, retrieving and expiring cached values
across the memory and file tiers.
"""

import abc
from datetime import datetime, timedelta
from typing import Generic, Optional, TypeVar

from ..models.common import CacheKey

T = TypeVar("T")


class CacheService(abc.ABC, Generic[T]):
    """Abstract Base Class for caching operations.

    Implementations never raise I/O or deserialization errors from these
    methods: failures degrade to a miss (reads) or a no-op (writes).
    """

    @abc.abstractmethod
    async def get(self, key: CacheKey) -> Optional[T]:
        """Retrieves an item from the cache asynchronously.

        Args:
            key: The cache key to retrieve.

        Returns:
            The cached item if found and not expired, otherwise None.
        """
        pass

    @abc.abstractmethod
    async def set(self, key: CacheKey, data: T, ttl: Optional[timedelta] = None) -> None:
        """Stores an item, overwriting any previous value for the key.

        Args:
            key: The cache key to store the item under.
            data: The item to store.
            ttl: Time-to-live (uses the cache default if None).
        """
        pass

    @abc.abstractmethod
    async def has(self, key: CacheKey) -> bool:
        """Returns True if ``get(key)`` would return a value."""
        pass

    @abc.abstractmethod
    async def remove(self, key: CacheKey) -> None:
        """Deletes an item from every tier."""
        pass

    @abc.abstractmethod
    async def clear(self) -> None:
        """Deletes every item from every tier."""
        pass

    @abc.abstractmethod
    async def cleanup(self) -> None:
        """Purges expired (and unreadable) entries from every tier."""
        pass

    @property
    @abc.abstractmethod
    def memory_cache_count(self) -> int:
        """Number of entries held in memory, expired ones included."""
        pass

    @abc.abstractmethod
    def get_expiry_time(self, key: CacheKey) -> Optional[datetime]:
        """Expiry of the in-memory entry for ``key``, or None if not resident."""
        pass

    @abc.abstractmethod
    def get_remaining_time(self, key: CacheKey) -> Optional[timedelta]:
        """Remaining lifetime of the in-memory entry, or None if not resident."""
        pass
