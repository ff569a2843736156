"""Concrete implementation of the two-tier file cache.

Keeps an in-memory map in front of one JSON file per key, both scoped under
``{temporary root}/{cache_root_name}/{cache_name}``. Writes go to both tiers,
reads try memory first and fall back to disk, repopulating memory on a valid
disk hit. Expiry is checked lazily on access; ``cleanup()`` is the only sweep
and it only runs when the host calls it.
"""

import asyncio
import json
import logging
import re
import shutil
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, Optional, TypeVar

import aiofiles
import aiofiles.os

from tiercache.domain.exceptions import (
    CacheError,
    DeleteFailure,
    DeserializationError,
    ReadFailure,
    WriteFailure,
)
from tiercache.domain.interfaces.cache import CacheService
from tiercache.domain.interfaces.directory import DirectorySupplier
from tiercache.domain.models.common import CacheKey
from tiercache.domain.models.entry import CacheEntry, read_expiry, utc_now
from tiercache.infrastructure.filesystem.temp_dirs import SystemTempDirectorySupplier

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(minutes=30)
DEFAULT_CACHE_ROOT_NAME = "file_cache"
CACHE_FILE_SUFFIX = ".json"

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")

T = TypeVar("T")


def sanitize_key(key: str) -> str:
    """Maps a cache key to a filesystem-safe file name stem.

    Every character outside ``[A-Za-z0-9_.-]`` becomes ``_``. Distinct keys
    that differ only in replaced characters (``"a/b"`` and ``"a:b"``) share a
    file and overwrite each other.
    """
    return _UNSAFE_KEY_CHARS.sub("_", key)


class FileCache(CacheService[T]):
    """Generic memory + file cache with TTL.

    Values of type ``T`` are persisted through the ``to_json``/``from_json``
    converters. I/O and deserialization failures never reach the caller: they
    are logged (when ``enable_logging`` is set) and treated as a miss or a
    no-op, so a missing key, an expired key and a disk error all look the same
    from outside.

    There is no locking. Concurrent tasks touching the same key may see either
    tier win, and no two instances should share one directory.
    """

    def __init__(
        self,
        cache_name: str,
        from_json: Callable[[Any], T],
        to_json: Callable[[T], Any],
        default_ttl: timedelta = DEFAULT_TTL,
        use_memory_cache: bool = True,
        enable_logging: bool = False,
        cache_root_name: str = DEFAULT_CACHE_ROOT_NAME,
        directory_supplier: Optional[DirectorySupplier] = None,
    ):
        """Initializes the cache. No filesystem access happens here.

        Args:
            cache_name: Name of this cache; also its directory name.
            from_json: Converts stored JSON data back into ``T``.
            to_json: Converts ``T`` into JSON-compatible data.
            default_ttl: Lifetime for entries stored without an explicit ttl.
            use_memory_cache: When False the memory tier is never used.
            enable_logging: Emit debug/warning logs for cache activity.
            cache_root_name: Shared parent directory for all caches.
            directory_supplier: Locates the temporary storage root.
        """
        self.cache_name = cache_name
        self.from_json = from_json
        self.to_json = to_json
        self.default_ttl = default_ttl
        self.use_memory_cache = use_memory_cache
        self.enable_logging = enable_logging
        self.cache_root_name = cache_root_name
        self._directory_supplier = directory_supplier or SystemTempDirectorySupplier()
        self._memory_cache: Dict[str, CacheEntry[T]] = {}

        self._log(f"initialized (ttl={default_ttl}, memory={use_memory_cache}, root={cache_root_name})")

    def _log(self, message: str, level: int = logging.DEBUG) -> None:
        if self.enable_logging:
            logger.log(level, f"FileCache[{self.cache_name}]: {message}")

    # --- Internal I/O layer: raises CacheError subclasses ---

    async def _get_cache_directory(self) -> Path:
        """Resolves ``{root}/{cache_root_name}/{cache_name}``, creating it if absent."""
        root = await self._directory_supplier.get_temporary_root()
        cache_dir = Path(root) / self.cache_root_name / self.cache_name
        try:
            await aiofiles.os.makedirs(cache_dir, exist_ok=True)
        except OSError as e:
            raise WriteFailure(f"Failed to create cache directory: {e}", cache_dir) from e
        return cache_dir

    async def _get_cache_file(self, key: str) -> Path:
        cache_dir = await self._get_cache_directory()
        return cache_dir / f"{sanitize_key(key)}{CACHE_FILE_SUFFIX}"

    async def _read_record(self, file_path: Path) -> Any:
        try:
            async with aiofiles.open(file_path, mode="r", encoding="utf-8") as f:
                contents = await f.read()
            return json.loads(contents)
        except (OSError, ValueError, RecursionError) as e:
            raise ReadFailure(f"Failed to read cache file: {e}", file_path) from e

    async def _read_entry(self, file_path: Path) -> CacheEntry[T]:
        record = await self._read_record(file_path)
        return CacheEntry.from_json(record, self.from_json)

    async def _write_entry(self, file_path: Path, entry: CacheEntry[T]) -> None:
        try:
            contents = json.dumps(entry.to_json(self.to_json), ensure_ascii=False)
        except Exception as e:
            raise WriteFailure(f"Failed to serialize entry: {e}", file_path) from e
        try:
            async with aiofiles.open(file_path, mode="w", encoding="utf-8") as f:
                await f.write(contents)
        except OSError as e:
            raise WriteFailure(f"Failed to write cache file: {e}", file_path) from e

    async def _delete_file(self, file_path: Path) -> None:
        try:
            await aiofiles.os.remove(file_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise DeleteFailure(f"Failed to delete cache file: {e}", file_path) from e

    async def _delete_directory(self, directory: Path) -> None:
        try:
            await asyncio.to_thread(shutil.rmtree, directory)
        except FileNotFoundError:
            pass
        except OSError as e:
            raise DeleteFailure(f"Failed to delete cache directory: {e}", directory) from e

    # --- CacheService Interface Implementation ---

    async def get(self, key: CacheKey) -> Optional[T]:
        """Returns the cached value for ``key``, or None on a miss.

        Lookup order:
        1. Memory tier; an expired memory entry is evicted and the disk is
           still consulted.
        2. File tier; a valid entry is copied back into memory, an expired
           file is deleted.
        """
        if self.use_memory_cache and key in self._memory_cache:
            entry = self._memory_cache[key]
            if not entry.is_expired:
                self._log(f"memory hit - {key}")
                return entry.data
            del self._memory_cache[key]
            self._log(f"memory entry expired - {key}")

        try:
            file_path = await self._get_cache_file(key)
            if not await aiofiles.os.path.isfile(file_path):
                self._log(f"miss - {key}")
                return None
            entry = await self._read_entry(file_path)
        except CacheError as e:
            self._log(f"load failed - {key}, {e}", logging.WARNING)
            return None

        if not entry.is_expired:
            if self.use_memory_cache:
                self._memory_cache[key] = entry
            self._log(f"file hit - {key}")
            return entry.data

        self._log(f"expired, deleting file - {key}")
        try:
            await self._delete_file(file_path)
        except DeleteFailure as e:
            self._log(f"delete of expired file failed - {key}, {e}", logging.WARNING)
        return None

    async def set(self, key: CacheKey, data: T, ttl: Optional[timedelta] = None) -> None:
        """Stores ``data`` under ``key`` in both tiers.

        A failed disk write still leaves the memory tier updated.

        Args:
            key: The cache key.
            data: The value to store.
            ttl: Entry lifetime; ``default_ttl`` when None.
        """
        now = utc_now()
        entry = CacheEntry(
            data=data,
            expires_at=now + (ttl if ttl is not None else self.default_ttl),
            created_at=now,
        )

        if self.use_memory_cache:
            self._memory_cache[key] = entry

        try:
            file_path = await self._get_cache_file(key)
            await self._write_entry(file_path, entry)
            self._log(f"saved - {key}")
        except CacheError as e:
            self._log(f"save failed - {key}, {e}", logging.WARNING)

    async def has(self, key: CacheKey) -> bool:
        """Returns True if a live value exists for ``key``.

        This is a full :meth:`get`: it may read the disk, repopulate memory
        and delete an expired file.
        """
        return await self.get(key) is not None

    async def remove(self, key: CacheKey) -> None:
        """Deletes ``key`` from memory and removes its file if present."""
        self._memory_cache.pop(key, None)

        try:
            file_path = await self._get_cache_file(key)
            if await aiofiles.os.path.exists(file_path):
                await self._delete_file(file_path)
                self._log(f"removed - {key}")
        except CacheError as e:
            self._log(f"remove failed - {key}, {e}", logging.WARNING)

    async def clear(self) -> None:
        """Empties memory and deletes the whole cache directory.

        Memory is always empty afterwards, even if the disk cleanup failed.
        """
        self._memory_cache.clear()

        try:
            cache_dir = await self._get_cache_directory()
            await self._delete_directory(cache_dir)
            self._log("cleared all entries")
        except CacheError as e:
            self._log(f"clear failed - {e}", logging.WARNING)

    async def cleanup(self) -> None:
        """Purges expired entries from memory and expired or corrupt files from disk.

        Meant to be called periodically by the host; nothing is scheduled here.
        """
        expired_keys = [k for k, entry in self._memory_cache.items() if entry.is_expired]
        for k in expired_keys:
            del self._memory_cache[k]

        try:
            cache_dir = await self._get_cache_directory()
            file_names = await aiofiles.os.listdir(cache_dir)
        except (CacheError, OSError) as e:
            self._log(f"cleanup failed - {e}", logging.WARNING)
            return

        deleted_count = 0
        for file_name in file_names:
            if not file_name.endswith(CACHE_FILE_SUFFIX):
                continue
            file_path = cache_dir / file_name
            if not await aiofiles.os.path.isfile(file_path):
                continue

            try:
                expired = utc_now() >= read_expiry(await self._read_record(file_path))
            except (ReadFailure, DeserializationError) as e:
                self._log(f"corrupt cache file {file_name}, purging: {e}")
                expired = True

            if expired:
                try:
                    await self._delete_file(file_path)
                    deleted_count += 1
                except DeleteFailure as e:
                    self._log(f"cleanup delete failed - {file_name}, {e}", logging.WARNING)

        if deleted_count > 0:
            self._log(f"cleaned up {deleted_count} expired entries")

    @property
    def memory_cache_count(self) -> int:
        """Raw size of the memory map, including expired entries."""
        return len(self._memory_cache)

    def get_expiry_time(self, key: CacheKey) -> Optional[datetime]:
        """Memory-only lookup; never touches the filesystem."""
        entry = self._memory_cache.get(key)
        return entry.expires_at if entry is not None else None

    def get_remaining_time(self, key: CacheKey) -> Optional[timedelta]:
        """Memory-only lookup; never touches the filesystem."""
        entry = self._memory_cache.get(key)
        return entry.remaining_time if entry is not None else None
