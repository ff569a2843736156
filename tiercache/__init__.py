"""Generic key-value cache with an in-memory tier and a per-key JSON file tier."""

from tiercache.domain.exceptions import (
    CacheError,
    DeleteFailure,
    DeserializationError,
    ReadFailure,
    WriteFailure,
)
from tiercache.domain.models.entry import CacheEntry
from tiercache.infrastructure.cache.file_cache import FileCache
from tiercache.infrastructure.filesystem.temp_dirs import (
    FixedDirectorySupplier,
    SystemTempDirectorySupplier,
)

__version__ = "1.0.0"

__all__ = [
    "CacheEntry",
    "CacheError",
    "DeleteFailure",
    "DeserializationError",
    "FileCache",
    "FixedDirectorySupplier",
    "ReadFailure",
    "SystemTempDirectorySupplier",
    "WriteFailure",
]
