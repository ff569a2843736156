"""Error types raised by the cache's internal I/O layer.

None of these escape the public FileCache operations: they are caught at the
API boundary, logged, and turned into a cache miss or a no-op.
"""

from pathlib import Path
from typing import Optional


class CacheError(Exception):
    """Base class for all cache failures."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class ReadFailure(CacheError):
    """A cache file could not be read or did not contain valid JSON."""


class WriteFailure(CacheError):
    """A cache file or directory could not be written."""


class DeleteFailure(CacheError):
    """A cache file or directory could not be removed."""


class DeserializationError(CacheError):
    """A stored record could not be turned back into a CacheEntry."""
