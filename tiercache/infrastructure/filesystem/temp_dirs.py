"""Concrete implementations of the DirectorySupplier interface."""

import logging
import tempfile
from pathlib import Path
from typing import Optional, Union

from tiercache.domain.interfaces.directory import DirectorySupplier

logger = logging.getLogger(__name__)


class SystemTempDirectorySupplier(DirectorySupplier):
    """Supplies the operating system's temporary directory.

    An explicit ``root`` takes precedence, which lets configuration relocate
    every cache without touching the cache code.
    """

    def __init__(self, root: Optional[Union[str, Path]] = None):
        self._root = Path(root).expanduser() if root else None

    async def get_temporary_root(self) -> Path:
        if self._root is not None:
            return self._root
        return Path(tempfile.gettempdir())


class FixedDirectorySupplier(DirectorySupplier):
    """Always supplies the same directory."""

    def __init__(self, path: Union[str, Path]):
        self._path = Path(path)
        logger.debug(f"FixedDirectorySupplier pinned to {self._path}")

    async def get_temporary_root(self) -> Path:
        return self._path
