"""Interface for locating the platform's temporary storage root."""

import abc
from pathlib import Path


class DirectorySupplier(abc.ABC):
    """Abstract Base Class for directory lookup."""

    @abc.abstractmethod
    async def get_temporary_root(self) -> Path:
        """Returns the directory under which cache namespaces are created.

        The directory is expected to exist; subdirectories below it are
        created by the cache itself.
        """
        pass
