"""Interface for presenting cache results to the user.

Allows the command handler to stay independent of the concrete console
implementation.
"""

import abc
from datetime import datetime, timedelta
from typing import Any

from ..models.common import CacheKey, JsonValue


class UserInterface(abc.ABC):
    """Abstract Base Class for user interaction."""

    @abc.abstractmethod
    def display_output(self, output: JsonValue, **kwargs: Any) -> None:
        """Displays a cached value to the user.

        Args:
            output: The JSON-compatible value to display.
            **kwargs: Additional arguments for formatting (e.g., title).
        """
        pass

    @abc.abstractmethod
    def display_error(self, error_message: str, **kwargs: Any) -> None:
        """Displays an error message to the user."""
        pass

    @abc.abstractmethod
    def display_warning(self, warning_message: str, **kwargs: Any) -> None:
        """Displays a warning message to the user."""
        pass

    @abc.abstractmethod
    def display_info(self, info_message: str, **kwargs: Any) -> None:
        """Displays an informational message to the user."""
        pass

    @abc.abstractmethod
    def display_entry_details(self, key: CacheKey, expires_at: datetime, remaining: timedelta) -> None:
        """Displays expiry information for a resident entry.

        Args:
            key: The cache key.
            expires_at: Absolute expiry time of the entry.
            remaining: Time left until expiry.
        """
        pass
