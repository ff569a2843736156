"""Command Handler: Orchestrates CLI command execution.

Receives commands from the main entry point (main.py), runs them against the
injected CacheService and reports the outcome through the UserInterface.
"""

import json
import logging
from datetime import timedelta
from typing import Optional

from tiercache.domain.interfaces.cache import CacheService
from tiercache.domain.interfaces.user_interface import UserInterface
from tiercache.domain.models.common import CacheKey, JsonValue

logger = logging.getLogger(__name__)


def parse_value(raw: str) -> JsonValue:
    """Parses a command-line value as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


class CommandHandler:
    """Handles incoming commands and delegates to the cache."""

    def __init__(self, cache_service: CacheService, ui: UserInterface):
        self.cache_service = cache_service
        self.ui = ui

    async def handle_get(self, key_str: str) -> bool:
        """Handles 'get'. Returns True on a hit."""
        key = CacheKey(key_str)
        logger.info(f"Handling 'get' command for key: {key}")
        value = await self.cache_service.get(key)
        if value is None:
            self.ui.display_warning(f"No cached value for '{key}'.")
            return False
        self.ui.display_output(value)
        return True

    async def handle_set(self, key_str: str, raw_value: str, ttl_seconds: Optional[float] = None) -> None:
        """Handles 'set'. The value is stored as JSON when it parses as JSON."""
        key = CacheKey(key_str)
        ttl = timedelta(seconds=ttl_seconds) if ttl_seconds is not None else None
        logger.info(f"Handling 'set' command for key: {key} (ttl={ttl or 'default'})")
        await self.cache_service.set(key, parse_value(raw_value), ttl=ttl)
        self.ui.display_info(f"Stored '{key}'.")

    async def handle_has(self, key_str: str) -> bool:
        key = CacheKey(key_str)
        logger.info(f"Handling 'has' command for key: {key}")
        found = await self.cache_service.has(key)
        self.ui.display_info(f"'{key}' is cached." if found else f"'{key}' is not cached.")
        return found

    async def handle_remove(self, key_str: str) -> None:
        key = CacheKey(key_str)
        logger.info(f"Handling 'remove' command for key: {key}")
        await self.cache_service.remove(key)
        self.ui.display_info(f"Removed '{key}'.")

    async def handle_clear(self) -> None:
        logger.info("Handling 'clear' command")
        await self.cache_service.clear()
        self.ui.display_info("Cache cleared.")

    async def handle_cleanup(self) -> None:
        logger.info("Handling 'cleanup' command")
        await self.cache_service.cleanup()
        self.ui.display_info("Expired entries cleaned up.")

    async def handle_info(self, key_str: str) -> bool:
        """Handles 'info': loads the entry into memory, then reports its expiry.

        Expiry introspection only sees the memory tier, so a ``get`` runs
        first to promote an entry that is only on disk.
        """
        key = CacheKey(key_str)
        logger.info(f"Handling 'info' command for key: {key}")
        await self.cache_service.get(key)
        expires_at = self.cache_service.get_expiry_time(key)
        remaining = self.cache_service.get_remaining_time(key)
        if expires_at is None or remaining is None:
            self.ui.display_warning(f"'{key}' is not resident in memory.")
            return False
        self.ui.display_entry_details(key, expires_at, remaining)
        return True
