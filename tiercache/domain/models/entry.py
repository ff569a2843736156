"""Cache entry value object.

Wraps a cached payload together with its creation and expiry timestamps.
The payload type is opaque here; converting it to and from JSON-compatible
data is left to caller-supplied functions.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Generic, Mapping, TypeVar

from ..exceptions import DeserializationError

T = TypeVar("T")


def utc_now() -> datetime:
    """Current wall-clock time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def read_expiry(record: Any) -> datetime:
    """Extracts only the ``expiresAt`` timestamp from a stored record.

    Raises:
        DeserializationError: If the record has no parseable ``expiresAt``.
    """
    if not isinstance(record, Mapping):
        raise DeserializationError(f"Expected a JSON object, got {type(record).__name__}")
    try:
        return _parse_timestamp(record, "expiresAt")
    except KeyError as e:
        raise DeserializationError("Missing required field: expiresAt") from e


def _parse_timestamp(record: Mapping[str, Any], field: str) -> datetime:
    raw = record[field]
    if not isinstance(raw, str):
        raise DeserializationError(f"'{field}' must be an ISO-8601 string, got {type(raw).__name__}")
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError as e:
        raise DeserializationError(f"'{field}' is not a valid ISO-8601 timestamp: {raw!r}") from e
    if parsed.tzinfo is not None:
        return parsed
    # Naive timestamps are taken as local time
    try:
        return parsed.astimezone()
    except (OverflowError, OSError, ValueError) as e:
        raise DeserializationError(f"'{field}' is out of range for local time: {raw!r}") from e


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Immutable cached value with TTL bookkeeping.

    An entry is never renewed in place: refreshing a key means storing a new
    entry. No ordering check is made between ``created_at`` and ``expires_at``.

    Attributes:
        data: The cached payload.
        expires_at: Absolute instant after which the entry is invalid.
        created_at: When the entry was created.
    """
    data: T
    expires_at: datetime
    created_at: datetime

    @property
    def is_expired(self) -> bool:
        """True once the current time has reached ``expires_at``."""
        return utc_now() >= self.expires_at

    @property
    def remaining_time(self) -> timedelta:
        """Time left until expiry; ``timedelta(0)`` once expired."""
        remaining = self.expires_at - utc_now()
        return remaining if remaining > timedelta(0) else timedelta(0)

    def to_json(self, data_to_json: Callable[[T], Any]) -> Dict[str, Any]:
        """Serializes the entry into a JSON-compatible record.

        Args:
            data_to_json: Converts the payload into JSON-compatible data.

        Returns:
            A dict with ``data``, ``expiresAt`` and ``createdAt`` keys.
        """
        return {
            "data": data_to_json(self.data),
            "expiresAt": self.expires_at.isoformat(),
            "createdAt": self.created_at.isoformat(),
        }

    @classmethod
    def from_json(cls, record: Any, data_from_json: Callable[[Any], T]) -> "CacheEntry[T]":
        """Rebuilds an entry from a record produced by :meth:`to_json`.

        Args:
            record: The decoded JSON record.
            data_from_json: Converts the stored payload back into ``T``.

        Returns:
            The reconstructed CacheEntry.

        Raises:
            DeserializationError: If a field is missing, a timestamp is
                malformed, or ``data_from_json`` raises.
        """
        if not isinstance(record, Mapping):
            raise DeserializationError(f"Expected a JSON object, got {type(record).__name__}")
        try:
            expires_at = _parse_timestamp(record, "expiresAt")
            created_at = _parse_timestamp(record, "createdAt")
            raw_data = record["data"]
        except KeyError as e:
            raise DeserializationError(f"Missing required field: {e.args[0]}") from e

        try:
            data = data_from_json(raw_data)
        except Exception as e:
            raise DeserializationError(f"Payload converter failed: {e}") from e

        return cls(data=data, expires_at=expires_at, created_at=created_at)

    def __repr__(self) -> str:
        return f"CacheEntry(expires_at={self.expires_at.isoformat()}, is_expired={self.is_expired})"
