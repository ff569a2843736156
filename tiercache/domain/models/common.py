"""Common value objects shared by the cache layers."""

from typing import Any, NewType

# === Caching Context ===
CacheKey = NewType("CacheKey", str)        # Caller-facing key, unsanitized

# JSON-compatible data as produced by json.loads
JsonValue = Any
