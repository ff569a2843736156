"""Two-tier cache implementation (memory map + one JSON file per key)."""
