"""Shared test payload type and async driver."""

import asyncio
from dataclasses import dataclass


@dataclass
class SampleData:
    """Payload type used across the cache tests."""
    name: str
    value: int

    @classmethod
    def from_json(cls, data):
        return cls(name=data["name"], value=data["value"])

    def to_json(self):
        return {"name": self.name, "value": self.value}


def run(coro):
    """Drives one cache coroutine to completion."""
    return asyncio.run(coro)
