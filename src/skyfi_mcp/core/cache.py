"""
In-memory TTL cache for provider responses.
"""

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

# 24 hours
DEFAULT_TTL_SECONDS = 24 * 60 * 60


@dataclass
class CacheEntry:
    data: Any
    expires_at: float


class TTLCache:
    """
    Cache keyed by a prefix plus the request parameters.

    Parameters
    ----------
    default_ttl : float, optional
        Lifetime of an entry in seconds
    clock : callable, optional
        Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    @staticmethod
    def make_key(prefix: str, params: dict[str, Any]) -> str:
        parts = [f"{key}:{json.dumps(params[key], sort_keys=True)}" for key in sorted(params)]
        return f"{prefix}:{'|'.join(parts)}"

    def get(self, prefix: str, params: dict[str, Any]) -> Any | None:
        """Return the cached value, or ``None`` when missing or expired."""
        key = self.make_key(prefix, params)
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._entries[key]
            return None
        return entry.data

    def set(
        self,
        prefix: str,
        params: dict[str, Any],
        data: Any,
        ttl: float | None = None,
    ) -> None:
        lifetime = self.default_ttl if ttl is None else ttl
        self._entries[self.make_key(prefix, params)] = CacheEntry(
            data=data,
            expires_at=self._clock() + lifetime,
        )

    def clear_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now > entry.expires_at]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()

    def stats(self) -> dict[str, int]:
        """
        Summarize cache contents.

        Returns
        -------
        dict[str, int]
            ``size``, ``expired`` and ``valid`` entry counts
        """
        now = self._clock()
        expired = sum(1 for entry in self._entries.values() if now > entry.expires_at)
        return {
            "size": len(self._entries),
            "expired": expired,
            "valid": len(self._entries) - expired,
        }
