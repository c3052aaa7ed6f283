"""TTL-bounded in-memory cache of evaluated flag values.

Entries are checked for staleness when they are read; there is no
background sweeper.  A stale entry is dropped by the read that finds it,
so an entry can sit in memory past its TTL but is never served after it.

The cache is not synchronised.  It is safe under a single event loop, not
under concurrent mutation from several threads.

See Also:
    :class:`~orbitflag.models.CacheEntry` -- the stored record.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Optional

from orbitflag.models import CacheEntry


class FlagCache:
    """In-memory cache for evaluated boolean flags.

    Args:
        clock: Zero-argument callable returning the current time in
            seconds.  Defaults to :func:`time.monotonic`; tests inject a
            fake clock to step across TTL boundaries.

    Example::

        from orbitflag.cache import FlagCache

        cache = FlagCache()
        cache.set("new-checkout", True, ttl=60_000)
        cache.get("new-checkout")   # True for the next 60 seconds
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[bool]:
        """Look up a fresh cached value.

        Args:
            key: The flag key.

        Returns:
            The cached ``bool`` when an entry exists and its age is within
            its TTL, otherwise ``None``.  A stale entry is removed.
        """
        entry = self._entries.get(key)
        if entry is None:
            return None

        if not entry.is_fresh(self._clock()):
            del self._entries[key]
            return None

        return entry.data

    def set(self, key: str, value: bool, ttl: int) -> None:
        """Store *value* for *key*, replacing any existing entry.

        Args:
            key: The flag key.
            value: The evaluated flag value.
            ttl: Lifetime of the entry in milliseconds.
        """
        self._entries[key] = CacheEntry(data=value, timestamp=self._clock(), ttl=ttl)

    def invalidate(self, key: str) -> None:
        """Remove the entry for *key* if there is one."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove all entries from the cache."""
        self._entries.clear()

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``size`` (number of stored entries, stale ones
            included until they are read) and ``keys`` (sorted flag keys).
        """
        return {
            "size": len(self._entries),
            "keys": sorted(self._entries),
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
