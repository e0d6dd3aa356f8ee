"""Time-boxed lookup cache for account resolution."""

import time
from typing import Any, Callable, Hashable

# Returned by LookupCache.get when a key is not cached. A cached None is a
# valid entry (a remembered lookup miss), so None cannot mark absence.
MISSING = object()


class LookupCache:
    """In-memory map that is cleared wholesale once its TTL elapses.

    The TTL is measured from the last invalidation, not per key: every entry
    is dropped together when the window closes. Writes to the underlying
    data do not invalidate the cache, so a lookup may return a stale value
    until the next window starts.

    Args:
        ttl_seconds: Length of one cache window
        clock: Callable returning the current time in seconds
    """

    DEFAULT_TTL_SECONDS = 5 * 60

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, Any] = {}
        self._invalidated_at = clock()

    def _expire_if_stale(self) -> None:
        if self._clock() - self._invalidated_at > self.ttl_seconds:
            self.invalidate()

    def get(self, key: Hashable, default: Any = MISSING) -> Any:
        """Return the cached value for key, or default if not cached."""
        self._expire_if_stale()
        return self._entries.get(key, default)

    def set(self, key: Hashable, value: Any) -> None:
        """Cache a value (None included) for key."""
        self._expire_if_stale()
        self._entries[key] = value

    def invalidate(self) -> None:
        """Drop every entry and start a new cache window."""
        self._entries.clear()
        self._invalidated_at = self._clock()

    def __len__(self) -> int:
        return len(self._entries)
