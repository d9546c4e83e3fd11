import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger("fpl_gateway")


class ResponseCache:
    """
    In-process TTL store backing the proxy routes.

    Keys are upstream paths, values are the raw upstream bodies. An entry is
    served only while fresh; once its window passes it is a miss.
    """

    def __init__(self, max_entries: int = 512, clock: Callable[[], float] = time.monotonic):
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}  # key -> (value, fresh_until)

    def get(self, key: str) -> Optional[Tuple[Any, float]]:
        """Return (value, fresh_until) for a fresh entry, else None."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry[1]:
            del self._entries[key]
            return None
        return entry

    def put(self, key: str, value: Any, ttl: float):
        if ttl <= 0:
            return
        self._entries[key] = (value, self._clock() + ttl)
        if len(self._entries) > self.max_entries:
            self._evict()

    def clear_expired(self) -> int:
        """Drop expired entries. Returns how many were removed."""
        now = self._clock()
        stale = [key for key, (_, fresh_until) in self._entries.items() if now >= fresh_until]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self):
        self._entries.clear()

    def _evict(self):
        removed = self.clear_expired()
        overflow = len(self._entries) - self.max_entries
        if overflow > 0:
            # Closest to expiry goes first
            doomed = sorted(self._entries, key=lambda k: self._entries[k][1])[:overflow]
            for key in doomed:
                del self._entries[key]
            removed += overflow
        logger.debug(f"Evicted {removed} cache entries ({len(self._entries)} left)")

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


cache = ResponseCache()
