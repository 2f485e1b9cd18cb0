"""
In-process TTL cache for upstream API responses.

Entries are valid while ``now - captured_at < ttl`` and are treated as
absent afterwards. The cache is capped: once ``max_entries`` is reached the
least recently used entry is evicted. The clock is injectable so expiry can
be tested without sleeping.
"""

import dataclasses
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60
DEFAULT_MAX_ENTRIES = 500


@dataclasses.dataclass
class CacheEntry:
    key: str
    value: Any
    captured_at: float


class ResponseCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int | None = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self.clock = clock
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self):
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def is_valid(self, entry: CacheEntry) -> bool:
        return self.clock() - entry.captured_at < self.ttl_seconds

    def get(self, key: str) -> CacheEntry | None:
        """Return the live entry for ``key``; expired entries are dropped."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not self.is_valid(entry):
            logger.debug(f"Cache entry expired for {key}")
            del self._entries[key]
            return None
        self._entries.move_to_end(key)
        return entry

    def set(self, key: str, value: Any) -> CacheEntry:
        entry = CacheEntry(key=key, value=value, captured_at=self.clock())
        self._entries[key] = entry
        self._entries.move_to_end(key)
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Cache full, evicted {evicted}")
        return entry

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()
