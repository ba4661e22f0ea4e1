# app/core/cache.py
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from app.core.config import settings

# Returned by TTLCache.get() for absent or expired keys (None is a valid value)
MISSING = object()


class TTLCache:
    """
    In-process read-through cache: key -> (data, populated_at).

    Entries are valid for ``ttl_seconds`` of wall-clock time after they were
    stored. There is no per-key invalidation; writers call ``clear()``.
    """

    def __init__(
        self,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.ttl_seconds = settings.CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self.clock = clock
        self._entries: Dict[Hashable, Tuple[Any, float]] = {}

    def get(self, key: Hashable) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return MISSING
        data, stored_at = entry
        if self.clock() - stored_at >= self.ttl_seconds:
            return MISSING
        return data

    def set(self, key: Hashable, data: Any) -> None:
        self._entries[key] = (data, self.clock())

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
