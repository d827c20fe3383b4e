"""
cache.py - time-based expiry bookkeeping for cached results.
"""

from __future__ import annotations

import time
from typing import Dict, Hashable, Optional

__all__ = ["TimeCachedResultHolder"]


class TimeCachedResultHolder:
    """Mixin remembering when each cached entry was loaded.

    The holder itself stores no results, only load times; the host class asks
    :meth:`_is_time_to_refresh` before serving an entry and calls
    :meth:`_update_cache_time` after (re)loading it.
    """

    #: seconds an entry is served before it has to be reloaded
    cache_refresh_time: float = 60

    def __init__(self) -> None:
        self._cache_load_time: Dict[Hashable, float] = {}

    def _is_time_to_refresh(self, key: Hashable, refresh_time: Optional[float] = None) -> bool:
        loaded = self._cache_load_time.get(key)
        if loaded is None:
            return False
        return time.monotonic() - loaded > (refresh_time or self.cache_refresh_time)

    def _update_cache_time(self, key: Hashable) -> None:
        self._cache_load_time[key] = time.monotonic()

    def _forget_cache_time(self, key: Optional[Hashable] = None) -> None:
        if key is None:
            self._cache_load_time.clear()
        else:
            self._cache_load_time.pop(key, None)
