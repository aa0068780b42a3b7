"""Per-application cache for listing views with path-based revalidation."""

from __future__ import annotations

from threading import Lock
from typing import Any, Callable, Hashable

from ..logging_config import get_logger

logger = get_logger(__name__)


class ListingCache:
    """Cache listing payloads by logical path and user.

    ``revalidate(path)`` drops every entry stored under ``path`` so the next
    read reloads fresh data.
    """

    def __init__(self) -> None:
        self._entries: dict[tuple[str, Hashable], Any] = {}
        self._lock = Lock()

    def get_or_load(self, path: str, key: Hashable, loader: Callable[[], Any]) -> Any:
        cache_key = (path, key)
        with self._lock:
            if cache_key in self._entries:
                return self._entries[cache_key]
        value = loader()
        with self._lock:
            self._entries[cache_key] = value
        return value

    def is_cached(self, path: str, key: Hashable) -> bool:
        with self._lock:
            return (path, key) in self._entries

    def revalidate(self, path: str) -> int:
        """Invalidate all cached entries for ``path`` and return how many were dropped."""

        with self._lock:
            stale = [cache_key for cache_key in self._entries if cache_key[0] == path]
            for cache_key in stale:
                del self._entries[cache_key]
        logger.debug("Revalidated %s (%d entries dropped)", path, len(stale))
        return len(stale)
