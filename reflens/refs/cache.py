"""RefCache — bounded, process-wide store of the last ref table per page."""

from __future__ import annotations

import logging

from reflens.core.types import AddressingMode, CacheEntry, RefTable

logger = logging.getLogger(__name__)

DEFAULT_CAPACITY = 50

CacheKey = tuple[str, str]  # (connection endpoint, page target id)


def normalize_endpoint(endpoint: str) -> str:
    return endpoint.strip().rstrip("/")


class RefCache:
    """
    In-memory cache of ref tables keyed by ``(endpoint, target_id)``.

    Lets a page handle that was recreated (e.g. after a reconnect) pick up
    the refs of the last snapshot taken on the same tab.

    Eviction is FIFO on first insertion: once ``capacity`` is exceeded the
    oldest key goes, and overwriting an existing key keeps its original
    position in the eviction order.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._entries: dict[CacheKey, CacheEntry] = {}

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _key(endpoint: str, target_id: str | None) -> CacheKey | None:
        target = (target_id or "").strip()
        if not target:
            return None
        return (normalize_endpoint(endpoint), target)

    def _evict(self) -> None:
        while len(self._entries) > self._capacity:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug("Evicted ref table for %s::%s", *oldest)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    def store(
        self,
        endpoint: str,
        target_id: str | None,
        table: RefTable,
        mode: AddressingMode,
        scope_selector: str | None = None,
    ) -> bool:
        """
        Write (or overwrite) the entry for a page.
        Returns False when there is no target id to key it by.
        """
        key = self._key(endpoint, target_id)
        if key is None:
            return False
        self._entries[key] = CacheEntry(table=table, mode=mode, scope_selector=scope_selector)
        self._evict()
        return True

    def restore(self, endpoint: str, target_id: str | None) -> CacheEntry | None:
        key = self._key(endpoint, target_id)
        if key is None:
            return None
        return self._entries.get(key)

    def purge(self, endpoint: str) -> int:
        """Drop every entry of one connection. Returns how many were removed."""
        conn = normalize_endpoint(endpoint)
        doomed = [key for key in self._entries if key[0] == conn]
        for key in doomed:
            del self._entries[key]
        if doomed:
            logger.debug("Purged %d ref tables for %s", len(doomed), conn)
        return len(doomed)

    def clear(self) -> None:
        self._entries.clear()

    def keys(self) -> list[CacheKey]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        normalized = self._key(key[0], key[1])
        return normalized is not None and normalized in self._entries

    def __len__(self) -> int:
        return len(self._entries)
