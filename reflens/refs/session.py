"""Live per-page ref sessions backed by the shared RefCache."""

from __future__ import annotations

import logging
import weakref
from typing import Any

from reflens.core.types import AddressingMode, PageRefSession, RefTable
from reflens.refs.cache import RefCache

logger = logging.getLogger(__name__)


class RefSessions:
    """
    Owns one PageRefSession per live page object.

    Sessions are held weakly, so a page that is garbage collected takes its
    session with it; the RefCache entry outlives it and can be restored
    onto the page handle that replaces it.
    """

    def __init__(self, cache: RefCache) -> None:
        self._cache = cache
        self._sessions: weakref.WeakKeyDictionary[Any, PageRefSession] = weakref.WeakKeyDictionary()

    @property
    def cache(self) -> RefCache:
        return self._cache

    def get(self, page: Any) -> PageRefSession:
        """Return the page's session, creating an empty one on first use."""
        session = self._sessions.get(page)
        if session is None:
            session = PageRefSession()
            self._sessions[page] = session
        return session

    def peek(self, page: Any) -> PageRefSession | None:
        return self._sessions.get(page)

    def forget(self, page: Any) -> None:
        self._sessions.pop(page, None)

    def store(
        self,
        page: Any,
        *,
        endpoint: str,
        target_id: str | None,
        table: RefTable,
        mode: AddressingMode,
        scope_selector: str | None = None,
    ) -> PageRefSession:
        """Replace the page's live table and write it through to the cache."""
        session = self.get(page)
        session.table = table
        session.mode = mode
        session.scope_selector = scope_selector
        session.generation += 1
        self._cache.store(endpoint, target_id, table, mode, scope_selector)
        return session

    def restore(self, page: Any, *, endpoint: str, target_id: str | None) -> bool:
        """
        Fill an empty session from the cache.

        Never touches a session that already holds a table: that table is at
        least as fresh as anything cached.
        """
        session = self.get(page)
        if session.has_table:
            return False
        entry = self._cache.restore(endpoint, target_id)
        if entry is None:
            return False
        session.table = entry.table
        session.mode = entry.mode
        session.scope_selector = entry.scope_selector
        session.generation += 1
        logger.debug("Restored %d cached refs for target %s", len(entry.table), target_id)
        return True
