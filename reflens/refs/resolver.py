"""RefResolver — turns a ref token back into an actionable element."""

from __future__ import annotations

import logging
from typing import Any

from reflens.core.errors import ScopeMismatchError, UnknownRefError
from reflens.core.types import AddressingMode
from reflens.engine.base import BrowserEngine
from reflens.refs.session import RefSessions

logger = logging.getLogger(__name__)


class _SnapshotScope:
    def __repr__(self) -> str:
        return "SNAPSHOT_SCOPE"


# Default for ``frame_selector``: resolve in whatever scope the snapshot used.
SNAPSHOT_SCOPE: Any = _SnapshotScope()


def normalize_ref(ref: str) -> str:
    """Strip an ``@`` sigil or ``ref=`` prefix: ``@e3`` / ``ref=e3`` -> ``e3``."""
    token = str(ref).strip()
    if token.startswith("@"):
        return token[1:]
    if token.startswith("ref="):
        return token[4:]
    return token


class RefResolver:
    """
    Resolves refs against a page's current session.

    Computed refs are recipes: every resolve re-queries the live page by
    role and exact name, so an element that moved or re-rendered still
    resolves, while one that was removed or renamed does not.
    """

    def __init__(self, engine: BrowserEngine, sessions: RefSessions) -> None:
        self._engine = engine
        self._sessions = sessions

    async def resolve(self, page: Any, ref: str, *, frame_selector: Any = SNAPSHOT_SCOPE) -> Any:
        """
        Return the engine element for *ref*.

        Pass ``frame_selector`` (``None`` for the main frame) to require that
        the ref was captured in that scope; a mismatch raises
        ScopeMismatchError instead of resolving in the wrong frame.
        """
        token = normalize_ref(ref)
        session = self._sessions.peek(page)
        if session is None or session.mode is None:
            raise UnknownRefError(token)

        # Tables are replaced, never mutated: hold on to this one.
        table = session.table
        mode = session.mode
        scope = session.scope_selector
        generation = session.generation

        if frame_selector is not SNAPSHOT_SCOPE and (frame_selector or None) != scope:
            raise ScopeMismatchError(token, expected=scope, actual=frame_selector or None)

        if mode is AddressingMode.DIRECT:
            return await self._engine.query_by_engine_ref(page, token, frame_selector=scope)

        entry = (table or {}).get(token)
        if entry is None:
            raise UnknownRefError(token)

        elements = await self._engine.query_by_role_and_name(
            page, entry.role, entry.name, frame_selector=scope
        )

        if session.generation != generation:
            logger.warning("Ref %s was replaced by a newer snapshot during resolution", token)
            raise UnknownRefError(token, stale=True)

        logger.debug("Resolved %s -> %s %r nth=%s", token, entry.role, entry.name, entry.nth)
        if entry.nth is not None:
            return self._engine.pick(elements, entry.nth)
        return elements
