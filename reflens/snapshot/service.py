"""SnapshotTaker — engine outline -> annotated snapshot -> stored refs."""

from __future__ import annotations

import logging
from typing import Any

from reflens.core.config import Settings
from reflens.core.errors import SnapshotError
from reflens.core.types import AddressingMode, SnapshotOptions, SnapshotResult
from reflens.engine.base import BrowserEngine
from reflens.refs.session import RefSessions
from reflens.snapshot.parser import build_snapshot, snapshot_stats, truncate_outline

logger = logging.getLogger(__name__)


class SnapshotTaker:
    def __init__(
        self,
        engine: BrowserEngine,
        sessions: RefSessions,
        settings: Settings | None = None,
    ) -> None:
        self._engine = engine
        self._sessions = sessions
        self._settings = settings or Settings()

    async def take(
        self,
        page: Any,
        *,
        endpoint: str,
        target_id: str | None = None,
        options: SnapshotOptions | None = None,
    ) -> SnapshotResult:
        """
        Snapshot *page* and make its refs the page's current table.

        Direct addressing (the default) asks the engine for its pre-tagged
        outline; computed addressing takes the plain outline, optionally
        narrowed to a selector and/or frame, and numbers refs locally.
        """
        options = options or SnapshotOptions()
        mode = AddressingMode(options.mode)
        selector = (options.selector or "").strip() or None
        frame_selector = (options.frame_selector or "").strip() or None

        if mode is AddressingMode.DIRECT:
            if selector or frame_selector:
                raise SnapshotError(
                    "Direct addressing does not support selector or frame snapshots; "
                    "use computed addressing."
                )
            s = self._settings
            timeout = s.clamp(options.timeout_ms, s.snapshot_timeout_ms, s.snapshot_max_timeout_ms)
            outline = await self._engine.ai_snapshot(page, timeout_ms=timeout)
        else:
            outline = await self._engine.aria_snapshot(
                page, selector=selector, frame_selector=frame_selector
            )

        outline, truncated = truncate_outline(str(outline or ""), options.max_chars)
        text, table = build_snapshot(outline, options)

        self._sessions.store(
            page,
            endpoint=endpoint,
            target_id=target_id,
            table=table,
            mode=mode,
            scope_selector=frame_selector,
        )
        stats = snapshot_stats(text, table)
        logger.debug(
            "Snapshot (%s): %d lines, %d refs%s",
            mode.value, stats.lines, stats.refs, ", truncated" if truncated else "",
        )
        return SnapshotResult(
            snapshot=text,
            refs=table,
            stats=stats,
            mode=mode,
            truncated=truncated,
        )
