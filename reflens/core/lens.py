"""RefLens — main orchestrator class."""

from __future__ import annotations

from typing import Any

from reflens.actions.interaction import Interactor
from reflens.core.config import Settings
from reflens.core.page import RefPage
from reflens.engine.base import BrowserEngine
from reflens.engine.connection import ConnectionManager
from reflens.engine.playwright import PlaywrightEngine
from reflens.refs.cache import RefCache
from reflens.refs.resolver import RefResolver
from reflens.refs.session import RefSessions
from reflens.snapshot.service import SnapshotTaker


class RefLens:
    """
    Sits between a browser-automation engine and an AI agent.

    Usage:
        lens = RefLens()
        page = await lens.page("http://127.0.0.1:9222")
        result = await page.snapshot(interactive=True)
        # result.snapshot → send to the agent
        await page.click("e2")
    """

    def __init__(
        self,
        engine: BrowserEngine | None = None,
        *,
        settings: Settings | None = None,
        cache: RefCache | None = None,
    ) -> None:
        if engine is None:
            engine = PlaywrightEngine()

        self.settings = settings or Settings()
        self.engine = engine
        self.cache = cache if cache is not None else RefCache(self.settings.cache_capacity)
        self.sessions = RefSessions(self.cache)
        self.connections = ConnectionManager(engine, self.cache, self.settings)
        self.snapshots = SnapshotTaker(engine, self.sessions, self.settings)
        self.resolver = RefResolver(engine, self.sessions)
        self.interactor = Interactor(self.resolver, self.settings)

    async def connect(self, endpoint: str) -> Any:
        return await self.connections.connect(endpoint)

    async def disconnect(self, endpoint: str | None = None) -> None:
        await self.connections.disconnect(endpoint)

    async def page(self, endpoint: str, target_id: str | None = None) -> RefPage:
        """Connect (if needed) and wrap the tab identified by *target_id*."""
        page = await self.connections.get_page(endpoint, target_id)
        return RefPage(self, page, endpoint=endpoint, target_id=target_id)

    def wrap(self, page: Any, *, endpoint: str, target_id: str | None = None) -> RefPage:
        """Wrap a page object obtained elsewhere."""
        return RefPage(self, page, endpoint=endpoint, target_id=target_id)
