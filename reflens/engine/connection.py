"""ConnectionManager — one shared browser connection per CDP endpoint."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from reflens.core.config import Settings
from reflens.core.errors import ConnectionFailedError, PageNotFoundError
from reflens.engine.base import BrowserEngine
from reflens.refs.cache import RefCache, normalize_endpoint

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Caches connected browsers by endpoint.

    Concurrent first-time ``connect`` calls for the same endpoint await a
    single in-flight attempt. When a browser disconnects, its cached ref
    tables are purged from the RefCache.
    """

    def __init__(
        self,
        engine: BrowserEngine,
        cache: RefCache,
        settings: Settings | None = None,
    ) -> None:
        self._engine = engine
        self._cache = cache
        self._settings = settings or Settings()
        self._browsers: dict[str, Any] = {}
        self._connecting: dict[str, asyncio.Task] = {}

    # ------------------------------------------------------------------
    # Connect / disconnect
    # ------------------------------------------------------------------

    async def connect(self, endpoint: str) -> Any:
        normalized = normalize_endpoint(endpoint)
        browser = self._browsers.get(normalized)
        if browser is not None:
            return browser

        task = self._connecting.get(normalized)
        if task is None:
            task = asyncio.ensure_future(self._connect_with_retry(normalized))
            self._connecting[normalized] = task
            task.add_done_callback(lambda _t: self._connecting.pop(normalized, None))
        return await asyncio.shield(task)

    async def _connect_with_retry(self, endpoint: str) -> Any:
        s = self._settings
        last_error: BaseException | None = None
        for attempt in range(s.connect_attempts):
            timeout = s.connect_timeout_ms + attempt * s.connect_timeout_step_ms
            try:
                browser = await self._engine.connect(endpoint, timeout)
            except Exception as exc:
                last_error = exc
                logger.warning(
                    "Connect attempt %d/%d to %s failed: %s",
                    attempt + 1, s.connect_attempts, endpoint, exc,
                )
                if attempt < s.connect_attempts - 1:
                    await asyncio.sleep((attempt + 1) * s.connect_backoff_ms / 1000)
                continue

            self._browsers[endpoint] = browser
            self._engine.on_disconnect(browser, lambda: self._on_disconnected(endpoint, browser))
            logger.info("Connected to %s", endpoint)
            return browser

        raise ConnectionFailedError(endpoint, s.connect_attempts) from last_error

    def _on_disconnected(self, endpoint: str, browser: Any) -> None:
        if self._browsers.get(endpoint) is browser:
            del self._browsers[endpoint]
        self._cache.purge(endpoint)
        logger.info("Browser at %s disconnected", endpoint)

    async def disconnect(self, endpoint: str | None = None) -> None:
        """Close one connection, or every connection when *endpoint* is None."""
        if endpoint is None:
            targets = set(self._browsers) | set(self._connecting)
        else:
            targets = {normalize_endpoint(endpoint)}

        for target in targets:
            pending = self._connecting.get(target)
            if pending is not None:
                try:
                    await pending
                except ConnectionFailedError as exc:
                    logger.debug("Pending connection to %s failed: %s", target, exc)

            browser = self._browsers.pop(target, None)
            self._cache.purge(target)
            if browser is None:
                continue
            try:
                await self._engine.close(browser)
            except Exception as exc:
                logger.debug("Closing browser at %s failed: %s", target, exc)

    def is_connected(self, endpoint: str) -> bool:
        return normalize_endpoint(endpoint) in self._browsers

    # ------------------------------------------------------------------
    # Page lookup
    # ------------------------------------------------------------------

    async def get_page(self, endpoint: str, target_id: str | None = None) -> Any:
        """
        Return the page for *target_id*, or the first page when none is given.
        A browser with a single page answers every target id with that page.
        """
        browser = await self.connect(endpoint)
        pages = await self._engine.list_pages(browser)
        if not pages:
            raise PageNotFoundError(target_id or "<any>")
        if not target_id:
            return pages[0]

        for page in pages:
            try:
                tid = await self._engine.target_id(page)
            except Exception as exc:
                logger.debug("Could not read target id of a page: %s", exc)
                continue
            if tid == target_id:
                return page

        if len(pages) == 1:
            return pages[0]
        raise PageNotFoundError(target_id)
