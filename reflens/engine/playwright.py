"""Default engine backed by Playwright's async API over CDP."""

from __future__ import annotations

import re
from typing import Any, Callable

from playwright.async_api import Browser, Page, Playwright, async_playwright

from reflens.core.errors import SnapshotError
from reflens.engine.base import BrowserEngine

# Accessible name is empty; unnamed refs are counted among unnamed elements only.
_NO_NAME = re.compile(r"^$")


class PlaywrightEngine(BrowserEngine):
    """
    Connects to a running Chromium over CDP and answers element queries
    with Playwright locators.

    Direct-mode snapshots go through the internal ``snapshotForAI`` channel
    call, which tags every node with a ref the ``aria-ref=`` selector
    engine understands.
    """

    def __init__(self, playwright: Playwright | None = None) -> None:
        self._playwright = playwright
        self._owns_playwright = playwright is None

    async def _driver(self) -> Playwright:
        if self._playwright is None:
            self._playwright = await async_playwright().start()
        return self._playwright

    async def stop(self) -> None:
        """Stop the Playwright driver if this engine started it."""
        if self._playwright is not None and self._owns_playwright:
            await self._playwright.stop()
            self._playwright = None

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    async def connect(self, endpoint: str, timeout_ms: int) -> Browser:
        driver = await self._driver()
        return await driver.chromium.connect_over_cdp(endpoint, timeout=timeout_ms)

    def on_disconnect(self, browser: Browser, callback: Callable[[], None]) -> None:
        browser.on("disconnected", lambda _browser: callback())

    async def close(self, browser: Browser) -> None:
        await browser.close()

    async def list_pages(self, browser: Browser) -> list[Page]:
        return [page for context in browser.contexts for page in context.pages]

    async def target_id(self, page: Page) -> str | None:
        cdp = await page.context.new_cdp_session(page)
        try:
            info = await cdp.send("Target.getTargetInfo")
        finally:
            await cdp.detach()
        target = str((info or {}).get("targetInfo", {}).get("targetId", "")).strip()
        return target or None

    # ------------------------------------------------------------------
    # Accessibility text
    # ------------------------------------------------------------------

    async def aria_snapshot(
        self,
        page: Page,
        *,
        selector: str | None = None,
        frame_selector: str | None = None,
    ) -> str:
        scope: Any = page.frame_locator(frame_selector) if frame_selector else page
        locator = scope.locator(selector or ":root")
        return str(await locator.aria_snapshot() or "")

    async def ai_snapshot(self, page: Page, *, timeout_ms: int) -> str:
        impl = getattr(page, "_impl_obj", None)
        channel = getattr(impl, "_channel", None)
        if channel is None or not hasattr(channel, "send_return_as_dict"):
            raise SnapshotError(
                "This Playwright build does not expose snapshotForAI; "
                "use computed addressing instead."
            )
        result = await channel.send_return_as_dict(
            "snapshotForAI",
            lambda _params: timeout_ms,
            {"timeout": timeout_ms},
            is_internal=True,
        )
        return str((result or {}).get("full") or "")

    # ------------------------------------------------------------------
    # Element queries
    # ------------------------------------------------------------------

    async def query_by_role_and_name(
        self,
        page: Page,
        role: str,
        name: str | None,
        *,
        frame_selector: str | None = None,
    ) -> Any:
        scope: Any = page.frame_locator(frame_selector) if frame_selector else page
        if name:
            return scope.get_by_role(role, name=name, exact=True)
        return scope.get_by_role(role, name=_NO_NAME)

    async def query_by_engine_ref(
        self,
        page: Page,
        token: str,
        *,
        frame_selector: str | None = None,
    ) -> Any:
        scope: Any = page.frame_locator(frame_selector) if frame_selector else page
        return scope.locator(f"aria-ref={token}")
