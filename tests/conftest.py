"""Shared fakes: an in-memory BrowserEngine and Playwright-like locators."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from reflens.core.config import Settings
from reflens.engine.base import BrowserEngine


def make_locator(label: str = "locator") -> MagicMock:
    """A locator whose action methods are awaitable mocks."""
    loc = MagicMock(name=label)
    for method in (
        "click", "dblclick", "hover", "fill", "press", "press_sequentially",
        "select_option", "drag_to", "set_checked", "scroll_into_view_if_needed",
        "highlight", "wait_for",
    ):
        setattr(loc, method, AsyncMock(name=f"{label}.{method}"))
    loc.nth = MagicMock(side_effect=lambda i: make_locator(f"{label}[{i}]"))
    return loc


class FakePage:
    def __init__(self, target_id: str | None = None) -> None:
        self.target = target_id


class FakeEngine(BrowserEngine):
    """Records every call; snapshot text and query results are settable."""

    def __init__(self) -> None:
        self.aria_text = ""
        self.ai_text = ""
        self.pages: list[FakePage] = []
        self.connect_mock = AsyncMock(side_effect=lambda endpoint, timeout_ms: MagicMock(name="browser"))
        self.close_mock = AsyncMock()
        self.aria_calls: list[dict] = []
        self.ai_calls: list[dict] = []
        self.role_queries: list[tuple] = []
        self.ref_queries: list[tuple] = []
        self.disconnect_callbacks: list = []

    async def connect(self, endpoint, timeout_ms):
        return await self.connect_mock(endpoint, timeout_ms)

    def on_disconnect(self, browser, callback):
        self.disconnect_callbacks.append(callback)

    async def close(self, browser):
        await self.close_mock(browser)

    async def list_pages(self, browser):
        return list(self.pages)

    async def target_id(self, page):
        return page.target

    async def aria_snapshot(self, page, *, selector=None, frame_selector=None):
        self.aria_calls.append({"selector": selector, "frame_selector": frame_selector})
        return self.aria_text

    async def ai_snapshot(self, page, *, timeout_ms):
        self.ai_calls.append({"timeout_ms": timeout_ms})
        return self.ai_text

    async def query_by_role_and_name(self, page, role, name, *, frame_selector=None):
        self.role_queries.append((role, name, frame_selector))
        return make_locator(f"role={role} name={name}")

    async def query_by_engine_ref(self, page, token, *, frame_selector=None):
        self.ref_queries.append((token, frame_selector))
        return make_locator(f"aria-ref={token}")


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def fast_settings() -> Settings:
    return Settings(connect_backoff_ms=0)
