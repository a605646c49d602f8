"""Abstract browser engine — the only seam between reflens and a real browser."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable


class BrowserEngine(ABC):
    """
    Capabilities reflens needs from a browser-automation engine.

    Element queries return the engine's lazy element handle (a Playwright
    ``Locator`` for the default engine); nothing is looked up until an
    action runs against it.
    """

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------

    @abstractmethod
    async def connect(self, endpoint: str, timeout_ms: int) -> Any: ...

    @abstractmethod
    def on_disconnect(self, browser: Any, callback: Callable[[], None]) -> None: ...

    @abstractmethod
    async def close(self, browser: Any) -> None: ...

    @abstractmethod
    async def list_pages(self, browser: Any) -> list[Any]: ...

    @abstractmethod
    async def target_id(self, page: Any) -> str | None: ...

    # ------------------------------------------------------------------
    # Accessibility text
    # ------------------------------------------------------------------

    @abstractmethod
    async def aria_snapshot(
        self,
        page: Any,
        *,
        selector: str | None = None,
        frame_selector: str | None = None,
    ) -> str:
        """Plain role/name outline of the page (or of one element / frame)."""

    @abstractmethod
    async def ai_snapshot(self, page: Any, *, timeout_ms: int) -> str:
        """Outline pre-tagged with the engine's own ``[ref=...]`` tokens."""

    # ------------------------------------------------------------------
    # Element queries
    # ------------------------------------------------------------------

    @abstractmethod
    async def query_by_role_and_name(
        self,
        page: Any,
        role: str,
        name: str | None,
        *,
        frame_selector: str | None = None,
    ) -> Any:
        """
        All elements with *role* and exactly *name*, in document order.
        With no *name*, only elements without an accessible name match.
        """

    @abstractmethod
    async def query_by_engine_ref(
        self,
        page: Any,
        token: str,
        *,
        frame_selector: str | None = None,
    ) -> Any: ...

    @staticmethod
    def pick(elements: Any, index: int) -> Any:
        """Select the *index*-th match of a query result."""
        return elements.nth(index)
