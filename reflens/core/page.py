"""RefPage — one tab, driven by snapshot refs."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Sequence

from reflens.core.types import FormField, SnapshotOptions, SnapshotResult
from reflens.refs.resolver import SNAPSHOT_SCOPE

if TYPE_CHECKING:
    from reflens.core.lens import RefLens


class RefPage:
    """
    Binds a live page to its cache identity ``(endpoint, target_id)``.

    The workflow is snapshot -> read refs -> act on refs::

        result = await page.snapshot()
        await page.click("e3")

    Before every action the page's refs are restored from the shared cache
    if this handle has none yet (e.g. it was recreated after a reconnect).
    """

    def __init__(
        self,
        lens: RefLens,
        page: Any,
        *,
        endpoint: str,
        target_id: str | None = None,
    ) -> None:
        self._lens = lens
        self.page = page
        self.endpoint = endpoint
        self.target_id = target_id

    def _restore(self) -> None:
        self._lens.sessions.restore(self.page, endpoint=self.endpoint, target_id=self.target_id)

    async def snapshot(self, options: SnapshotOptions | None = None, **kwargs: Any) -> SnapshotResult:
        """Take a snapshot. Keyword arguments are SnapshotOptions fields."""
        if options is None:
            options = SnapshotOptions(**kwargs)
        return await self._lens.snapshots.take(
            self.page, endpoint=self.endpoint, target_id=self.target_id, options=options
        )

    async def resolve(self, ref: str, *, frame_selector: Any = SNAPSHOT_SCOPE) -> Any:
        self._restore()
        return await self._lens.resolver.resolve(self.page, ref, frame_selector=frame_selector)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def click(self, ref: str, **kwargs: Any) -> None:
        self._restore()
        await self._lens.interactor.click(self.page, ref, **kwargs)

    async def hover(self, ref: str, **kwargs: Any) -> None:
        self._restore()
        await self._lens.interactor.hover(self.page, ref, **kwargs)

    async def type(self, ref: str, text: str, **kwargs: Any) -> None:
        self._restore()
        await self._lens.interactor.type(self.page, ref, text, **kwargs)

    async def select(self, ref: str, *values: str, **kwargs: Any) -> None:
        self._restore()
        await self._lens.interactor.select(self.page, ref, values, **kwargs)

    async def drag(self, start_ref: str, end_ref: str, **kwargs: Any) -> None:
        self._restore()
        await self._lens.interactor.drag(self.page, start_ref, end_ref, **kwargs)

    async def fill(self, fields: Sequence[FormField], **kwargs: Any) -> None:
        self._restore()
        await self._lens.interactor.fill(self.page, fields, **kwargs)

    async def scroll_into_view(self, ref: str, **kwargs: Any) -> None:
        self._restore()
        await self._lens.interactor.scroll_into_view(self.page, ref, **kwargs)

    async def highlight(self, ref: str, *, cancel: asyncio.Event | None = None) -> None:
        self._restore()
        await self._lens.interactor.highlight(self.page, ref, cancel=cancel)

    async def wait_for(self, ref: str, **kwargs: Any) -> None:
        self._restore()
        await self._lens.interactor.wait_for(self.page, ref, **kwargs)
