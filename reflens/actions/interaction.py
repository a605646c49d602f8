"""Ref-addressed element actions."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Sequence

from reflens.core.config import Settings
from reflens.core.errors import OperationCancelledError, classify_engine_error
from reflens.core.types import FormField
from reflens.refs.resolver import SNAPSHOT_SCOPE, RefResolver

logger = logging.getLogger(__name__)

_TRUTHY = (True, 1, "1", "true")


async def run_cancellable(
    operation: Awaitable[Any],
    cancel: asyncio.Event | None,
    what: str,
) -> Any:
    """
    Await *operation* unless *cancel* fires first.

    Cancellation only abandons the wait on our side; the engine may keep
    working on the request.
    """
    if cancel is None:
        return await operation
    if cancel.is_set():
        if asyncio.iscoroutine(operation):
            operation.close()
        raise OperationCancelledError(what)

    task = asyncio.ensure_future(operation)
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        done, _pending = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        waiter.cancel()
        # Also reached when our own caller is cancelled.
        if not task.done():
            task.cancel()

    if task in done:
        return task.result()
    raise OperationCancelledError(what)


class Interactor:
    """
    Performs actions on elements addressed by ref.

    Every action resolves its ref fresh, runs with a clamped per-operation
    timeout, and converts engine failures into reflens errors.
    """

    def __init__(self, resolver: RefResolver, settings: Settings | None = None) -> None:
        self._resolver = resolver
        self._settings = settings or Settings()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _action_timeout(self, timeout_ms: int | None) -> int:
        s = self._settings
        return s.clamp(timeout_ms, s.action_timeout_ms, s.action_max_timeout_ms)

    def _wait_timeout(self, timeout_ms: int | None) -> int:
        s = self._settings
        return s.clamp(timeout_ms, s.wait_timeout_ms)

    async def _locate(self, page: Any, ref: str, frame_selector: Any) -> Any:
        return await self._resolver.resolve(page, ref, frame_selector=frame_selector)

    async def _perform(
        self,
        operation: Awaitable[Any],
        label: str,
        cancel: asyncio.Event | None,
    ) -> Any:
        try:
            return await run_cancellable(operation, cancel, label)
        except OperationCancelledError:
            raise
        except Exception as exc:
            classified = classify_engine_error(exc, label)
            if classified is exc:
                raise
            logger.debug("Action on %s failed: %s", label, exc)
            raise classified from exc

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    async def click(
        self,
        page: Any,
        ref: str,
        *,
        double_click: bool = False,
        button: str | None = None,
        modifiers: Sequence[str] | None = None,
        timeout_ms: int | None = None,
        frame_selector: Any = SNAPSHOT_SCOPE,
        cancel: asyncio.Event | None = None,
    ) -> None:
        locator = await self._locate(page, ref, frame_selector)
        kwargs: dict[str, Any] = {"timeout": self._action_timeout(timeout_ms)}
        if button:
            kwargs["button"] = button
        if modifiers:
            kwargs["modifiers"] = list(modifiers)
        op = locator.dblclick(**kwargs) if double_click else locator.click(**kwargs)
        await self._perform(op, ref, cancel)

    async def hover(
        self,
        page: Any,
        ref: str,
        *,
        timeout_ms: int | None = None,
        frame_selector: Any = SNAPSHOT_SCOPE,
        cancel: asyncio.Event | None = None,
    ) -> None:
        locator = await self._locate(page, ref, frame_selector)
        await self._perform(locator.hover(timeout=self._action_timeout(timeout_ms)), ref, cancel)

    async def type(
        self,
        page: Any,
        ref: str,
        text: str,
        *,
        submit: bool = False,
        slowly: bool = False,
        timeout_ms: int | None = None,
        frame_selector: Any = SNAPSHOT_SCOPE,
        cancel: asyncio.Event | None = None,
    ) -> None:
        text = "" if text is None else str(text)
        locator = await self._locate(page, ref, frame_selector)
        timeout = self._action_timeout(timeout_ms)

        async def _type() -> None:
            if slowly:
                await locator.click(timeout=timeout)
                await locator.press_sequentially(
                    text, delay=self._settings.type_delay_ms, timeout=timeout
                )
            else:
                await locator.fill(text, timeout=timeout)
            if submit:
                await locator.press("Enter", timeout=timeout)

        await self._perform(_type(), ref, cancel)

    async def select(
        self,
        page: Any,
        ref: str,
        values: Sequence[str],
        *,
        timeout_ms: int | None = None,
        frame_selector: Any = SNAPSHOT_SCOPE,
        cancel: asyncio.Event | None = None,
    ) -> None:
        if not values:
            raise ValueError("values are required")
        locator = await self._locate(page, ref, frame_selector)
        op = locator.select_option(list(values), timeout=self._action_timeout(timeout_ms))
        await self._perform(op, ref, cancel)

    async def drag(
        self,
        page: Any,
        start_ref: str,
        end_ref: str,
        *,
        timeout_ms: int | None = None,
        frame_selector: Any = SNAPSHOT_SCOPE,
        cancel: asyncio.Event | None = None,
    ) -> None:
        source = await self._locate(page, start_ref, frame_selector)
        target = await self._locate(page, end_ref, frame_selector)
        op = source.drag_to(target, timeout=self._action_timeout(timeout_ms))
        await self._perform(op, f"{start_ref} -> {end_ref}", cancel)

    async def fill(
        self,
        page: Any,
        fields: Sequence[FormField],
        *,
        timeout_ms: int | None = None,
        frame_selector: Any = SNAPSHOT_SCOPE,
        cancel: asyncio.Event | None = None,
    ) -> None:
        """Fill several fields in order; checkboxes and radios are set, not typed."""
        timeout = self._action_timeout(timeout_ms)
        for i, field in enumerate(fields):
            ref = (field.ref or "").strip()
            kind = (field.type or "").strip()
            if not ref:
                raise ValueError(f"fill(): field at index {i} has empty ref")
            if not kind:
                raise ValueError(f'fill(): field "{ref}" has empty type')

            locator = await self._locate(page, ref, frame_selector)
            if kind in ("checkbox", "radio"):
                checked = field.value in _TRUTHY
                op = locator.set_checked(checked, timeout=timeout)
            else:
                value = "" if field.value is None else str(field.value)
                op = locator.fill(value, timeout=timeout)
            await self._perform(op, ref, cancel)

    async def scroll_into_view(
        self,
        page: Any,
        ref: str,
        *,
        timeout_ms: int | None = None,
        frame_selector: Any = SNAPSHOT_SCOPE,
        cancel: asyncio.Event | None = None,
    ) -> None:
        locator = await self._locate(page, ref, frame_selector)
        op = locator.scroll_into_view_if_needed(timeout=self._wait_timeout(timeout_ms))
        await self._perform(op, ref, cancel)

    async def highlight(
        self,
        page: Any,
        ref: str,
        *,
        frame_selector: Any = SNAPSHOT_SCOPE,
        cancel: asyncio.Event | None = None,
    ) -> None:
        locator = await self._locate(page, ref, frame_selector)
        await self._perform(locator.highlight(), ref, cancel)

    async def wait_for(
        self,
        page: Any,
        ref: str,
        *,
        state: str = "visible",
        timeout_ms: int | None = None,
        frame_selector: Any = SNAPSHOT_SCOPE,
        cancel: asyncio.Event | None = None,
    ) -> None:
        locator = await self._locate(page, ref, frame_selector)
        op = locator.wait_for(state=state, timeout=self._wait_timeout(timeout_ms))
        await self._perform(op, ref, cancel)
