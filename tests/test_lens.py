"""End-to-end tests through RefLens / RefPage against the fake engine."""

from __future__ import annotations

import pytest

from conftest import FakePage
from reflens import (
    AddressingMode,
    FormField,
    RefLens,
    ScopeMismatchError,
    UnknownRefError,
)
from reflens.refs.cache import RefCache

ENDPOINT = "http://127.0.0.1:9222"

FORM = """\
- main:
  - heading "Sign up" [level=1]
  - textbox "Email"
  - checkbox "Newsletter"
  - button "Submit"
  - button "Submit"
"""


@pytest.fixture
def lens(engine, fast_settings) -> RefLens:
    engine.pages = [FakePage("T1")]
    engine.aria_text = FORM
    return RefLens(engine, settings=fast_settings)


class TestWorkflow:
    @pytest.mark.asyncio
    async def test_snapshot_then_click(self, engine, lens):
        page = await lens.page(ENDPOINT, "T1")
        result = await page.snapshot(mode=AddressingMode.COMPUTED, interactive=True)

        assert result.stats.refs == 4
        assert '- button "Submit" [ref=e4] [nth=1]' in result.snapshot

        await page.click("e4")
        assert engine.role_queries == [("button", "Submit", None)]

    @pytest.mark.asyncio
    async def test_fill_form(self, engine, lens):
        page = await lens.page(ENDPOINT, "T1")
        await page.snapshot(mode="computed")
        refs = {e.name: r for r, e in lens.sessions.peek(page.page).table.items()}

        await page.fill([
            FormField(refs["Email"], "textbox", "ada@example.com"),
            FormField(refs["Newsletter"], "checkbox", True),
        ])

        assert [q[:2] for q in engine.role_queries] == [
            ("textbox", "Email"),
            ("checkbox", "Newsletter"),
        ]

    @pytest.mark.asyncio
    async def test_direct_mode_round_trip(self, engine, lens):
        engine.ai_text = '- button "Go" [ref=f1e3]'
        page = await lens.page(ENDPOINT)
        await page.snapshot()
        await page.hover("@f1e3")
        assert engine.ref_queries == [("f1e3", None)]

    @pytest.mark.asyncio
    async def test_resolving_before_any_snapshot(self, lens):
        page = await lens.page(ENDPOINT, "T1")
        with pytest.raises(UnknownRefError):
            await page.click("e1")

    @pytest.mark.asyncio
    async def test_frame_scope_is_enforced(self, engine, lens):
        page = await lens.page(ENDPOINT, "T1")
        await page.snapshot(mode="computed", frame_selector="iframe#signup")
        with pytest.raises(ScopeMismatchError):
            await page.click("e1", frame_selector=None)
        await page.click("e2")
        assert engine.role_queries == [("textbox", "Email", "iframe#signup")]


class TestCacheRestore:
    @pytest.mark.asyncio
    async def test_recreated_page_handle_restores_refs(self, engine, lens):
        page = await lens.page(ENDPOINT, "T1")
        await page.snapshot(mode="computed")

        # Same tab, new in-memory handle (e.g. after a reconnect).
        fresh = lens.wrap(FakePage("T1"), endpoint=ENDPOINT, target_id="T1")
        await fresh.click("e1")

        assert engine.role_queries == [("heading", "Sign up", None)]

    @pytest.mark.asyncio
    async def test_restore_does_not_clobber_newer_snapshot(self, engine, lens):
        first = await lens.page(ENDPOINT, "T1")
        await first.snapshot(mode="computed")

        other = lens.wrap(FakePage("T1"), endpoint=ENDPOINT, target_id="T1")
        engine.aria_text = '- link "Only link"'
        await other.snapshot(mode="computed")
        await first.click("e1")
        await other.click("e1")

        assert engine.role_queries == [
            ("heading", "Sign up", None),
            ("link", "Only link", None),
        ]

    @pytest.mark.asyncio
    async def test_disconnect_purges_cached_refs(self, lens):
        page = await lens.page(ENDPOINT, "T1")
        await page.snapshot(mode="computed")
        await lens.disconnect(ENDPOINT)

        fresh = lens.wrap(FakePage("T1"), endpoint=ENDPOINT, target_id="T1")
        with pytest.raises(UnknownRefError):
            await fresh.click("e1")

    @pytest.mark.asyncio
    async def test_independent_lenses_do_not_share_refs(self, engine, fast_settings):
        engine.aria_text = FORM
        a = RefLens(engine, settings=fast_settings)
        b = RefLens(engine, settings=fast_settings)

        await a.wrap(FakePage("T1"), endpoint=ENDPOINT, target_id="T1").snapshot(mode="computed")

        with pytest.raises(UnknownRefError):
            await b.wrap(FakePage("T1"), endpoint=ENDPOINT, target_id="T1").click("e1")

    def test_injected_empty_cache_is_used(self, engine):
        cache = RefCache(capacity=5)
        assert RefLens(engine, cache=cache).cache is cache

    def test_cache_capacity_from_settings(self, engine, fast_settings):
        lens = RefLens(engine, settings=fast_settings.model_copy(update={"cache_capacity": 7}))
        assert lens.cache.capacity == 7
