"""Tests for RefResolver: normalization, both addressing modes, scoping."""

from __future__ import annotations

import pytest

from conftest import FakePage
from reflens.core.errors import ScopeMismatchError, UnknownRefError
from reflens.core.types import AddressingMode, RefEntry
from reflens.refs.cache import RefCache
from reflens.refs.resolver import RefResolver, normalize_ref
from reflens.refs.session import RefSessions

ENDPOINT = "http://127.0.0.1:9222"


@pytest.fixture
def sessions() -> RefSessions:
    return RefSessions(RefCache())


@pytest.fixture
def resolver(engine, sessions) -> RefResolver:
    return RefResolver(engine, sessions)


def store(sessions, page, table, mode=AddressingMode.COMPUTED, scope=None):
    sessions.store(
        page, endpoint=ENDPOINT, target_id="T1",
        table=table, mode=mode, scope_selector=scope,
    )


class TestNormalizeRef:
    def test_plain(self):
        assert normalize_ref("e3") == "e3"

    def test_sigil(self):
        assert normalize_ref("@e3") == "e3"

    def test_ref_prefix(self):
        assert normalize_ref("ref=e3") == "e3"

    def test_whitespace(self):
        assert normalize_ref("  e3 ") == "e3"


class TestComputedMode:
    @pytest.mark.asyncio
    async def test_unknown_ref_fails_without_engine_round_trip(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {"e1": RefEntry("button", "OK")})

        with pytest.raises(UnknownRefError) as info:
            await resolver.resolve(page, "e7")

        assert info.value.ref == "e7"
        assert not info.value.stale
        assert engine.role_queries == []
        assert engine.ref_queries == []

    @pytest.mark.asyncio
    async def test_page_without_snapshot_is_unknown_ref(self, engine, resolver):
        with pytest.raises(UnknownRefError):
            await resolver.resolve(FakePage(), "e1")
        assert engine.role_queries == []

    @pytest.mark.asyncio
    async def test_queries_by_role_and_exact_name(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {"e1": RefEntry("link", "More information")})

        locator = await resolver.resolve(page, "@e1")

        assert engine.role_queries == [("link", "More information", None)]
        locator.nth.assert_not_called()

    @pytest.mark.asyncio
    async def test_nth_selects_occurrence(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {
            "e1": RefEntry("button", "Submit", 0),
            "e2": RefEntry("button", "Submit", 1),
        })

        result = await resolver.resolve(page, "e2")

        assert engine.role_queries == [("button", "Submit", None)]
        assert "[1]" in repr(result)

    @pytest.mark.asyncio
    async def test_requeries_on_every_resolve(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {"e1": RefEntry("button", "OK")})
        await resolver.resolve(page, "e1")
        await resolver.resolve(page, "e1")
        assert len(engine.role_queries) == 2

    @pytest.mark.asyncio
    async def test_frame_scoped_snapshot_resolves_in_frame(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {"e1": RefEntry("button", "OK")}, scope="iframe#pay")
        await resolver.resolve(page, "e1")
        assert engine.role_queries == [("button", "OK", "iframe#pay")]

    @pytest.mark.asyncio
    async def test_table_replaced_mid_resolution_is_stale(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {"e1": RefEntry("button", "OK")})

        original_query = engine.query_by_role_and_name

        async def racing_query(*args, **kwargs):
            store(sessions, page, {"e1": RefEntry("link", "Elsewhere")})
            return await original_query(*args, **kwargs)

        engine.query_by_role_and_name = racing_query

        with pytest.raises(UnknownRefError) as info:
            await resolver.resolve(page, "e1")
        assert info.value.stale
        assert sessions.get(page).table["e1"].role == "link"


class TestDirectMode:
    @pytest.mark.asyncio
    async def test_token_passes_through_to_engine(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {"e5": RefEntry("button", "Go")}, mode=AddressingMode.DIRECT)

        await resolver.resolve(page, "ref=e5")

        assert engine.ref_queries == [("e5", None)]
        assert engine.role_queries == []

    @pytest.mark.asyncio
    async def test_tokens_missing_from_table_are_still_delegated(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {}, mode=AddressingMode.DIRECT)
        await resolver.resolve(page, "e99")
        assert engine.ref_queries == [("e99", None)]


class TestScopeMismatch:
    @pytest.mark.asyncio
    async def test_root_ref_used_in_frame(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {"e1": RefEntry("button", "OK")})

        with pytest.raises(ScopeMismatchError) as info:
            await resolver.resolve(page, "e1", frame_selector="iframe#a")

        assert info.value.expected is None
        assert info.value.actual == "iframe#a"
        assert engine.role_queries == []

    @pytest.mark.asyncio
    async def test_frame_ref_used_at_root(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {"e1": RefEntry("button", "OK")}, scope="iframe#a")
        with pytest.raises(ScopeMismatchError):
            await resolver.resolve(page, "e1", frame_selector=None)

    @pytest.mark.asyncio
    async def test_matching_scope_resolves(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {"e1": RefEntry("button", "OK")}, scope="iframe#a")
        await resolver.resolve(page, "e1", frame_selector="iframe#a")
        assert engine.role_queries == [("button", "OK", "iframe#a")]

    @pytest.mark.asyncio
    async def test_direct_mode_checks_scope_too(self, engine, sessions, resolver):
        page = FakePage()
        store(sessions, page, {}, mode=AddressingMode.DIRECT)
        with pytest.raises(ScopeMismatchError):
            await resolver.resolve(page, "e1", frame_selector="#child")
        assert engine.ref_queries == []
