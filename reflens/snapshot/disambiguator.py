"""RoleNameTracker — occurrence indices for elements sharing role + name."""

from __future__ import annotations

from reflens.core.types import RefTable


class RoleNameTracker:
    """
    Counts (role, name) occurrences during a single top-to-bottom pass.

    The first occurrence of a key gets index 0, the next 1, and so on, in
    document order. After the pass, ``strip_unique`` removes the index from
    every entry whose key occurred exactly once.
    """

    def __init__(self) -> None:
        self._counts: dict[tuple[str, str], int] = {}
        self._refs_by_key: dict[tuple[str, str], list[str]] = {}

    @staticmethod
    def key(role: str, name: str | None) -> tuple[str, str]:
        return (role, name or "")

    def next_index(self, role: str, name: str | None, ref: str) -> int:
        key = self.key(role, name)
        current = self._counts.get(key, 0)
        self._counts[key] = current + 1
        self._refs_by_key.setdefault(key, []).append(ref)
        return current

    def count(self, role: str, name: str | None) -> int:
        return self._counts.get(self.key(role, name), 0)

    def duplicate_keys(self) -> set[tuple[str, str]]:
        return {key for key, refs in self._refs_by_key.items() if len(refs) > 1}

    def strip_unique(self, table: RefTable) -> None:
        duplicates = self.duplicate_keys()
        for entry in table.values():
            if entry.key not in duplicates:
                entry.nth = None
