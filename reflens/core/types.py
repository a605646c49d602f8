"""Shared types and dataclasses for reflens."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class AddressingMode(str, Enum):
    DIRECT = "direct"  # engine-issued tokens, resolved by the engine itself
    COMPUTED = "computed"  # locally assigned eN recipes (role + name + nth)

    @classmethod
    def _missing_(cls, value: object) -> AddressingMode | None:
        # Accept the engine-flavoured spellings as well.
        aliases = {"aria": cls.DIRECT, "role": cls.COMPUTED}
        if isinstance(value, str):
            return aliases.get(value.lower())
        return None


@dataclass
class RefEntry:
    """One addressable element from a snapshot."""

    role: str
    name: str | None = None
    nth: int | None = None  # only set when (role, name) is shared

    @property
    def key(self) -> tuple[str, str]:
        return (self.role, self.name or "")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": self.role}
        if self.name is not None:
            data["name"] = self.name
        if self.nth is not None:
            data["nth"] = self.nth
        return data


# ref id -> entry, in document order
RefTable = dict[str, RefEntry]


@dataclass
class SnapshotOptions:
    interactive: bool = False
    compact: bool = False
    max_depth: int | None = None
    max_chars: int | None = None
    selector: str | None = None  # computed mode only
    frame_selector: str | None = None  # computed mode only
    mode: AddressingMode = AddressingMode.DIRECT
    timeout_ms: int | None = None


@dataclass
class SnapshotStats:
    lines: int
    chars: int
    refs: int
    interactive: int

    def to_dict(self) -> dict[str, int]:
        return {
            "lines": self.lines,
            "chars": self.chars,
            "refs": self.refs,
            "interactive": self.interactive,
        }


@dataclass
class SnapshotResult:
    """What a snapshot call hands back to the agent."""

    snapshot: str  # annotated outline, one line per node
    refs: RefTable
    stats: SnapshotStats
    mode: AddressingMode
    truncated: bool = False
    untrusted: bool = True  # page text is attacker-controlled input


@dataclass
class PageRefSession:
    """Live ref state of one page. Replaced wholesale by every snapshot."""

    table: RefTable | None = None
    mode: AddressingMode | None = None
    scope_selector: str | None = None
    generation: int = 0

    @property
    def has_table(self) -> bool:
        return self.table is not None


@dataclass
class CacheEntry:
    table: RefTable
    mode: AddressingMode
    scope_selector: str | None = None


FieldValue = Union[str, int, float, bool, None]


@dataclass
class FormField:
    ref: str
    type: str  # "textbox", "checkbox", "radio", ...
    value: FieldValue = None

