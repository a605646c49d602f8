"""
Tree parser — turns the engine's indented accessibility outline into an
annotated outline plus a ref table.

Two addressing modes:

computed
    Refs ``e1, e2, ...`` are assigned here, in document order, to every
    interactive line and every named content line. A ref is a recipe
    (role + name + nth) that is re-queried at action time.

direct
    The engine already tagged lines with its own ``[ref=<token>]``. Tokens
    are collected as-is and resolved by the engine at action time.
"""

from __future__ import annotations

import logging

from reflens.core.types import (
    AddressingMode,
    RefEntry,
    RefTable,
    SnapshotOptions,
    SnapshotStats,
)
from reflens.snapshot.compactor import compact_tree
from reflens.snapshot.disambiguator import RoleNameTracker
from reflens.snapshot.lines import OutlineLine, defuse_refs, indent_level, parse_line
from reflens.snapshot.roles import INTERACTIVE_ROLES, is_addressable

logger = logging.getLogger(__name__)

EMPTY_TREE = "(empty)"
EMPTY_INTERACTIVE = "(no interactive elements)"
TRUNCATION_MARKER = "\n\n[...TRUNCATED - page too large]"


def _too_deep(line: str, max_depth: int | None) -> bool:
    return max_depth is not None and indent_level(line) > max_depth


def _interactive_suffix(parsed: OutlineLine) -> str:
    """Keep bracketed annotations only; children are gone so drop a dangling ':'."""
    annotations, _rest = parsed.split_suffix()
    return annotations.rstrip()


def _finish(
    lines: list[str],
    table: RefTable,
    tracker: RoleNameTracker,
    options: SnapshotOptions,
) -> tuple[str, RefTable]:
    tracker.strip_unique(table)
    if options.interactive:
        return "\n".join(lines) or EMPTY_INTERACTIVE, table
    tree = "\n".join(lines)
    if options.compact:
        tree = compact_tree(tree)
    return tree or EMPTY_TREE, table


def build_computed_snapshot(
    outline: str,
    options: SnapshotOptions | None = None,
) -> tuple[str, RefTable]:
    """Assign ``eN`` refs to addressable lines of a plain accessibility outline."""
    options = options or SnapshotOptions()
    table: RefTable = {}
    tracker = RoleNameTracker()
    result: list[str] = []
    counter = 0

    for raw in outline.split("\n"):
        if _too_deep(raw, options.max_depth):
            continue

        parsed = parse_line(raw)
        if parsed is None:
            if options.interactive:
                logger.debug("Skipping non-role line %r", raw)
            else:
                result.append(defuse_refs(raw))
            continue

        role = parsed.role
        if options.interactive:
            if role not in INTERACTIVE_ROLES:
                continue
        elif not is_addressable(role, parsed.name):
            result.append(defuse_refs(raw))
            continue

        counter += 1
        ref = f"e{counter}"
        nth = tracker.next_index(role, parsed.name, ref)
        table[ref] = RefEntry(role=role, name=parsed.name or None, nth=nth)

        result.append(_annotate(parsed, ref, nth, interactive=options.interactive))

    return _finish(result, table, tracker, options)


def _annotate(parsed: OutlineLine, ref: str, nth: int, *, interactive: bool) -> str:
    marks = f" [ref={ref}]"
    if nth > 0:
        marks += f" [nth={nth}]"
    # A plain outline carries no refs of its own; any "[ref=" in it is page text.
    suffix = _interactive_suffix(parsed) if interactive else parsed.suffix
    return defuse_refs(parsed.head) + marks + defuse_refs(suffix)


def build_direct_snapshot(
    outline: str,
    options: SnapshotOptions | None = None,
) -> tuple[str, RefTable]:
    """Collect the engine's own ``[ref=...]`` tokens from a pre-tagged outline."""
    options = options or SnapshotOptions()
    table: RefTable = {}
    tracker = RoleNameTracker()
    result: list[str] = []

    for raw in str(outline or "").split("\n"):
        if _too_deep(raw, options.max_depth):
            continue

        parsed = parse_line(raw)
        if parsed is None:
            if options.interactive:
                logger.debug("Skipping non-role line %r", raw)
            else:
                result.append(defuse_refs(raw))
            continue

        role = parsed.role
        ref = parsed.ref
        head = defuse_refs(parsed.head)

        # Only the annotation run belongs to the engine; the rest is page text.
        if options.interactive:
            if role not in INTERACTIVE_ROLES or ref is None:
                continue
            result.append(head + _interactive_suffix(parsed))
        else:
            annotations, rest = parsed.split_suffix()
            result.append(head + annotations + defuse_refs(rest))

        if ref is None:
            continue
        if ref in table:
            logger.debug("Engine ref %s appears twice; keeping the first line", ref)
            continue
        nth = tracker.next_index(role, parsed.name, ref)
        table[ref] = RefEntry(role=role, name=parsed.name or None, nth=nth)

    return _finish(result, table, tracker, options)


def build_snapshot(
    outline: str,
    options: SnapshotOptions | None = None,
) -> tuple[str, RefTable]:
    options = options or SnapshotOptions()
    if AddressingMode(options.mode) is AddressingMode.COMPUTED:
        return build_computed_snapshot(outline, options)
    return build_direct_snapshot(outline, options)


def truncate_outline(outline: str, max_chars: int | None) -> tuple[str, bool]:
    """
    Cut *outline* to ``max_chars`` characters.
    Returns (text, was_truncated).
    """
    if max_chars is None or max_chars <= 0 or len(outline) <= max_chars:
        return outline, False
    return outline[: int(max_chars)] + TRUNCATION_MARKER, True


def snapshot_stats(snapshot: str, table: RefTable) -> SnapshotStats:
    return SnapshotStats(
        lines=len(snapshot.split("\n")),
        chars=len(snapshot),
        refs=len(table),
        interactive=sum(1 for entry in table.values() if entry.role in INTERACTIVE_ROLES),
    )
