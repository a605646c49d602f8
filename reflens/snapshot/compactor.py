"""Tree compaction — drop containers that lead to no addressable element."""

from __future__ import annotations

from reflens.snapshot.lines import LINE_RE, indent_level, parse_line


def _has_ref(line: str) -> bool:
    parsed = parse_line(line)
    return parsed is not None and parsed.ref is not None


def _is_named(line: str) -> bool:
    """Quoted accessible name, or inline text content (``- text: Hello``)."""
    match = LINE_RE.match(line)
    if match and match.group(3) is not None:
        return True
    stripped = line.rstrip()
    return ":" in stripped and not stripped.endswith(":")


def compact_tree(tree: str) -> str:
    """
    Remove every line that carries neither a ref nor a name and has no
    ref anywhere in its subtree. Ancestors of refs are kept for context.

    Idempotent: ``compact_tree(compact_tree(x)) == compact_tree(x)``.
    """
    lines = tree.split("\n")
    result: list[str] = []

    for i, line in enumerate(lines):
        if _has_ref(line) or _is_named(line):
            result.append(line)
            continue

        depth = indent_level(line)
        for descendant in lines[i + 1:]:
            if indent_level(descendant) <= depth:
                break
            if _has_ref(descendant):
                result.append(line)
                break

    return "\n".join(result)
