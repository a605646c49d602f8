"""Line grammar of the indented accessibility outline."""

from __future__ import annotations

import re
from dataclasses import dataclass

# "<indent>- <role>[ "<name>"][<rest>]"
LINE_RE = re.compile(r'^(\s*-\s*)(\w+)(?:\s+"([^"]*)")?(.*)$')

# Engine ref tag, e.g. "[ref=e3]" or "[ref=f1s7]"
REF_RE = re.compile(r"\[ref=([^\]\s]+)\]")

# Bracketed annotations directly after role/name: ' [level=1] [ref=e5]'
_ANNOTATIONS_RE = re.compile(r"^(?:\s*\[[^\]]*\])*")

_INDENT_WIDTH = 2


@dataclass
class OutlineLine:
    prefix: str  # indentation plus the list marker
    role_raw: str  # role exactly as written
    name: str | None
    suffix: str  # trailing annotations, e.g. ' [ref=e3] [checked]:'
    depth: int

    @property
    def role(self) -> str:
        return self.role_raw.lower()

    def render(self, suffix: str | None = None) -> str:
        text = f"{self.prefix}{self.role_raw}"
        if self.name:
            text += f' "{self.name}"'
        return text + (self.suffix if suffix is None else suffix)

    @property
    def head(self) -> str:
        """Prefix, role and name, without the trailing annotations."""
        return self.render("")

    def split_suffix(self) -> tuple[str, str]:
        """Split the suffix into (annotations, rest); rest is page text."""
        annotations = _ANNOTATIONS_RE.match(self.suffix).group(0)
        return annotations, self.suffix[len(annotations):]

    @property
    def ref(self) -> str | None:
        """Ref tag in annotation position; ``[ref=`` inside page text does not count."""
        annotations, _rest = self.split_suffix()
        match = REF_RE.search(annotations)
        return match.group(1) if match else None


def defuse_refs(text: str) -> str:
    """Break up ``[ref=`` in page-controlled text so it cannot pass for a ref."""
    return text.replace("[ref=", "[ref =")


def indent_level(line: str) -> int:
    return (len(line) - len(line.lstrip())) // _INDENT_WIDTH


def parse_line(line: str) -> OutlineLine | None:
    """Parse one outline line; ``None`` when it is not a role line."""
    match = LINE_RE.match(line)
    if not match:
        return None
    prefix, role_raw, name, suffix = match.groups()
    return OutlineLine(
        prefix=prefix,
        role_raw=role_raw,
        name=name,
        suffix=suffix,
        depth=indent_level(line),
    )
