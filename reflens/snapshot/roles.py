"""ARIA role groups used to decide which snapshot lines get a ref."""

from __future__ import annotations

# Roles an agent acts on directly; always addressable.
INTERACTIVE_ROLES = frozenset({
    "button", "link", "textbox", "checkbox", "radio", "combobox", "listbox",
    "menuitem", "menuitemcheckbox", "menuitemradio", "option", "searchbox",
    "slider", "spinbutton", "switch", "tab", "treeitem",
})

# Roles worth addressing only when they carry an accessible name.
CONTENT_ROLES = frozenset({
    "heading", "cell", "gridcell", "columnheader", "rowheader",
    "listitem", "article", "region", "main", "navigation",
})

# Pure containers; never addressable.
STRUCTURAL_ROLES = frozenset({
    "generic", "group", "list", "table", "row", "rowgroup", "grid", "treegrid",
    "menu", "menubar", "toolbar", "tablist", "tree", "directory", "document",
    "application", "presentation", "none",
})


def is_addressable(role: str, name: str | None) -> bool:
    return role in INTERACTIVE_ROLES or (role in CONTENT_ROLES and bool(name))
