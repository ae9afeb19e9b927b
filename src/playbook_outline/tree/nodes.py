"""Coercion of node-shaped values into ``PlaybookNode``.

Flatten and edit operate on canonical trees, but callers sometimes hand them
plain mappings (e.g. a legacy node stored without ``children``).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from playbook_outline.models.tree import PlaybookNode


def as_node(raw: PlaybookNode | Mapping[str, Any]) -> PlaybookNode:
    if isinstance(raw, PlaybookNode):
        return raw
    return PlaybookNode(
        id=str(raw.get("id") or ""),
        text=str(raw.get("text") or ""),
        children=as_nodes(raw.get("children")),
    )


def as_nodes(items: Any) -> list[PlaybookNode]:
    """Coerce a node list; non-list input and non-node entries are skipped."""

    if not isinstance(items, (list, tuple)):
        return []
    return [as_node(item) for item in items if isinstance(item, (PlaybookNode, Mapping))]
