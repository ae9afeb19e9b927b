"""Normalization of raw playbook JSON into the canonical tree.

Input may come from storage rows written under older schemas or from loosely
validated client edits, so nothing here raises: unusable entries are dropped
and missing fields are defaulted.

Two input shapes normalize to the same canonical form::

    [{"id": 1, "title": "Fase 1", "items": ["Texto A", "Texto B"]}]
    [{"id": 1, "title": "Fase 1", "items": [{"id": "n1", "text": "Texto A", "children": []}]}]
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from typing import Any

from pydantic import BaseModel

from playbook_outline.logging import get_logger
from playbook_outline.models.tree import PlaybookNode, PlaybookPhase
from playbook_outline.utils.ids import fallback_node_id, make_unique_node_id, sanitize_node_id

logger = get_logger(__name__)

FALLBACK_ITEM_TEXT = "Ítem {path}"
FALLBACK_PHASE_TITLE = "Ítem principal {index}"

TEXT_FIELDS: tuple[str, ...] = (
    "text",
    "itemText",
    "item_text",
    "title",
    "item",
    "label",
    "content",
    "description",
    "name",
)

# ASCII only, like JavaScript parseInt
_LEADING_INT_RE = re.compile(r"^\s*([+-]?[0-9]+)", re.ASCII)


def clean_text(raw: Any) -> str:
    """Trimmed string value, or ``""`` for anything that is not a string."""

    if not isinstance(raw, str):
        return ""
    return raw.strip()


def _field_extractor(name: str) -> Callable[[Any], str]:
    def extract(raw: Any) -> str:
        if not isinstance(raw, dict):
            return ""
        return clean_text(raw.get(name))

    extract.__name__ = f"extract_{name}"
    return extract


# Tried in order; the first non-empty value wins.
TEXT_EXTRACTORS: tuple[Callable[[Any], str], ...] = tuple(_field_extractor(name) for name in TEXT_FIELDS)


def extract_text(raw: Any) -> str:
    """Pull the display text out of a raw item.

    Plain strings are their own text. Objects are probed with
    :data:`TEXT_EXTRACTORS`.
    """

    if isinstance(raw, str):
        return raw.strip()
    for extractor in TEXT_EXTRACTORS:
        value = extractor(raw)
        if value:
            return value
    return ""


def extract_children(raw: Any) -> list[Any]:
    """Raw child list from ``children``, falling back to the legacy ``items`` key."""

    if not isinstance(raw, dict):
        return []
    children = raw.get("children")
    if isinstance(children, list):
        return children
    items = raw.get("items")
    if isinstance(items, list):
        return items
    return []


def _as_raw(value: Any) -> Any:
    # Models built in-process (e.g. by build_new_node) are accepted as their JSON form
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def _is_object_like(raw: Any) -> bool:
    # JSON arrays count as objects here; the stored data was produced by a
    # runtime where arrays are objects.
    return isinstance(raw, (dict, list))


def normalize_nodes(
    raw_items: Any,
    *,
    phase_id: int,
    path_prefix: Sequence[int] = (),
    used_ids: set[str] | None = None,
) -> list[PlaybookNode]:
    """Convert a raw items array into canonical nodes.

    Args:
        raw_items: Expected to be a list; any other value yields ``[]``.
        phase_id: Phase id used in fallback node ids.
        path_prefix: 1-based sibling indices of the ancestors.
        used_ids: Ids already taken in this phase tree. A fresh set is created
            when omitted; it is updated in place and shared with the recursion.

    Returns:
        Canonical nodes with unique ids and non-empty text.
    """

    if used_ids is None:
        used_ids = set()
    if not isinstance(raw_items, list):
        return []

    nodes: list[PlaybookNode] = []
    for index, raw in enumerate(map(_as_raw, raw_items)):
        path_segments = [*path_prefix, index + 1]
        text = extract_text(raw)
        children = normalize_nodes(
            extract_children(raw),
            phase_id=phase_id,
            path_prefix=path_segments,
            used_ids=used_ids,
        )

        if not text:
            if not (_is_object_like(raw) or children):
                logger.debug("Dropping empty item at %s", ".".join(map(str, path_segments)))
                continue
            text = FALLBACK_ITEM_TEXT.format(path=".".join(str(s) for s in path_segments))

        raw_id = raw.get("id") if isinstance(raw, dict) else None
        preferred_id = sanitize_node_id(raw_id) or fallback_node_id(phase_id, path_segments)
        node_id = make_unique_node_id(preferred_id, used_ids)
        if node_id != preferred_id:
            logger.debug("Node id %r already used, renamed to %r", preferred_id, node_id)

        nodes.append(PlaybookNode(id=node_id, text=text, children=children))

    return nodes


def parse_phase_id(raw: Any) -> int | None:
    """Leading-integer parse of a client phase id.

    ``4``, ``"4"``, ``" 4 "``, ``4.7`` and ``"4th"`` all give 4. Returns ``None``
    unless the result is a positive integer.
    """

    if raw is None or isinstance(raw, bool):
        return None
    m = _LEADING_INT_RE.match(str(raw))
    if not m:
        return None
    value = int(m.group(1))
    return value if value > 0 else None


def normalize_phases(payload: Any) -> list[PlaybookPhase]:
    """Convert a raw phases array into canonical, sequentially numbered phases.

    Client phase ids only seed fallback node ids; output ids are always
    ``1..N`` in array order.
    """

    if not isinstance(payload, list):
        return []

    phases: list[PlaybookPhase] = []
    for index, raw in enumerate(map(_as_raw, payload)):
        if not _is_object_like(raw):
            continue
        # An array-shaped phase keeps its slot with fallback id, title and no items
        fields = raw if isinstance(raw, dict) else {}
        candidate_id = parse_phase_id(fields.get("id")) or index + 1
        title = clean_text(fields.get("title")) or FALLBACK_PHASE_TITLE.format(index=index + 1)
        items = normalize_nodes(fields.get("items"), phase_id=candidate_id, used_ids=set())
        phases.append(PlaybookPhase(id=candidate_id, title=title, items=items))

    return [phase.model_copy(update={"id": position}) for position, phase in enumerate(phases, start=1)]
