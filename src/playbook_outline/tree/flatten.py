"""Pre-order linearization of playbook trees.

The cross-phase form (:func:`flatten_playbook_phases`) is the contract used by
task synchronization: rows are keyed by ``(phase_id, item_index)``, so the
traversal order must depend only on sibling order.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from playbook_outline.models.tree import FlattenedRow, FlattenedTaskRow, PlaybookNode, PlaybookPhase
from playbook_outline.tree.nodes import as_nodes


def _join_path(segments: Sequence[int]) -> str:
    return ".".join(str(s) for s in segments)


def _walk(
    rows: list[FlattenedRow],
    *,
    phase_id: int,
    nodes: list[PlaybookNode],
    parent_node_id: str | None,
    path_prefix: list[int],
    depth: int,
) -> None:
    for index, node in enumerate(nodes):
        segments = [*path_prefix, index + 1]
        path = _join_path(segments)
        rows.append(
            FlattenedRow(
                node_id=node.id,
                parent_node_id=parent_node_id,
                depth=depth,
                path=path,
                full_path=f"{phase_id}.{path}",
                order=len(rows),
                text=node.text,
            )
        )
        if node.children:
            _walk(
                rows,
                phase_id=phase_id,
                nodes=node.children,
                parent_node_id=node.id,
                path_prefix=segments,
                depth=depth + 1,
            )


def flatten_phase_nodes(phase_id: int, nodes: Sequence[PlaybookNode | dict[str, Any]]) -> list[FlattenedRow]:
    """Flatten one phase tree in pre-order.

    Args:
        phase_id: Phase id used as the ``full_path`` prefix.
        nodes: Root nodes of the phase.

    Returns:
        Rows with ``order`` 0..n-1, root ``depth`` 1 and 1-based dotted paths.
    """

    rows: list[FlattenedRow] = []
    _walk(
        rows,
        phase_id=phase_id,
        nodes=as_nodes(nodes),
        parent_node_id=None,
        path_prefix=[],
        depth=1,
    )
    return rows


def flatten_playbook_phases(phases: Sequence[PlaybookPhase]) -> list[FlattenedTaskRow]:
    """Flatten every phase and tag rows with their phase.

    ``item_index`` is the row's position within its own phase, so it restarts
    at 0 for each phase.
    """

    rows: list[FlattenedTaskRow] = []
    for phase in phases:
        for item_index, row in enumerate(flatten_phase_nodes(phase.id, phase.items)):
            rows.append(
                FlattenedTaskRow(
                    **row.model_dump(),
                    phase_id=phase.id,
                    phase_title=phase.title,
                    item_index=item_index,
                    position_path=row.full_path,
                )
            )
    return rows


def flatten_items_as_text(nodes: Sequence[PlaybookNode | dict[str, Any]]) -> list[str]:
    """Render a phase tree as ``"{path} {text}"`` lines, e.g. ``"1.2 Validar mercado"``."""

    return [f"{row.path} {row.text}" for row in flatten_phase_nodes(0, nodes)]
