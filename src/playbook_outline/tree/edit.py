"""Immutable editing primitives over canonical node lists.

Every function returns a new list and never mutates the nodes it is given;
branches untouched by an edit may be shared with the input.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from playbook_outline.models.tree import PlaybookNode
from playbook_outline.tree.nodes import as_node, as_nodes
from playbook_outline.utils.ids import new_node_id

NodeList = Sequence[PlaybookNode | dict[str, Any]]

DEFAULT_NEW_NODE_LABEL = "Nuevo ítem"


def build_new_node(label: str = DEFAULT_NEW_NODE_LABEL) -> PlaybookNode:
    """Create a leaf node for client-side insertion."""

    return PlaybookNode(id=new_node_id(), text=label, children=[])


def update_node_text(items: NodeList, node_id: str, new_text: str) -> list[PlaybookNode]:
    """Replace the text of the node ``node_id`` wherever it sits."""

    result: list[PlaybookNode] = []
    for node in as_nodes(items):
        if node.id == node_id:
            result.append(node.model_copy(update={"text": new_text}))
        elif node.children:
            result.append(node.model_copy(update={"children": update_node_text(node.children, node_id, new_text)}))
        else:
            result.append(node)
    return result


def add_child_node(
    items: NodeList, parent_id: str, node: PlaybookNode | dict[str, Any]
) -> list[PlaybookNode]:
    """Append ``node`` to the children of ``parent_id``.

    An unknown parent is a no-op: the result is an equivalent copy.
    """

    child = as_node(node)
    result: list[PlaybookNode] = []
    for item in as_nodes(items):
        if item.id == parent_id:
            result.append(item.model_copy(update={"children": [*item.children, child]}))
        elif item.children:
            result.append(item.model_copy(update={"children": add_child_node(item.children, parent_id, child)}))
        else:
            result.append(item)
    return result


def add_sibling_node(
    items: NodeList, sibling_id: str, node: PlaybookNode | dict[str, Any]
) -> list[PlaybookNode]:
    """Insert ``node`` right after ``sibling_id`` in whichever list holds it.

    An unknown sibling is a no-op: the result is an equivalent copy.
    """

    sibling = as_node(node)
    result: list[PlaybookNode] = []
    for item in as_nodes(items):
        if item.id == sibling_id:
            result.extend((item, sibling))
        elif item.children:
            result.append(item.model_copy(update={"children": add_sibling_node(item.children, sibling_id, sibling)}))
        else:
            result.append(item)
    return result


def delete_node(items: NodeList, node_id: str) -> list[PlaybookNode]:
    """Remove ``node_id`` and its whole subtree from any depth."""

    return [
        item.model_copy(update={"children": delete_node(item.children, node_id)})
        for item in as_nodes(items)
        if item.id != node_id
    ]


def find_node(items: NodeList, node_id: str) -> PlaybookNode | None:
    """Depth-first lookup by id."""

    for item in as_nodes(items):
        if item.id == node_id:
            return item
        found = find_node(item.children, node_id)
        if found is not None:
            return found
    return None


def count_nodes(items: NodeList) -> int:
    """Total number of nodes, at every depth."""

    return sum(1 + count_nodes(item.children) for item in as_nodes(items))
