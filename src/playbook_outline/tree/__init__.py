"""Outline engine: normalize, flatten and edit playbook trees."""

from __future__ import annotations

from playbook_outline.tree.edit import (
    add_child_node,
    add_sibling_node,
    build_new_node,
    count_nodes,
    delete_node,
    find_node,
    update_node_text,
)
from playbook_outline.tree.flatten import flatten_items_as_text, flatten_phase_nodes, flatten_playbook_phases
from playbook_outline.tree.normalize import normalize_nodes, normalize_phases
from playbook_outline.tree.serialize import dump_phases_json, load_phases_json, phases_to_payload
from playbook_outline.tree.validate import validate_phases_edit

__all__ = [
    "add_child_node",
    "add_sibling_node",
    "build_new_node",
    "count_nodes",
    "delete_node",
    "dump_phases_json",
    "find_node",
    "flatten_items_as_text",
    "flatten_phase_nodes",
    "flatten_playbook_phases",
    "load_phases_json",
    "normalize_nodes",
    "normalize_phases",
    "phases_to_payload",
    "update_node_text",
    "validate_phases_edit",
]
