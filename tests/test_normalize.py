"""Tests for phase and node normalization."""

from __future__ import annotations

import json

import pytest

from playbook_outline.models.tree import PlaybookNode
from playbook_outline.tree.edit import build_new_node
from playbook_outline.tree.normalize import extract_text, normalize_nodes, normalize_phases, parse_phase_id
from playbook_outline.tree.serialize import dump_phases_json


def _all_ids(nodes: list[PlaybookNode]) -> list[str]:
    ids: list[str] = []
    for node in nodes:
        ids.append(node.id)
        ids.extend(_all_ids(node.children))
    return ids


MESSY_PAYLOAD = [
    {"id": 4, "title": "  Fase A ", "items": ["Uno", "Dos", "", 7]},
    "not a phase",
    {
        "id": "x",
        "items": [
            {"id": "dup", "text": "Padre", "children": [{"id": "dup", "text": "Hijo"}, {}]},
            {"id": "dup", "itemText": "Otro"},
            {"id": "with space!", "items": ["legacy child"]},
            {"children": [], "label": "   "},
        ],
    },
    {"id": 2, "title": "Vacía"},
]


def test_legacy_flat_items_become_leaf_nodes() -> None:
    """It should turn string items into leaves and renumber the phase."""

    phases = normalize_phases([{"id": 4, "title": "Fase A", "items": ["Uno", "Dos"]}])

    assert len(phases) == 1
    assert phases[0].id == 1
    assert phases[0].title == "Fase A"
    assert [n.text for n in phases[0].items] == ["Uno", "Dos"]
    assert all(n.children == [] for n in phases[0].items)
    # Fallback ids use the submitted phase id, not the renumbered one
    assert [n.id for n in phases[0].items] == ["p4-n1", "p4-n2"]


def test_canonical_nested_shape_is_preserved() -> None:
    """It should keep ids, text and nesting of an already canonical tree."""

    payload = [
        {
            "id": 1,
            "title": "Fase 1",
            "items": [{"id": "root", "text": "Padre", "children": [{"id": "child", "text": "Hijo", "children": []}]}],
        }
    ]
    phases = normalize_phases(payload)

    root = phases[0].items[0]
    assert (root.id, root.text) == ("root", "Padre")
    assert [(c.id, c.text) for c in root.children] == [("child", "Hijo")]


def test_legacy_and_canonical_shapes_agree_on_text() -> None:
    """It should produce the same texts and shape for both input conventions."""

    legacy = normalize_phases([{"id": 1, "title": "Fase 1", "items": ["Texto A"]}])
    nested = normalize_phases([{"id": 1, "title": "Fase 1", "items": [{"id": "n1", "text": "Texto A", "children": []}]}])

    assert legacy[0].items[0].text == nested[0].items[0].text == "Texto A"
    assert legacy[0].items[0].children == nested[0].items[0].children == []


def test_item_text_alias_and_object_fallback_text() -> None:
    """It should read legacy itemText and give empty objects a positional text."""

    phases = normalize_phases(
        [{"id": 1, "title": "Fase", "items": [{"id": "n1", "itemText": "Desde itemText"}, {"id": "n2", "children": []}]}]
    )

    assert [n.text for n in phases[0].items] == ["Desde itemText", "Ítem 2"]
    assert [n.id for n in phases[0].items] == ["n1", "n2"]


def test_empty_object_without_text_is_kept_as_placeholder() -> None:
    """It should keep an id-only object as an "Ítem {path}" placeholder."""

    nodes = normalize_nodes([{"id": "n1"}, "x"], phase_id=1)

    assert [(n.id, n.text) for n in nodes] == [("n1", "Ítem 1"), ("p1-n2", "x")]


def test_empty_strings_and_scalars_are_dropped() -> None:
    """It should drop blank strings, numbers, booleans and nulls."""

    nodes = normalize_nodes(["", "   ", 5, None, True, "x"], phase_id=1)

    assert [(n.id, n.text) for n in nodes] == [("p1-n6", "x")]


def test_child_bearing_node_without_text_gets_fallback() -> None:
    """It should synthesize text for nodes that carry children."""

    nodes = normalize_nodes([{"id": "n3", "children": [{"id": "c1", "text": "Y"}]}], phase_id=1)

    assert nodes[0].text == "Ítem 1"
    assert [(c.id, c.text) for c in nodes[0].children] == [("c1", "Y")]


def test_nested_fallback_uses_dotted_path() -> None:
    """It should build fallback text and id from the full sibling path."""

    nodes = normalize_nodes([{"text": "A", "children": [{"text": "B"}, {}]}], phase_id=3)

    child = nodes[0].children[1]
    assert child.text == "Ítem 1.2"
    assert child.id == "p3-n1_2"
    assert nodes[0].children[0].id == "p3-n1_1"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("  plain  ", "plain"),
        ({"text": "  ", "title": "T", "label": "L"}, "T"),
        ({"text": 5, "name": "N"}, "N"),
        ({"item_text": "snake", "item": "later"}, "snake"),
        ({"content": "C", "description": "D"}, "C"),
        ({"description": "D", "name": "N"}, "D"),
        ({"unknown": "value"}, ""),
        (42, ""),
    ],
)
def test_extract_text_field_priority(raw: object, expected: str) -> None:
    """It should try the alias fields in order and skip blanks and non-strings."""

    assert extract_text(raw) == expected


def test_children_alias_and_precedence() -> None:
    """It should prefer `children` and fall back to legacy `items`."""

    nodes = normalize_nodes(
        [
            {"text": "P1", "items": ["a", "b"]},
            {"text": "P2", "children": ["c"], "items": ["a", "b"]},
            {"text": "P3", "children": "oops", "items": ["a"]},
        ],
        phase_id=1,
    )

    assert [c.text for c in nodes[0].children] == ["a", "b"]
    assert [c.text for c in nodes[1].children] == ["c"]
    assert [c.text for c in nodes[2].children] == ["a"]


def test_node_ids_are_sanitized() -> None:
    """It should collapse whitespace and strip unsupported characters from ids."""

    nodes = normalize_nodes(
        [
            {"id": "  my  id!*", "text": "A"},
            {"id": "ok:id_1-2", "text": "B"},
            {"id": 7, "text": "C"},
            {"id": "¡¿?", "text": "D"},
        ],
        phase_id=2,
    )

    assert [n.id for n in nodes] == ["my_id", "ok:id_1-2", "p2-n3", "p2-n4"]


def test_duplicate_ids_get_numeric_suffixes() -> None:
    """It should suffix repeated ids with _2, _3... in traversal order."""

    nodes = normalize_nodes(
        [{"id": "a", "text": "1"}, {"id": "a", "text": "2"}, {"id": "a", "text": "3"}, {"id": "a_2", "text": "4"}],
        phase_id=1,
    )

    assert [n.id for n in nodes] == ["a", "a_2", "a_3", "a_2_2"]


def test_used_ids_are_fresh_per_phase() -> None:
    """It should allow the same node id in different phases."""

    phases = normalize_phases(
        [
            {"title": "F1", "items": [{"id": "a", "text": "x"}]},
            {"title": "F2", "items": [{"id": "a", "text": "y"}]},
        ]
    )

    assert [p.items[0].id for p in phases] == ["a", "a"]


def test_explicit_used_ids_set_is_threaded_through() -> None:
    """It should record every assigned id in the caller's set."""

    used: set[str] = {"taken"}
    nodes = normalize_nodes([{"id": "taken", "text": "A", "children": ["B"]}], phase_id=1, used_ids=used)

    assert nodes[0].id == "taken_2"
    assert used == {"taken", "taken_2", "p1-n1_1"}


def test_non_list_inputs_yield_empty_results() -> None:
    """It should never raise on non-array input."""

    assert normalize_phases(None) == []
    assert normalize_phases({"id": 1}) == []
    assert normalize_phases("[]") == []
    assert normalize_nodes({"text": "x"}, phase_id=1) == []
    phases = normalize_phases([{"title": "Sin items", "items": "nope"}])
    assert phases[0].items == []


def test_phase_ids_are_sequential_and_titles_defaulted() -> None:
    """It should drop non-objects, renumber 1..N and default missing titles by raw index."""

    phases = normalize_phases(["junk", {"id": 9, "items": ["x"]}, {"id": 9, "title": " T "}, 3, {"id": -1}])

    assert [p.id for p in phases] == [1, 2, 3]
    assert [p.title for p in phases] == ["Ítem principal 2", "T", "Ítem principal 5"]
    assert phases[0].items[0].id == "p9-n1"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (4, 4),
        ("4", 4),
        (" 4 ", 4),
        (4.7, 4),
        ("4th", 4),
        ("+3", 3),
        ("abc", None),
        (0, None),
        (-2, None),
        (True, None),
        (None, None),
        ("", None),
        ("\u0664", None),
        ("\u0664\u0662", None),
        ("7\u0662", 7),
    ],
)
def test_parse_phase_id(raw: object, expected: int | None) -> None:
    """It should parse a leading positive integer like JavaScript parseInt."""

    assert parse_phase_id(raw) == expected


def test_candidate_phase_id_seeds_fallback_node_ids() -> None:
    """It should use a valid client phase id, else the array position, for fallback ids."""

    phases = normalize_phases([{"id": "7", "items": ["x"]}, {"id": 0, "items": ["y"]}])

    assert [p.id for p in phases] == [1, 2]
    assert phases[0].items[0].id == "p7-n1"
    assert phases[1].items[0].id == "p2-n1"


def test_nested_arrays_count_as_object_items() -> None:
    """It should keep a nested array element as a childless placeholder."""

    nodes = normalize_nodes([["ignored"]], phase_id=1)

    assert [(n.id, n.text, n.children) for n in nodes] == [("p1-n1", "Ítem 1", [])]


def test_model_instances_are_accepted() -> None:
    """It should accept nodes built in-process alongside raw JSON."""

    node_a = build_new_node("A")
    node_b = build_new_node("B")
    phases = normalize_phases([{"id": 1, "title": "Fase 1", "items": [node_a, node_b]}])

    assert [(n.id, n.text) for n in phases[0].items] == [(node_a.id, "A"), (node_b.id, "B")]


def test_normalization_is_idempotent() -> None:
    """It should be a fixed point after one pass through serialization."""

    first = normalize_phases(MESSY_PAYLOAD)
    second = normalize_phases(json.loads(dump_phases_json(first)))

    assert [p.model_dump() for p in second] == [p.model_dump() for p in first]


def test_node_ids_are_unique_within_each_phase() -> None:
    """It should never emit duplicate ids inside one phase tree."""

    for phase in normalize_phases(MESSY_PAYLOAD):
        ids = _all_ids(phase.items)
        assert len(ids) == len(set(ids))


def test_messy_payload_shape() -> None:
    """It should keep every usable node of a mixed legacy payload."""

    phases = normalize_phases(MESSY_PAYLOAD)

    assert [p.id for p in phases] == [1, 2, 3]
    assert [n.text for n in phases[0].items] == ["Uno", "Dos"]
    second = phases[1].items
    assert [n.text for n in second] == ["Padre", "Otro", "Ítem 3", "Ítem 4"]
    assert [c.text for c in second[0].children] == ["Hijo", "Ítem 1.2"]
    assert second[2].id == "with_space"
    assert [c.text for c in second[2].children] == ["legacy child"]
    assert phases[2].items == []


def test_array_shaped_phase_keeps_its_slot() -> None:
    """It should turn an array element into an empty phase with fallback title."""

    phases = normalize_phases([[], {"title": "B", "items": ["x"]}, ["ignored"]])

    assert [(p.id, p.title) for p in phases] == [(1, "Ítem principal 1"), (2, "B"), (3, "Ítem principal 3")]
    assert phases[0].items == []
    assert phases[2].items == []
    assert phases[1].items[0].id == "p2-n1"
