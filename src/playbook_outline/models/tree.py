"""Canonical playbook tree models.

A playbook is an ordered list of phases. Each phase owns a tree of action items
(``PlaybookNode``) built bottom-up from serialized JSON, so there are no
back-references and no cycles.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PlaybookNode(BaseModel):
    """One action item or sub-item."""

    id: str
    text: str
    children: list["PlaybookNode"] = Field(default_factory=list)


class PlaybookPhase(BaseModel):
    """A top-level ordered grouping of action items."""

    id: int = Field(ge=1)
    title: str
    items: list[PlaybookNode] = Field(default_factory=list)


class FlattenedRow(BaseModel):
    """A node addressed by its position inside one phase.

    ``path`` is the dot-joined chain of 1-based sibling indices from the phase
    root and ``full_path`` prefixes it with the phase id. ``order`` is the
    0-based pre-order index.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    node_id: str
    parent_node_id: str | None = None
    depth: int = Field(ge=1)
    path: str
    full_path: str
    order: int = Field(ge=0)
    text: str


class FlattenedTaskRow(FlattenedRow):
    """A flattened row decorated with its phase, as consumed by task sync."""

    phase_id: int = Field(ge=1)
    phase_title: str
    item_index: int = Field(ge=0)
    position_path: str

    @property
    def item_text(self) -> str:
        return self.text

    @property
    def key(self) -> tuple[int, int]:
        """Tracking key: ``(phase_id, item_index)``."""

        return (self.phase_id, self.item_index)
