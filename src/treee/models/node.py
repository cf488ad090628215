"""Domain models for the outline store."""

import uuid
from dataclasses import dataclass, field
from enum import Enum

from treee.config import MAIN_TREE_ID, MAIN_TREE_TITLE


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class Node:
    """A single line in an outline.

    Hierarchy is not stored on the node: a node's children are the contiguous
    run of following nodes in its tree with a strictly greater level.
    """

    content: str
    level: int = 0
    note: str = ""
    is_task: bool = False
    is_completed: bool = False
    id: str = field(default_factory=_new_id)

    @property
    def has_note(self) -> bool:
        return bool(self.note.strip())


@dataclass
class Tree:
    """An ordered outline, either the main tree or a branch of another tree."""

    title: str
    nodes: list[Node] = field(default_factory=list)
    parent_tree_id: str | None = None
    parent_node_id: str | None = None
    breadcrumb: list[str] = field(default_factory=list)
    id: str = field(default_factory=_new_id)

    @property
    def is_main(self) -> bool:
        return self.id == MAIN_TREE_ID

    @property
    def is_branch(self) -> bool:
        return self.parent_tree_id is not None and self.parent_node_id is not None

    @classmethod
    def main(cls) -> "Tree":
        """Return a fresh, empty main tree."""
        return cls(id=MAIN_TREE_ID, title=MAIN_TREE_TITLE)


class NodeFilter(Enum):
    """Which nodes of a tree are shown."""

    ALL = "all"
    TASKS = "tasks"
    NOTES = "notes"
    BRANCHED = "branched"

    @property
    def label(self) -> str:
        return _FILTER_LABELS[self]

    @property
    def icon(self) -> str:
        return _FILTER_ICONS[self]


_FILTER_LABELS: dict[NodeFilter, str] = {
    NodeFilter.ALL: "All Nodes",
    NodeFilter.TASKS: "Tasks",
    NodeFilter.NOTES: "With Notes",
    NodeFilter.BRANCHED: "Branched",
}

_FILTER_ICONS: dict[NodeFilter, str] = {
    NodeFilter.ALL: "◎",
    NodeFilter.TASKS: "□",
    NodeFilter.NOTES: "◊",
    NodeFilter.BRANCHED: "⫷",
}


@dataclass(frozen=True)
class StoreSnapshot:
    """A read-only copy of the store state for rendering."""

    trees: tuple[Tree, ...]
    active_tree_index: int
    current_filter: NodeFilter
    current_theme: str

    @property
    def active_tree(self) -> Tree:
        return self.trees[self.active_tree_index]
