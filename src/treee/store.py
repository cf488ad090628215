"""The outline store: owns all trees and performs every structural mutation."""

import copy
from collections.abc import Callable
from dataclasses import replace

from loguru import logger

from treee.config import DEFAULT_THEME, MAX_TREES, THEME_KEY, TREES_KEY
from treee.core.tree.codec import decode_trees, encode_trees
from treee.core.tree.navigation import (
    build_breadcrumb,
    extract_subtree,
    find_node_index,
    find_subtree_end,
    truncate_title,
)
from treee.models.node import Node, NodeFilter, StoreSnapshot, Tree
from treee.models.theme import THEMES
from treee.protocols import StorageProtocol


class OutlineStore:
    """In-memory tree collection with write-through persistence.

    Operations never raise on bad input. An out-of-range tree index, an
    unknown node id or an unmet precondition makes the call a no-op, reported
    through the return value (None or False).
    """

    def __init__(self, storage: StorageProtocol) -> None:
        self.storage = storage
        self.trees: list[Tree] = []
        self.active_tree_index = 0
        self.current_filter = NodeFilter.ALL
        self.current_theme = DEFAULT_THEME

        self.load_trees()
        self.load_theme()

    # --- Persistence ---

    def save_trees(self) -> None:
        """Write all trees to storage. Failures are logged, never raised."""
        try:
            self.storage.put(TREES_KEY, encode_trees(self.trees))
        except Exception:
            logger.warning("Failed to save trees, changes are kept in memory only", exc_info=True)

    def load_trees(self) -> None:
        """Replace in-memory trees with the stored ones, or a fresh main tree."""
        trees: list[Tree] = []
        try:
            data = self.storage.get(TREES_KEY)
        except Exception:
            logger.warning("Failed to read stored trees, starting fresh", exc_info=True)
            data = None

        if data is not None:
            try:
                trees = decode_trees(data)
            except ValueError as e:
                logger.warning("Stored trees are unreadable, starting fresh: {}", e)

        if trees and not any(t.is_main for t in trees):
            logger.warning("Stored trees have no main tree, adding an empty one")
            trees.insert(0, Tree.main())

        self.trees = trees or [Tree.main()]
        self.active_tree_index = 0
        logger.debug("Loaded {} tree(s)", len(self.trees))

    def save_theme(self) -> None:
        try:
            self.storage.put(THEME_KEY, self.current_theme.encode("utf-8"))
        except Exception:
            logger.warning("Failed to save theme", exc_info=True)

    def load_theme(self) -> None:
        try:
            data = self.storage.get(THEME_KEY)
            self.current_theme = data.decode("utf-8") if data else DEFAULT_THEME
        except Exception:
            logger.warning("Failed to read stored theme, using default", exc_info=True)
            self.current_theme = DEFAULT_THEME

    # --- Read state ---

    @property
    def active_tree(self) -> Tree:
        return self.trees[self.active_tree_index]

    def snapshot(self) -> StoreSnapshot:
        """Return a deep copy of the current state that callers may keep."""
        return StoreSnapshot(
            trees=tuple(copy.deepcopy(self.trees)),
            active_tree_index=self.active_tree_index,
            current_filter=self.current_filter,
            current_theme=self.current_theme,
        )

    def _tree(self, tree_index: int) -> Tree | None:
        if 0 <= tree_index < len(self.trees):
            return self.trees[tree_index]
        logger.debug("No tree at index {}", tree_index)
        return None

    def find_node(self, node_id: str, tree_index: int) -> Node | None:
        tree = self._tree(tree_index)
        if tree is None:
            return None
        index = find_node_index(tree.nodes, node_id)
        return None if index is None else tree.nodes[index]

    # --- Node operations ---

    def add_node(
        self,
        content: str,
        tree_index: int,
        after_node_id: str | None = None,
        level: int = 0,
    ) -> Node | None:
        """Insert a new node after the anchor's subtree, or at the end.

        The level is taken as given; it is not checked against the anchor.
        """
        tree = self._tree(tree_index)
        if tree is None:
            return None

        node = Node(content=content, level=level)
        anchor = find_node_index(tree.nodes, after_node_id) if after_node_id else None
        if anchor is not None:
            tree.nodes.insert(find_subtree_end(tree.nodes, anchor) + 1, node)
        else:
            tree.nodes.append(node)

        self.save_trees()
        return node

    def delete_node(self, node_id: str, tree_index: int) -> bool:
        """Remove a single node. Its children stay where they are."""
        tree = self._tree(tree_index)
        if tree is None:
            return False

        before = len(tree.nodes)
        tree.nodes[:] = [n for n in tree.nodes if n.id != node_id]
        if len(tree.nodes) == before:
            logger.debug("Node {} not found in tree {}", node_id, tree_index)
            return False

        self.save_trees()
        return True

    def update_node(
        self,
        node_id: str,
        tree_index: int,
        mutator: Callable[[Node], None],
    ) -> bool:
        """Apply ``mutator`` to the node in place and persist."""
        node = self.find_node(node_id, tree_index)
        if node is None:
            return False

        mutator(node)
        self.save_trees()
        return True

    def indent_node(self, node_id: str, tree_index: int) -> bool:
        def indent(node: Node) -> None:
            node.level += 1

        return self.update_node(node_id, tree_index, indent)

    def outdent_node(self, node_id: str, tree_index: int) -> bool:
        def outdent(node: Node) -> None:
            node.level = max(0, node.level - 1)

        return self.update_node(node_id, tree_index, outdent)

    def toggle_task(self, node_id: str, tree_index: int) -> bool:
        """Turn a node into a task or back; completion always resets."""

        def toggle(node: Node) -> None:
            node.is_task = not node.is_task
            node.is_completed = False

        return self.update_node(node_id, tree_index, toggle)

    def toggle_completed(self, node_id: str, tree_index: int) -> bool:
        def toggle(node: Node) -> None:
            node.is_completed = not node.is_completed

        return self.update_node(node_id, tree_index, toggle)

    def set_note(self, node_id: str, tree_index: int, note: str) -> bool:
        def set_(node: Node) -> None:
            node.note = note

        return self.update_node(node_id, tree_index, set_)

    def edit_content(self, node_id: str, tree_index: int, content: str) -> bool:
        """Replace node text. Blank text and branched-out origins are refused."""
        content = content.strip()
        if not content:
            return False
        if self.is_node_branched_out(node_id):
            logger.debug("Node {} is branched out, not editing", node_id)
            return False

        def set_(node: Node) -> None:
            node.content = content

        return self.update_node(node_id, tree_index, set_)

    def suggested_level(self, tree_index: int, selected_node_id: str | None = None) -> int:
        """Return the level the next typed line should get.

        One deeper than the selected node, else the level of the last node.
        """
        tree = self._tree(tree_index)
        if tree is None:
            return 0
        if selected_node_id is not None:
            selected = self.find_node(selected_node_id, tree_index)
            if selected is not None:
                return selected.level + 1
        return tree.nodes[-1].level if tree.nodes else 0

    # --- Branching ---

    def branch_out(self, node_id: str, tree_index: int) -> Tree | None:
        """Copy a node and its subtree into a new tree and make it active.

        The source tree is left untouched.
        """
        source = self._tree(tree_index)
        if source is None:
            return None
        if len(self.trees) >= MAX_TREES:
            logger.debug("Tree limit of {} reached, not branching", MAX_TREES)
            return None
        if self.is_node_branched_out(node_id):
            logger.debug("Node {} is already branched out", node_id)
            return None
        index = find_node_index(source.nodes, node_id)
        if index is None:
            logger.debug("Node {} not found in tree {}", node_id, tree_index)
            return None

        origin = source.nodes[index]
        branch = Tree(
            title=truncate_title(origin.content),
            nodes=extract_subtree(source.nodes, index),
            parent_tree_id=source.id,
            parent_node_id=origin.id,
            breadcrumb=build_breadcrumb(source),
        )
        self.trees.append(branch)
        self.active_tree_index = len(self.trees) - 1
        logger.debug("Branched {!r} into tree {}", branch.title, self.active_tree_index)

        self.save_trees()
        return branch

    def close_tree(self, tree_index: int) -> bool:
        """Splice a branch back over its origin's subtree and drop the branch."""
        branch = self._tree(tree_index)
        if branch is None or not branch.is_branch:
            return False

        parent = next((t for t in self.trees if t.id == branch.parent_tree_id), None)
        if parent is None:
            logger.debug("Parent tree {} of {!r} is gone", branch.parent_tree_id, branch.title)
            return False
        origin_index = find_node_index(parent.nodes, branch.parent_node_id)
        if origin_index is None:
            logger.debug("Origin node {} of {!r} is gone", branch.parent_node_id, branch.title)
            return False

        offset = parent.nodes[origin_index].level
        end = find_subtree_end(parent.nodes, origin_index)
        parent.nodes[origin_index : end + 1] = [
            replace(node, level=node.level + offset) for node in branch.nodes
        ]

        del self.trees[tree_index]
        if self.active_tree_index >= tree_index:
            self.active_tree_index = max(0, self.active_tree_index - 1)
        logger.debug("Closed {!r} back into {!r}", branch.title, parent.title)

        self.save_trees()
        return True

    def is_node_branched_out(self, node_id: str) -> bool:
        return any(t.parent_node_id == node_id for t in self.trees)

    # --- View state ---

    def get_filtered_nodes(self, nodes: list[Node]) -> list[Node]:
        """Project nodes through the current filter, keeping order."""
        if self.current_filter is NodeFilter.TASKS:
            return [n for n in nodes if n.is_task]
        if self.current_filter is NodeFilter.NOTES:
            return [n for n in nodes if n.has_note]
        if self.current_filter is NodeFilter.BRANCHED:
            origins = {t.parent_node_id for t in self.trees if t.parent_node_id is not None}
            return [n for n in nodes if n.id in origins]
        return nodes

    def set_filter(self, node_filter: NodeFilter) -> None:
        self.current_filter = node_filter

    def select_tree(self, tree_index: int) -> bool:
        if self._tree(tree_index) is None:
            return False
        self.active_tree_index = tree_index
        return True

    def select_main_tree(self) -> bool:
        for i, tree in enumerate(self.trees):
            if tree.is_main:
                self.active_tree_index = i
                return True
        return False

    def set_theme(self, name: str) -> bool:
        if name not in THEMES:
            logger.debug("Unknown theme {!r}", name)
            return False
        self.current_theme = name
        self.save_theme()
        return True

    def clear_all(self) -> None:
        """Drop every tree and start over with an empty main tree."""
        self.trees = [Tree.main()]
        self.active_tree_index = 0
        self.save_trees()
