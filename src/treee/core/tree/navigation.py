"""Tree navigation: subtree spans, branch titles, breadcrumbs."""

from collections.abc import Sequence
from dataclasses import replace

from treee.config import (
    BREADCRUMB_MAX_SEGMENTS,
    ELLIPSIS,
    MAIN_TREE_TITLE,
    TITLE_MAX_LENGTH,
    TITLE_TRUNCATE_LENGTH,
)
from treee.models.node import Node, Tree


def find_node_index(nodes: Sequence[Node], node_id: str) -> int | None:
    """Return the position of the node with the given id, or None."""
    for i, node in enumerate(nodes):
        if node.id == node_id:
            return i
    return None


def find_subtree_end(nodes: Sequence[Node], index: int) -> int:
    """Return the index of the last descendant of nodes[index].

    Descendants are the contiguous run of following nodes whose level is
    strictly greater than the node's own. Returns ``index`` itself for a leaf.
    """
    if index >= len(nodes):
        return len(nodes) - 1

    root_level = nodes[index].level
    end = index
    for i in range(index + 1, len(nodes)):
        if nodes[i].level <= root_level:
            break
        end = i
    return end


def extract_subtree(nodes: Sequence[Node], index: int) -> list[Node]:
    """Copy nodes[index] and its descendants, shifting levels so the root is at 0.

    Copies keep their ids so the branch can be spliced back later.
    """
    offset = nodes[index].level
    end = find_subtree_end(nodes, index)
    return [replace(node, level=node.level - offset) for node in nodes[index : end + 1]]


def truncate_title(content: str) -> str:
    """Shorten node content for use as a branch title."""
    if len(content) > TITLE_MAX_LENGTH:
        return content[:TITLE_TRUNCATE_LENGTH] + ELLIPSIS
    return content


def build_breadcrumb(parent: Tree) -> list[str]:
    """Return the breadcrumb for a tree branched out of ``parent``.

    The main tree is implied and never listed. Trails longer than the limit
    keep the first entry and the last two.
    """
    crumbs = list(parent.breadcrumb)
    if not parent.is_main:
        crumbs.append(parent.title)

    if len(crumbs) > BREADCRUMB_MAX_SEGMENTS:
        crumbs = [crumbs[0], ELLIPSIS, *crumbs[-2:]]
    return crumbs


def breadcrumb_trail(tree: Tree) -> tuple[str, ...]:
    """Return display segments from the main tree down to ``tree``."""
    if tree.is_main:
        return (MAIN_TREE_TITLE,)
    return (MAIN_TREE_TITLE, *tree.breadcrumb, tree.title)
