"""Encode and decode the persisted tree collection as JSON."""

import json
from typing import Any

from treee.models.node import Node, Tree


def node_to_dict(node: Node) -> dict[str, Any]:
    return {
        "id": node.id,
        "content": node.content,
        "level": node.level,
        "note": node.note,
        "isTask": node.is_task,
        "isCompleted": node.is_completed,
    }


def tree_to_dict(tree: Tree) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": tree.id,
        "title": tree.title,
        "nodes": [node_to_dict(n) for n in tree.nodes],
        "breadcrumb": list(tree.breadcrumb),
    }
    if tree.parent_tree_id is not None:
        data["parentTreeId"] = tree.parent_tree_id
    if tree.parent_node_id is not None:
        data["parentNodeId"] = tree.parent_node_id
    return data


def encode_trees(trees: list[Tree]) -> bytes:
    """Serialize trees to a UTF-8 JSON document."""
    return json.dumps([tree_to_dict(t) for t in trees], ensure_ascii=False).encode("utf-8")


def _require(raw: dict[str, Any], key: str, kind: type) -> Any:
    if key not in raw:
        msg = f"Missing field {key!r}"
        raise ValueError(msg)
    value = raw[key]
    # bool is an int subclass; a level of True is not a level.
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        msg = f"Field {key!r} must be {kind.__name__}, got {type(value).__name__}"
        raise ValueError(msg)
    return value


def _optional(raw: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    if raw.get(key) is None:
        return default
    return _require(raw, key, kind)


def _parse_node(raw: Any) -> Node:
    if not isinstance(raw, dict):
        msg = f"Node must be an object, got {type(raw).__name__}"
        raise ValueError(msg)
    return Node(
        id=_require(raw, "id", str),
        content=_require(raw, "content", str),
        level=_require(raw, "level", int),
        note=_optional(raw, "note", str, ""),
        is_task=_optional(raw, "isTask", bool, False),
        is_completed=_optional(raw, "isCompleted", bool, False),
    )


def _parse_tree(raw: Any) -> Tree:
    if not isinstance(raw, dict):
        msg = f"Tree must be an object, got {type(raw).__name__}"
        raise ValueError(msg)
    nodes = _optional(raw, "nodes", list, [])
    breadcrumb = _optional(raw, "breadcrumb", list, [])
    if not all(isinstance(b, str) for b in breadcrumb):
        msg = "Breadcrumb entries must be strings"
        raise ValueError(msg)
    parent_tree_id = _optional(raw, "parentTreeId", str, None)
    parent_node_id = _optional(raw, "parentNodeId", str, None)
    if (parent_tree_id is None) != (parent_node_id is None):
        msg = "parentTreeId and parentNodeId must be given together"
        raise ValueError(msg)
    return Tree(
        id=_require(raw, "id", str),
        title=_require(raw, "title", str),
        nodes=[_parse_node(n) for n in nodes],
        parent_tree_id=parent_tree_id,
        parent_node_id=parent_node_id,
        breadcrumb=list(breadcrumb),
    )


def decode_trees(data: bytes) -> list[Tree]:
    """Parse a JSON document produced by encode_trees.

    Raises:
        ValueError: If the document is not valid JSON or does not match the
            tree schema. UnicodeDecodeError (a ValueError) for bad encodings.
    """
    raw = json.loads(data.decode("utf-8"))
    if not isinstance(raw, list):
        msg = f"Tree collection must be a list, got {type(raw).__name__}"
        raise ValueError(msg)
    return [_parse_tree(t) for t in raw]
