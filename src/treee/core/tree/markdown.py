"""Render outline nodes as markdown."""

import io
from collections.abc import Sequence

from treee.config import INDENT_WIDTH
from treee.models.node import Node


def render_nodes_as_markdown(
    nodes: Sequence[Node],
    *,
    include_notes: bool = True,
    show_ids: bool = False,
    branched_ids: frozenset[str] = frozenset(),
) -> str:
    """Render a node sequence as indented markdown.

    Args:
        nodes: Nodes in tree order (possibly filtered).
        include_notes: Whether to include node notes.
        show_ids: Append each node's id, for commands that take one.
        branched_ids: Ids of nodes that have been branched out; marked with an arrow.

    Returns:
        Markdown string with bullet-list hierarchy.
    """
    out = io.StringIO()
    for node in nodes:
        indent = " " * (INDENT_WIDTH * node.level)

        # Format checkbox
        prefix = "- "
        if node.is_task:
            prefix = "- [x] " if node.is_completed else "- [ ] "

        suffix = ""
        if node.id in branched_ids:
            suffix += " ⫷"
        if show_ids:
            suffix += f"  (id={node.id})"

        lines = node.content.split("\n")
        out.write(f"{indent}{prefix}{lines[0]}{suffix}\n")
        for line in lines[1:]:
            out.write(f"{indent}  {line}\n")

        if include_notes and node.has_note:
            for note_line in node.note.split("\n"):
                out.write(f"{indent}  > {note_line}\n")

    return out.getvalue()
