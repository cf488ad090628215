"""Tests for markdown rendering of outlines."""

from treee.core.tree.markdown import render_nodes_as_markdown
from treee.models.node import Node


def test_render_indents_by_level() -> None:
    md = render_nodes_as_markdown(
        [Node(content="Trip", level=0), Node(content="Flights", level=1)]
    )
    assert md == "- Trip\n    - Flights\n"


def test_render_task_checkboxes() -> None:
    md = render_nodes_as_markdown(
        [
            Node(content="Book hotel", is_task=True),
            Node(content="Pack", is_task=True, is_completed=True),
        ]
    )
    assert "- [ ] Book hotel" in md
    assert "- [x] Pack" in md


def test_render_notes_can_be_excluded() -> None:
    nodes = [Node(content="Hotel", level=1, note="near the station\ncheck-in 3pm")]
    md = render_nodes_as_markdown(nodes)
    assert "      > near the station\n" in md
    assert "      > check-in 3pm\n" in md
    assert ">" not in render_nodes_as_markdown(nodes, include_notes=False)


def test_render_blank_notes_are_skipped() -> None:
    md = render_nodes_as_markdown([Node(content="Hotel", note="   ")])
    assert md == "- Hotel\n"


def test_render_ids_and_branch_marker() -> None:
    node = Node(id="abc", content="Flights")
    md = render_nodes_as_markdown([node], show_ids=True, branched_ids=frozenset({"abc"}))
    assert md == "- Flights ⫷  (id=abc)\n"
