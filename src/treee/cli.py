"""CLI for the Tree-E outliner."""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Annotated, NoReturn

import typer
from loguru import logger

from treee.config import DATABASE_FILENAME, MAX_TREES, resolve_data_directory
from treee.core.tree.codec import node_to_dict, tree_to_dict
from treee.core.tree.markdown import render_nodes_as_markdown
from treee.core.tree.navigation import breadcrumb_trail
from treee.logging_config import configure_logging
from treee.models.node import NodeFilter
from treee.models.theme import THEMES
from treee.storage import SqliteStorage
from treee.store import OutlineStore

app = typer.Typer(help="Tree-E: a small outliner with tasks, notes and branches.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Directory holding the outline database"),
]
TreeOption = Annotated[int, typer.Option("--tree", "-t", help="Tree index (0 = main tree)")]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Also write debug logs to this file"),
    ] = None,
) -> None:
    configure_logging(verbose=verbose, log_file=log_file)


@contextmanager
def _open_store(data_dir: Path | None) -> Iterator[OutlineStore]:
    """Open the outline database in ``data_dir`` (created on first use)."""
    dst = data_dir or resolve_data_directory()
    with SqliteStorage(dst / DATABASE_FILENAME) as storage:
        yield OutlineStore(storage)


def _select_tree(store: OutlineStore, tree: int) -> None:
    if not store.select_tree(tree):
        logger.error("No tree at index {} ({} open)", tree, len(store.trees))
        raise typer.Exit(1)


def _resolve_node_id(store: OutlineStore, tree: int, node: str) -> str:
    """Resolve a full node id or a unique id prefix within a tree."""
    _select_tree(store, tree)
    matches = [n.id for n in store.active_tree.nodes if n.id.startswith(node)]
    if node in matches:
        return node
    if len(matches) == 1:
        return matches[0]
    if not matches:
        logger.error("Node '{}' not found in tree {}", node, tree)
    else:
        logger.error("Node prefix '{}' is ambiguous ({} matches)", node, len(matches))
    raise typer.Exit(1)


def _fail(message: str) -> NoReturn:
    logger.error(message)
    raise typer.Exit(1)


@app.command()
def add(
    content: str = typer.Argument(..., help="Text of the new line"),
    after: Annotated[
        str | None,
        typer.Option("--after", "-a", help="Insert after this node and its children"),
    ] = None,
    level: Annotated[
        int | None,
        typer.Option("--level", "-l", min=0, help="Indentation level (default: follows --after)"),
    ] = None,
    tree: TreeOption = 0,
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """Add a line to a tree."""
    text = content.strip()
    if not text:
        _fail("Refusing to add an empty line.")

    with _open_store(data_dir) as store:
        after_id = _resolve_node_id(store, tree, after) if after else None
        if level is None:
            level = store.suggested_level(tree, after_id)
        node = store.add_node(text, tree, after_node_id=after_id, level=level)
        if node is None:
            _fail(f"No tree at index {tree}")

        if output_json:
            typer.echo(json.dumps(node_to_dict(node), indent=2))
        else:
            typer.echo(f"Added {node.id} at level {node.level}")


@app.command()
def show(
    tree: TreeOption = 0,
    node_filter: Annotated[
        NodeFilter,
        typer.Option("--filter", "-f", help="Which nodes to show"),
    ] = NodeFilter.ALL,
    notes: bool = typer.Option(True, "--notes/--no-notes", help="Include node notes"),
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """Show a tree as an indented outline."""
    with _open_store(data_dir) as store:
        _select_tree(store, tree)
        store.set_filter(node_filter)
        current = store.active_tree
        nodes = store.get_filtered_nodes(current.nodes)

        if output_json:
            data = tree_to_dict(current)
            data["nodes"] = [
                {**node_to_dict(n), "branched": store.is_node_branched_out(n.id)} for n in nodes
            ]
            data["filter"] = node_filter.value
            typer.echo(json.dumps(data, indent=2))
            return

        typer.echo(" / ".join(breadcrumb_trail(current)))
        if node_filter is not NodeFilter.ALL:
            typer.echo(f"{node_filter.icon} {node_filter.label}")
        typer.echo()
        if not nodes:
            typer.echo("  (empty)")
            return
        branched = frozenset(n.id for n in nodes if store.is_node_branched_out(n.id))
        typer.echo(
            render_nodes_as_markdown(
                nodes, include_notes=notes, show_ids=True, branched_ids=branched
            ),
            nl=False,
        )


@app.command()
def trees(
    data_dir: DataDirOption = None,
    output_json: JsonOption = False,
) -> None:
    """List open trees."""
    with _open_store(data_dir) as store:
        if output_json:
            data = {
                "count": len(store.trees),
                "max": MAX_TREES,
                "trees": [
                    {"index": i, **tree_to_dict(t)} for i, t in enumerate(store.trees)
                ],
            }
            typer.echo(json.dumps(data, indent=2))
            return

        typer.echo(f"{len(store.trees)}/{MAX_TREES} trees:\n")
        for i, t in enumerate(store.trees):
            trail = " / ".join(breadcrumb_trail(t))
            typer.echo(f"  [{i}] {trail} - {len(t.nodes)} nodes  [id={t.id}]")


@app.command()
def edit(
    node: str = typer.Argument(..., help="Node id or unique prefix"),
    content: str = typer.Argument(..., help="New text"),
    tree: TreeOption = 0,
    data_dir: DataDirOption = None,
) -> None:
    """Replace the text of a line."""
    with _open_store(data_dir) as store:
        node_id = _resolve_node_id(store, tree, node)
        if store.is_node_branched_out(node_id):
            _fail("This line is branched out; close its branch before editing it.")
        if not store.edit_content(node_id, tree, content):
            _fail("Refusing to set empty text.")
        typer.echo(f"Edited {node_id}")


@app.command()
def delete(
    node: str = typer.Argument(..., help="Node id or unique prefix"),
    tree: TreeOption = 0,
    data_dir: DataDirOption = None,
) -> None:
    """Delete a single line. Its children are kept."""
    with _open_store(data_dir) as store:
        node_id = _resolve_node_id(store, tree, node)
        store.delete_node(node_id, tree)
        typer.echo(f"Deleted {node_id}")


@app.command()
def task(
    node: str = typer.Argument(..., help="Node id or unique prefix"),
    tree: TreeOption = 0,
    data_dir: DataDirOption = None,
) -> None:
    """Toggle whether a line is a task."""
    with _open_store(data_dir) as store:
        node_id = _resolve_node_id(store, tree, node)
        store.toggle_task(node_id, tree)
        updated = store.find_node(node_id, tree)
        state = "is now a task" if updated and updated.is_task else "is no longer a task"
        typer.echo(f"{node_id} {state}")


@app.command()
def done(
    node: str = typer.Argument(..., help="Node id or unique prefix"),
    tree: TreeOption = 0,
    data_dir: DataDirOption = None,
) -> None:
    """Toggle completion of a task."""
    with _open_store(data_dir) as store:
        node_id = _resolve_node_id(store, tree, node)
        found = store.find_node(node_id, tree)
        if found is None or not found.is_task:
            _fail(f"{node_id} is not a task.")
        store.toggle_completed(node_id, tree)
        updated = store.find_node(node_id, tree)
        state = "completed" if updated and updated.is_completed else "open"
        typer.echo(f"{node_id} is {state}")


@app.command()
def note(
    node: str = typer.Argument(..., help="Node id or unique prefix"),
    text: str = typer.Argument("", help="Note text (empty clears the note)"),
    tree: TreeOption = 0,
    data_dir: DataDirOption = None,
) -> None:
    """Set or clear the note on a line."""
    with _open_store(data_dir) as store:
        node_id = _resolve_node_id(store, tree, node)
        store.set_note(node_id, tree, text)
        typer.echo(f"Updated note on {node_id}")


@app.command()
def indent(
    node: str = typer.Argument(..., help="Node id or unique prefix"),
    tree: TreeOption = 0,
    data_dir: DataDirOption = None,
) -> None:
    """Indent a line one level."""
    with _open_store(data_dir) as store:
        node_id = _resolve_node_id(store, tree, node)
        store.indent_node(node_id, tree)
        typer.echo(f"Indented {node_id}")


@app.command()
def outdent(
    node: str = typer.Argument(..., help="Node id or unique prefix"),
    tree: TreeOption = 0,
    data_dir: DataDirOption = None,
) -> None:
    """Outdent a line one level."""
    with _open_store(data_dir) as store:
        node_id = _resolve_node_id(store, tree, node)
        store.outdent_node(node_id, tree)
        typer.echo(f"Outdented {node_id}")


@app.command()
def branch(
    node: str = typer.Argument(..., help="Node id or unique prefix"),
    tree: TreeOption = 0,
    data_dir: DataDirOption = None,
) -> None:
    """Branch a line and its children out into a new tree."""
    with _open_store(data_dir) as store:
        node_id = _resolve_node_id(store, tree, node)
        if store.is_node_branched_out(node_id):
            _fail(f"{node_id} is already branched out.")
        if len(store.trees) >= MAX_TREES:
            _fail(f"Tree limit reached ({MAX_TREES}); close a branch first.")
        new_tree = store.branch_out(node_id, tree)
        if new_tree is None:
            _fail(f"Could not branch out {node_id}")
        typer.echo(f"Branched '{new_tree.title}' into tree {store.active_tree_index}")


@app.command()
def close(
    tree: int = typer.Argument(..., help="Index of the branch to close"),
    data_dir: DataDirOption = None,
) -> None:
    """Merge a branch back into its parent tree and close it."""
    with _open_store(data_dir) as store:
        _select_tree(store, tree)
        title = store.active_tree.title
        if not store.close_tree(tree):
            _fail(f"Tree {tree} ('{title}') cannot be closed.")
        typer.echo(f"Closed '{title}'")


@app.command()
def theme(
    name: str | None = typer.Argument(None, help="Theme to switch to"),
    data_dir: DataDirOption = None,
) -> None:
    """Show or change the colour theme."""
    with _open_store(data_dir) as store:
        if name is None:
            for key, t in THEMES.items():
                marker = "*" if key == store.current_theme else " "
                typer.echo(f" {marker} {key} ({t.name})")
            return
        if not store.set_theme(name):
            _fail(f"Unknown theme '{name}'. Choose from: {', '.join(THEMES)}")
        typer.echo(f"Theme set to {name}")


@app.command()
def clear(
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    data_dir: DataDirOption = None,
) -> None:
    """Delete every tree and start over."""
    if not yes:
        typer.confirm("Delete all trees?", abort=True)
    with _open_store(data_dir) as store:
        store.clear_all()
        typer.echo("Cleared all trees.")
