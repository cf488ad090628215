"""Configuration constants for the Tree-E outliner."""

import os
from pathlib import Path

# The reserved tree that always exists and can never be closed.
MAIN_TREE_ID: str = "main"
MAIN_TREE_TITLE: str = "Main Tree"

# Hard cap on concurrently open trees, main included.
MAX_TREES: int = 5

# Branch titles longer than TITLE_MAX_LENGTH are cut to TITLE_TRUNCATE_LENGTH + ELLIPSIS.
TITLE_MAX_LENGTH: int = 20
TITLE_TRUNCATE_LENGTH: int = 17
ELLIPSIS: str = "..."

# Breadcrumbs longer than this collapse to first + ELLIPSIS + last two.
BREADCRUMB_MAX_SEGMENTS: int = 3

# Storage keys.
TREES_KEY: str = "tree-e-trees"
THEME_KEY: str = "tree-e-theme"

DEFAULT_THEME: str = "matcha"

# Spaces per level when rendering outlines as text.
INDENT_WIDTH: int = 4

DATABASE_FILENAME: str = "treee.db"

# Directory with data. First directory which is found is used.
DATA_DIRECTORIES: list[Path] = [
    Path("~/.local/share/treee").expanduser(),
    Path("~/.treee").expanduser(),
    Path("~/.config/treee").expanduser(),
]

DATA_DIR_ENV_VAR: str = "TREEE_DATA_DIR"


def resolve_data_directory() -> Path:
    """Return the data directory: env override, else first existing candidate, else default."""
    override = os.environ.get(DATA_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    for candidate in DATA_DIRECTORIES:
        if candidate.is_dir():
            return candidate
    return DATA_DIRECTORIES[0]
