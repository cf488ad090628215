"""Colour themes for outline views."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Theme:
    """A named colour palette. Colours are hex strings."""

    name: str
    background: str
    text: str
    prompt: str
    border: str
    level_colors: tuple[str, ...]

    def color_for_level(self, level: int) -> str:
        """Return the row colour for a nesting level, cycling past the palette end."""
        return self.level_colors[level % len(self.level_colors)]


THEMES: dict[str, Theme] = {
    "matcha": Theme(
        name="Matcha",
        background="#e9f5e9",
        text="#2e4a2e",
        prompt="#59784a",
        border="#c4d6c4",
        level_colors=("#f0f8f0", "#ddf2dd", "#ccedcc", "#bae8ba", "#a9e3a9"),
    ),
    "latte": Theme(
        name="Latte",
        background="#f5f0e9",
        text="#4a3e2e",
        prompt="#7a6b59",
        border="#d6ccc4",
        level_colors=("#f8f5f0", "#edebdd", "#e3dccc", "#d9cfba", "#cfc2a9"),
    ),
    "ocean": Theme(
        name="Ocean",
        background="#e9f0f5",
        text="#2e3e4a",
        prompt="#596b7a",
        border="#c4ccd6",
        level_colors=("#f0f5f8", "#ddebf2", "#ccddec", "#bacfe8", "#a9c2e3"),
    ),
    "midnight": Theme(
        name="Midnight",
        background="#0f0f24",
        text="#e1e1e1",
        prompt="#8c8c8c",
        border="#2e2e45",
        level_colors=("#1a1a2e", "#24243a", "#2e2e42", "#38384e", "#424256"),
    ),
}
