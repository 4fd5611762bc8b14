"""Color palettes for the status row and the session overview.

These only affect viewer chrome; session content colors come from the
highlight style.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Escape prefixes for each piece of viewer chrome."""

    name: str
    reset: str
    status_bar: str
    status_name: str
    status_dim: str
    status_follow: str
    status_scrolled: str
    overview_item: str
    overview_selected: str


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    status_bar="\033[48;5;236;38;5;252m",
    status_name="\033[1;38;5;81m",
    status_dim="\033[38;5;245m",
    status_follow="\033[38;5;42m",
    status_scrolled="\033[38;5;214m",
    overview_item="\033[38;5;250m",
    overview_selected="\033[7m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    status_bar="\033[48;5;17;38;5;153m",
    status_name="\033[1;38;5;45m",
    status_dim="\033[38;5;110m",
    status_follow="\033[38;5;84m",
    status_scrolled="\033[38;5;215m",
    overview_item="\033[38;5;117m",
    overview_selected="\033[1;48;5;24;38;5;231m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    status_bar="",
    status_name="",
    status_dim="",
    status_follow="",
    status_scrolled="",
    overview_item="",
    overview_selected="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Names accepted by ``--theme``."""
    return tuple(sorted(_THEMES.keys()))


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode.

    Unknown or empty names fall back to the default theme; ``plain`` is only
    reachable through ``no_color``.
    """
    if no_color:
        return PLAIN_THEME
    candidate = str(name or "").strip().lower()
    return _THEMES.get(candidate, DEFAULT_THEME)
