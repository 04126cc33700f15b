"""UI theme definitions and selection helpers.

Themes are UI-only ANSI palettes (tables, prompt, help, chrome). Syntax
highlighting style for file contents remains a separate setting.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reset: str
    header: str
    table_heading: str
    table_rule: str
    table_selected: str
    prompt: str
    prompt_error: str
    spinner: str
    viewport_border: str
    help_key: str
    help_dim: str
    status: str
    error: str


BUF_BLUE = "\033[38;2;21;31;213m"
BUF_TEAL = "\033[38;2;145;223;251m"

DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    header="\033[1m",
    table_heading="\033[1m",
    table_rule=BUF_BLUE,
    table_selected="\033[38;2;145;223;251;48;2;21;31;213m",
    prompt="\033[38;2;21;31;213;48;2;145;223;251m",
    prompt_error="\033[38;5;203m",
    spinner="\033[38;5;69m",
    viewport_border=BUF_BLUE,
    help_key="\033[38;5;250m",
    help_dim="\033[2;38;5;245m",
    status="\033[7m",
    error="\033[1;38;5;203m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    header="\033[1;38;5;45m",
    table_heading="\033[1;38;5;117m",
    table_rule="\033[2;38;5;31m",
    table_selected="\033[1;38;5;16;48;5;45m",
    prompt="\033[1;38;5;45m",
    prompt_error="\033[38;5;215m",
    spinner="\033[38;5;39m",
    viewport_border="\033[38;5;39m",
    help_key="\033[38;5;153m",
    help_dim="\033[2;38;5;110m",
    status="\033[7m",
    error="\033[1;38;5;215m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    header="",
    table_heading="",
    table_rule="",
    table_selected="",
    prompt="",
    prompt_error="",
    spinner="",
    viewport_border="",
    help_key="",
    help_dim="",
    status="",
    error="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "UITheme",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
