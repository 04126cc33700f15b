"""Startup configuration and persisted JSON preferences.

``NavigatorConfig`` is built once and handed to the navigator and renderer.
Preferences (theme, highlight style, time view) persist in a small JSON file;
all access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

from ..input.bindings import DEFAULT_KEY_BINDINGS, KeyBindings
from ..registry.client import DEFAULT_PAGE_SIZE
from ..registry.transport import DEFAULT_TIMEOUT_SECONDS
from ..timefmt import TimeView, parse_time_view
from ..ui_theme import UITheme, resolve_theme

APP_NAME = "buftui"
CONFIG_FILENAME = "config.json"
DEFAULT_REMOTE = "buf.build"
DEFAULT_STYLE = "algol_nu"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass(frozen=True)
class NavigatorConfig:
    """Immutable session settings shared by the navigator and renderer."""

    remote: str = DEFAULT_REMOTE
    fetch_timeout: float = DEFAULT_TIMEOUT_SECONDS
    page_size: int = DEFAULT_PAGE_SIZE
    keys: KeyBindings = field(default_factory=lambda: DEFAULT_KEY_BINDINGS)
    theme: UITheme = field(default_factory=lambda: resolve_theme(None))
    style: str = DEFAULT_STYLE
    no_color: bool = False
    time_view: TimeView = TimeView.ABSOLUTE
    fullscreen: bool = False


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored so a read-only config dir never breaks a
    session.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def _load_str(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str):
        return None
    stripped = value.strip()
    return stripped if stripped else None


def _save_str(key: str, value: str) -> None:
    stripped = str(value).strip()
    if not stripped:
        return
    config = load_config()
    config[key] = stripped
    save_config(config)


def load_theme_name() -> str | None:
    """Load persisted UI theme name, returning ``None`` when unset/invalid."""
    return _load_str("theme")


def save_theme_name(theme_name: str) -> None:
    _save_str("theme", theme_name)


def load_style_name() -> str | None:
    """Load persisted Pygments style name."""
    return _load_str("style")


def save_style_name(style: str) -> None:
    _save_str("style", style)


def load_time_view() -> TimeView:
    """Return persisted time view, defaulting to absolute timestamps."""
    return parse_time_view(load_config().get("time_view"))


def save_time_view(time_view: TimeView) -> None:
    _save_str("time_view", time_view.value)
