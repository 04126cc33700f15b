"""Key bindings as an explicit configuration value.

Each action maps to one or more key tokens (as produced by ``read_key``) plus
the short label shown in the help bar.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class KeyBinding:
    keys: tuple[str, ...]
    help_key: str
    help_text: str


@dataclass(frozen=True)
class KeyBindings:
    up: KeyBinding = field(default_factory=lambda: KeyBinding(("UP", "k"), "↑/k", "move up"))
    down: KeyBinding = field(default_factory=lambda: KeyBinding(("DOWN", "j"), "↓/j", "move down"))
    page_up: KeyBinding = field(default_factory=lambda: KeyBinding(("PAGE_UP", "b"), "pgup/b", "page up"))
    page_down: KeyBinding = field(default_factory=lambda: KeyBinding(("PAGE_DOWN", "f", " "), "pgdn/f", "page down"))
    top: KeyBinding = field(default_factory=lambda: KeyBinding(("HOME", "g"), "g", "top"))
    bottom: KeyBinding = field(default_factory=lambda: KeyBinding(("END", "G"), "G", "bottom"))
    back: KeyBinding = field(default_factory=lambda: KeyBinding(("LEFT", "h"), "←/h", "go out"))
    select: KeyBinding = field(default_factory=lambda: KeyBinding(("RIGHT", "l", "ENTER"), "→/l", "go in"))
    submit: KeyBinding = field(default_factory=lambda: KeyBinding(("ENTER",), "enter", "navigate"))
    search: KeyBinding = field(default_factory=lambda: KeyBinding(("s",), "s", "navigate to owner or reference"))
    help: KeyBinding = field(default_factory=lambda: KeyBinding(("?",), "?", "toggle help"))
    quit: KeyBinding = field(default_factory=lambda: KeyBinding(("q", "ESC", "CTRL_C"), "q", "quit"))
    toggle_time_view: KeyBinding = field(
        default_factory=lambda: KeyBinding(("t",), "t", "toggle time view (absolute / relative)")
    )
    open_browser: KeyBinding = field(default_factory=lambda: KeyBinding(("o",), "o", "open in browser"))


DEFAULT_KEY_BINDINGS = KeyBindings()
