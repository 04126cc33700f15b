"""Help bar content per navigator state.

Short help lists the keys that do something right now; full help adds the
global actions on a second line. Rendering helpers here are presentation-only.
"""

from __future__ import annotations

from ..input.bindings import KeyBinding, KeyBindings
from ..navigator.machine import NavigationMachine
from ..navigator.states import NavState
from ..ui_theme import UITheme

HELP_SEPARATOR = " • "


def short_help(machine: NavigationMachine) -> list[KeyBinding]:
    keys = machine.config.keys
    state = machine.state
    if state is NavState.NAVIGATING:
        return [keys.submit]
    if state is NavState.BROWSING_MODULES:
        # Already at the top; "back" reopens the prompt.
        bindings = [keys.up, keys.down]
        if machine.modules:
            bindings.append(keys.select)
        bindings.append(keys.toggle_time_view)
    elif state is NavState.BROWSING_COMMITS:
        bindings = [keys.up, keys.down, keys.back]
        if machine.commits:
            bindings.append(keys.select)
        bindings.append(keys.toggle_time_view)
    elif state is NavState.BROWSING_COMMIT_CONTENTS:
        bindings = [keys.up, keys.down, keys.back]
        if machine.files:
            bindings.append(keys.select)
    elif state is NavState.BROWSING_COMMIT_FILE:
        bindings = [keys.up, keys.down, keys.back]
    else:
        return [keys.help, keys.quit]
    bindings.append(keys.help)
    return bindings


def full_help(machine: NavigationMachine) -> list[list[KeyBinding]]:
    keys: KeyBindings = machine.config.keys
    return [
        short_help(machine),
        [keys.search, keys.open_browser, keys.toggle_time_view, keys.help, keys.quit],
    ]


def format_help_line(bindings: list[KeyBinding], theme: UITheme) -> str:
    return f"{theme.help_dim}{HELP_SEPARATOR}{theme.reset}".join(
        f"{theme.help_key}{binding.help_key}{theme.reset} {theme.help_dim}{binding.help_text}{theme.reset}"
        for binding in bindings
    )


def help_lines(machine: NavigationMachine, theme: UITheme) -> list[str]:
    """Styled help rows: one row normally, two when full help is toggled on."""
    if machine.show_help and machine.state.is_browsing:
        return [format_help_line(group, theme) for group in full_help(machine)]
    return [format_help_line(short_help(machine), theme)]
