"""Key-token to action dispatch for one set of ``KeyBindings``."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .bindings import KeyBinding

KeyAction = Callable[[], Any]


class KeyActionTable:
    """Maps every key token of a binding to one action.

    Later bindings win when two bindings share a token.
    """

    def __init__(self) -> None:
        self._actions: dict[str, KeyAction] = {}

    def bind(self, binding: KeyBinding, action: KeyAction) -> KeyActionTable:
        for key in binding.keys:
            self._actions[key] = action
        return self

    def lookup(self, key: str) -> KeyAction | None:
        return self._actions.get(key)

    def dispatch(self, key: str) -> Any:
        """Run the action bound to ``key``; unbound keys return ``None``."""
        action = self._actions.get(key)
        if action is None:
            return None
        return action()
