"""Input-layer public API for key decoding and key bindings."""

from .bindings import DEFAULT_KEY_BINDINGS, KeyBinding, KeyBindings
from .key_registry import KeyAction, KeyActionTable
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "DEFAULT_KEY_BINDINGS",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyAction",
    "KeyActionTable",
    "KeyBinding",
    "KeyBindings",
    "read_key",
]
