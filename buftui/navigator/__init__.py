"""Navigation state machine and the messages it consumes and emits."""

from .machine import CHROME_ROWS, NavigationMachine
from .messages import KeyPress, OpenURL, Quit, Resize, StatusMessage
from .states import BROWSING_STATES, LEVEL_LOADING_STATES, LOADING_STATE_LEVELS, NavState

__all__ = [
    "BROWSING_STATES",
    "CHROME_ROWS",
    "KeyPress",
    "LEVEL_LOADING_STATES",
    "LOADING_STATE_LEVELS",
    "NavState",
    "NavigationMachine",
    "OpenURL",
    "Quit",
    "Resize",
    "StatusMessage",
]
