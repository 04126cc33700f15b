"""Non-fetch messages and runtime commands exchanged with the navigator.

Messages flow into ``NavigationMachine.update``; commands flow out of it.
Fetch outcomes and fetch commands live in ``buftui.registry.commands``.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class KeyPress:
    key: str


@dataclass(frozen=True)
class Resize:
    width: int
    height: int


@dataclass(frozen=True)
class StatusMessage:
    text: str


@dataclass(frozen=True)
class Quit:
    """Stop the event loop."""


@dataclass(frozen=True)
class OpenURL:
    """Open ``url`` in the user's web browser."""

    url: str
