"""Structured form of a user-supplied registry path."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Locator:
    """Parsed ``[<remote>/]<owner>/<module>[:<ref>]``.

    ``ref`` is ``None`` when no ``:`` was given, which means the module's
    default label. A present ref may name a commit or a label; which one is
    only known after the remote resolves it.
    """

    owner: str
    module: str
    ref: str | None = None
    remote: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.module}"


def format_locator(locator: Locator) -> str:
    """Render ``locator`` back into locator text."""
    text = locator.full_name
    if locator.remote is not None:
        text = f"{locator.remote}/{text}"
    if locator.ref is not None:
        text = f"{text}:{locator.ref}"
    return text
