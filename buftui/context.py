"""Navigation context and level identifiers.

The mutable ``NavigationContext`` is owned by the navigator; fetch commands
carry an immutable ``ContextSnapshot`` of it so late results can be matched
against whatever the navigator is looking at when they arrive.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Level(Enum):
    """Navigation depth a fetch populates."""

    RESOURCE = "resource"
    MODULES = "modules"
    COMMITS = "commits"
    CONTENTS = "contents"


@dataclass(frozen=True)
class ContextSnapshot:
    remote: str
    owner: str = ""
    module: str = ""
    commit_id: str = ""

    def key_for(self, level: Level) -> tuple[str, ...]:
        """Return the fields that identify a fetch at ``level``."""
        if level is Level.MODULES:
            return (self.remote, self.owner)
        if level is Level.CONTENTS:
            return (self.remote, self.owner, self.module, self.commit_id)
        return (self.remote, self.owner, self.module)


@dataclass
class NavigationContext:
    """Where the navigator currently is: remote, owner, module, commit."""

    remote: str
    owner: str = ""
    module: str = ""
    commit_id: str = ""

    def snapshot(self) -> ContextSnapshot:
        return ContextSnapshot(
            remote=self.remote,
            owner=self.owner,
            module=self.module,
            commit_id=self.commit_id,
        )

    def overwrite(self, *, owner: str, module: str = "", commit_id: str = "") -> None:
        """Replace owner/module/commit wholesale; fields are never merged."""
        self.owner = owner
        self.module = module
        self.commit_id = commit_id
