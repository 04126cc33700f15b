"""Navigator states and the level each loading state populates."""

from __future__ import annotations

from enum import Enum

from ..context import Level


class NavState(Enum):
    NAVIGATING = "navigating"
    LOADING_RESOURCE = "loading_resource"
    LOADING_OWNER_MODULES = "loading_owner_modules"
    BROWSING_MODULES = "browsing_modules"
    LOADING_COMMITS = "loading_commits"
    BROWSING_COMMITS = "browsing_commits"
    LOADING_COMMIT_CONTENTS = "loading_commit_contents"
    BROWSING_COMMIT_CONTENTS = "browsing_commit_contents"
    BROWSING_COMMIT_FILE = "browsing_commit_file"
    ERRORED = "errored"

    @property
    def is_loading(self) -> bool:
        return self in LOADING_STATE_LEVELS

    @property
    def is_browsing(self) -> bool:
        return self in BROWSING_STATES


LOADING_STATE_LEVELS: dict[NavState, Level] = {
    NavState.LOADING_RESOURCE: Level.RESOURCE,
    NavState.LOADING_OWNER_MODULES: Level.MODULES,
    NavState.LOADING_COMMITS: Level.COMMITS,
    NavState.LOADING_COMMIT_CONTENTS: Level.CONTENTS,
}

LEVEL_LOADING_STATES: dict[Level, NavState] = {level: state for state, level in LOADING_STATE_LEVELS.items()}

BROWSING_STATES: frozenset[NavState] = frozenset(
    {
        NavState.BROWSING_MODULES,
        NavState.BROWSING_COMMITS,
        NavState.BROWSING_COMMIT_CONTENTS,
        NavState.BROWSING_COMMIT_FILE,
    }
)
