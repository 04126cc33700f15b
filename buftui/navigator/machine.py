"""Navigation state machine.

One ``update`` call consumes one message (key press, resize, status note, or
fetch outcome) and returns at most one command for the runtime to execute.
All navigator state is mutated here, on the event-loop thread only.
"""

from __future__ import annotations

import logging
from typing import Union
from urllib.parse import quote

from ..context import Level, NavigationContext
from ..errors import LocatorSyntaxError, LocatorValidationError, UnsupportedResourceError
from ..input.key_registry import KeyActionTable
from ..reference import DEFAULT_RULES, Locator, ValidationRuleSet, resolve
from ..registry.commands import (
    CommitsLoaded,
    ContentsLoaded,
    DownloadCommitContents,
    FetchCommand,
    FetchFailed,
    FetchOutcome,
    ListCommits,
    ListModules,
    ModulesLoaded,
    ResolveResource,
    ResourceResolved,
)
from ..registry.types import Commit, File, Module, ResourceKind
from ..runtime.config import NavigatorConfig
from .messages import KeyPress, OpenURL, Quit, Resize, StatusMessage
from .states import LEVEL_LOADING_STATES, NavState

logger = logging.getLogger(__name__)

Command = Union[FetchCommand, Quit, OpenURL]
Message = Union[KeyPress, Resize, StatusMessage, FetchOutcome]

# Header, blank separator, help bar, and status rows around the content area.
CHROME_ROWS = 4
DEFAULT_WIDTH = 80
DEFAULT_HEIGHT = 24


class NavigationMachine:
    """Owner → module → commit → file navigator driven by messages."""

    def __init__(
        self,
        config: NavigatorConfig,
        startup_locator: Locator | None = None,
        *,
        rules: ValidationRuleSet = DEFAULT_RULES,
    ) -> None:
        self.config = config
        self.rules = rules
        self.startup_locator = startup_locator
        self.state = NavState.NAVIGATING
        self.context = NavigationContext(remote=config.remote)

        self.modules: list[Module] = []
        self.commits: list[Commit] = []
        self.files: list[File] = []
        self.module_index = 0
        self.commit_index = 0
        self.file_index = 0
        self.file_scroll = 0

        self.input_text = ""
        self.prompt_message = ""
        self.status_message = ""
        self.show_help = False
        self.time_view = config.time_view
        self.error: Exception | None = None
        self.width = DEFAULT_WIDTH
        self.height = DEFAULT_HEIGHT

        self._pending: dict[Level, FetchCommand] = {}
        self._navigate_return_state: NavState | None = None
        self._keys = self._build_key_actions()

    # -- lifecycle ---------------------------------------------------------

    def start(self) -> Command | None:
        """Enter the initial state and return the first command, if any."""
        locator = self.startup_locator
        if locator is None:
            self.state = NavState.NAVIGATING
            return None
        if locator.ref is not None:
            self.context.overwrite(owner=locator.owner, module=locator.module)
            return self._issue(ResolveResource, NavState.LOADING_RESOURCE, locator=locator)
        self.context.overwrite(owner=locator.owner, module=locator.module)
        return self._issue(ListCommits, NavState.LOADING_COMMITS)

    @property
    def exit_code(self) -> int:
        return 1 if self.state is NavState.ERRORED else 0

    @property
    def pending_levels(self) -> frozenset[Level]:
        return frozenset(self._pending)

    @property
    def content_rows(self) -> int:
        """Rows available to tables and the file viewport."""
        return max(1, self.height - CHROME_ROWS)

    @property
    def selected_file(self) -> File | None:
        if 0 <= self.file_index < len(self.files):
            return self.files[self.file_index]
        return None

    def update(self, message: Message) -> Command | None:
        """Apply one message and return the resulting command, if any."""
        if isinstance(message, FetchOutcome):
            return self._handle_outcome(message)
        if isinstance(message, KeyPress):
            return self._handle_key(message.key)
        if isinstance(message, Resize):
            self.width = max(1, message.width)
            self.height = max(1, message.height)
            self._clamp_file_scroll()
            return None
        if isinstance(message, StatusMessage):
            self.status_message = message.text
            return None
        raise TypeError(f"unsupported message: {message!r}")

    # -- fetch outcomes ----------------------------------------------------

    def _issue(self, command_type: type[FetchCommand], state: NavState, **params) -> FetchCommand:
        command = command_type(origin=self.context.snapshot(), **params)
        self._pending[command.level] = command
        self.state = state
        return command

    def _fail(self, error: Exception) -> None:
        logger.warning("navigation failed: %s", error)
        self.error = error
        self.state = NavState.ERRORED
        self._pending.clear()

    def _is_current(self, outcome: FetchOutcome, pending: FetchCommand | None) -> bool:
        command = outcome.command
        level = command.level
        if self.state is not LEVEL_LOADING_STATES[level]:
            return False
        if pending != command:
            return False
        return command.origin.key_for(level) == self.context.snapshot().key_for(level)

    def _handle_outcome(self, outcome: FetchOutcome) -> Command | None:
        command = outcome.command
        pending = self._pending.get(command.level)
        if pending == command:
            del self._pending[command.level]
        if self.state is NavState.ERRORED:
            return None
        if not self._is_current(outcome, pending):
            logger.debug("discarding stale %s for %s", type(outcome).__name__, command.origin)
            return None

        if isinstance(outcome, FetchFailed):
            self._fail(outcome.error)
            return None
        if isinstance(outcome, ResourceResolved):
            return self._on_resource(outcome)
        if isinstance(outcome, ModulesLoaded):
            self.modules = list(outcome.modules)
            self.module_index = _index_of(self.modules, lambda item: item.name == self.context.module)
            self.state = NavState.BROWSING_MODULES
            return None
        if isinstance(outcome, CommitsLoaded):
            self.commits = list(outcome.commits)
            self.commit_index = _index_of(self.commits, lambda item: item.id == self.context.commit_id)
            self.state = NavState.BROWSING_COMMITS
            return None
        if isinstance(outcome, ContentsLoaded):
            self.files = list(outcome.files)
            self.file_index = 0
            self.file_scroll = 0
            self.state = NavState.BROWSING_COMMIT_CONTENTS
            return None
        raise TypeError(f"unsupported fetch outcome: {outcome!r}")

    def _on_resource(self, outcome: ResourceResolved) -> Command | None:
        command = outcome.command
        assert isinstance(command, ResolveResource) and command.locator is not None
        locator = command.locator
        resource = outcome.resource
        if resource.kind is ResourceKind.MODULE:
            self.context.overwrite(owner=locator.owner, module=locator.module)
            return self._issue(ListCommits, NavState.LOADING_COMMITS)
        if resource.kind is ResourceKind.COMMIT:
            commit = resource.value
            assert isinstance(commit, Commit)
            self.context.overwrite(owner=locator.owner, module=locator.module, commit_id=commit.id)
            return self._issue(DownloadCommitContents, NavState.LOADING_COMMIT_CONTENTS)
        self._fail(UnsupportedResourceError(f"cannot handle resource of type {resource.kind.value}"))
        return None

    # -- keys --------------------------------------------------------------

    def _build_key_actions(self) -> KeyActionTable:
        keys = self.config.keys
        return (
            KeyActionTable()
            .bind(keys.up, lambda: self._move(-1))
            .bind(keys.down, lambda: self._move(1))
            .bind(keys.page_up, lambda: self._move(-self.content_rows))
            .bind(keys.page_down, lambda: self._move(self.content_rows))
            .bind(keys.top, lambda: self._move(-(1 << 30)))
            .bind(keys.bottom, lambda: self._move(1 << 30))
            .bind(keys.back, self._go_back)
            .bind(keys.select, self._select)
            .bind(keys.search, self._open_navigate)
            .bind(keys.help, self._toggle_help)
            .bind(keys.toggle_time_view, self._toggle_time_view)
            .bind(keys.open_browser, self._open_browser)
            .bind(keys.quit, Quit)
        )

    def _handle_key(self, key: str) -> Command | None:
        if self.state is NavState.ERRORED:
            return Quit() if key in self.config.keys.quit.keys else None
        if self.state is NavState.NAVIGATING:
            return self._handle_navigating_key(key)
        self.status_message = ""
        return self._keys.dispatch(key)

    def _handle_navigating_key(self, key: str) -> Command | None:
        if key == "CTRL_C":
            return Quit()
        if key == "ESC":
            if self._navigate_return_state is None:
                return Quit()
            self.state = self._navigate_return_state
            self._navigate_return_state = None
            self.prompt_message = ""
            return None
        if key in self.config.keys.submit.keys:
            return self._submit()
        if key == "BACKSPACE":
            self.input_text = self.input_text[:-1]
            self.prompt_message = ""
            return None
        if key == "CTRL_U":
            self.input_text = ""
            self.prompt_message = ""
            return None
        if len(key) == 1 and key.isprintable():
            self.input_text += key
            self.prompt_message = ""
        return None

    def _submit(self) -> Command | None:
        text = self.input_text
        if not text:
            return None
        try:
            remote, locator = resolve(text, self.rules)
        except LocatorSyntaxError:
            return self._submit_owner(text)
        except LocatorValidationError as exc:
            self.prompt_message = str(exc)
            return None
        assert locator is not None
        if remote is not None and remote != self.context.remote:
            self.prompt_message = f"cannot navigate to remote {remote} from a session on {self.context.remote}"
            return None
        self._begin_navigation()
        self.context.overwrite(owner=locator.owner, module=locator.module)
        return self._issue(ResolveResource, NavState.LOADING_RESOURCE, locator=locator)

    def _submit_owner(self, owner: str) -> Command | None:
        error = self.rules.validate_owner(owner)
        if error is not None:
            self.prompt_message = str(error)
            return None
        self._begin_navigation()
        self.context.overwrite(owner=owner)
        return self._issue(ListModules, NavState.LOADING_OWNER_MODULES)

    def _begin_navigation(self) -> None:
        """Leave the prompt for a new search, abandoning every fetch in flight."""
        if self._pending:
            logger.debug("abandoning pending fetches: %s", sorted(level.value for level in self._pending))
        self._pending.clear()
        self._navigate_return_state = None
        self.prompt_message = ""

    def _open_navigate(self) -> Command | None:
        self._navigate_return_state = self.state if self.state.is_browsing else None
        self.state = NavState.NAVIGATING
        self.input_text = ""
        self.prompt_message = ""
        return None

    def _select(self) -> Command | None:
        if self.state is NavState.BROWSING_MODULES:
            if not self.modules or Level.COMMITS in self._pending:
                return None
            module = self.modules[self.module_index]
            self.context.overwrite(owner=self.context.owner, module=module.name)
            return self._issue(ListCommits, NavState.LOADING_COMMITS)
        if self.state is NavState.BROWSING_COMMITS:
            if not self.commits or Level.CONTENTS in self._pending:
                return None
            commit = self.commits[self.commit_index]
            self.context.overwrite(owner=self.context.owner, module=self.context.module, commit_id=commit.id)
            return self._issue(DownloadCommitContents, NavState.LOADING_COMMIT_CONTENTS)
        if self.state is NavState.BROWSING_COMMIT_CONTENTS:
            if not self.files:
                return None
            self.state = NavState.BROWSING_COMMIT_FILE
        return None

    def _go_back(self) -> Command | None:
        """Move one level up, re-fetching that level (there is no cache)."""
        if self.state is NavState.BROWSING_COMMIT_FILE:
            self.state = NavState.BROWSING_COMMIT_CONTENTS
            return None
        if self.state is NavState.BROWSING_COMMIT_CONTENTS:
            if Level.COMMITS in self._pending:
                return None
            # Keep commit_id in the snapshot so the reloaded list reselects it.
            return self._issue(ListCommits, NavState.LOADING_COMMITS)
        if self.state is NavState.BROWSING_COMMITS:
            if Level.MODULES in self._pending:
                return None
            return self._issue(ListModules, NavState.LOADING_OWNER_MODULES)
        if self.state is NavState.BROWSING_MODULES:
            return self._open_navigate()
        return None

    def _move(self, delta: int) -> None:
        if self.state is NavState.BROWSING_MODULES:
            self.module_index = _clamp(self.module_index + delta, len(self.modules))
        elif self.state is NavState.BROWSING_COMMITS:
            self.commit_index = _clamp(self.commit_index + delta, len(self.commits))
        elif self.state is NavState.BROWSING_COMMIT_CONTENTS:
            previous = self.file_index
            self.file_index = _clamp(self.file_index + delta, len(self.files))
            if self.file_index != previous:
                self.file_scroll = 0
        elif self.state is NavState.BROWSING_COMMIT_FILE:
            self.file_scroll += delta
            self._clamp_file_scroll()

    def _clamp_file_scroll(self) -> None:
        selected = self.selected_file
        line_count = len(selected.text.splitlines()) if selected is not None else 0
        max_scroll = max(0, line_count - self.content_rows)
        self.file_scroll = max(0, min(self.file_scroll, max_scroll))

    def _toggle_help(self) -> None:
        if self.state.is_browsing:
            self.show_help = not self.show_help

    def _toggle_time_view(self) -> None:
        if self.state.is_browsing:
            self.time_view = self.time_view.toggled()

    def _open_browser(self) -> Command | None:
        if not self.state.is_browsing:
            return None
        return OpenURL(self.resource_url())

    def resource_url(self) -> str:
        """Web URL of whatever the navigator currently shows."""
        ctx = self.context
        base = f"https://{ctx.remote}/{quote(ctx.owner)}"
        if self.state is NavState.BROWSING_MODULES:
            return base
        base = f"{base}/{quote(ctx.module)}"
        if self.state is NavState.BROWSING_COMMITS or not ctx.commit_id:
            return base
        selected = self.selected_file
        if self.state is NavState.BROWSING_COMMIT_FILE and selected is not None:
            return f"{base}/file/{quote(ctx.commit_id)}:{quote(selected.path)}"
        return f"{base}/docs/{quote(ctx.commit_id)}"


def _clamp(index: int, length: int) -> int:
    if length <= 0:
        return 0
    return max(0, min(index, length - 1))


def _index_of(items: list, predicate) -> int:
    for idx, item in enumerate(items):
        if predicate(item):
            return idx
    return 0
