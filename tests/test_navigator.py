"""Navigation state machine transitions, guards, and stale-result handling."""

from __future__ import annotations

import unittest

from buftui.context import Level
from buftui.errors import FetchFailure, ProtocolError, UnsupportedResourceError
from buftui.navigator import KeyPress, NavigationMachine, NavState, OpenURL, Quit, Resize, StatusMessage
from buftui.reference import Locator
from buftui.registry.commands import (
    CommitsLoaded,
    ContentsLoaded,
    DownloadCommitContents,
    FetchFailed,
    ListCommits,
    ListModules,
    ModulesLoaded,
    ResolveResource,
    ResourceResolved,
)
from buftui.registry.types import Commit, File, Label, Module, ResolvedResource, ResourceKind
from buftui.runtime.config import NavigatorConfig
from buftui.timefmt import TimeView

MODULES = [Module(id="m1", name="petapis"), Module(id="m2", name="weather"), Module(id="m3", name="zoo")]
COMMITS = [Commit(id="c1"), Commit(id="c2"), Commit(id="c9")]
FILES = [File(path="buf.yaml", content=b"version: v2\n"), File(path="pet/v1/pet.proto", content=b"syntax = \"proto3\";\n")]


def _machine(locator: Locator | None = None, **config) -> NavigationMachine:
    return NavigationMachine(NavigatorConfig(**config), locator)


def _type(machine: NavigationMachine, text: str):
    command = None
    for ch in text:
        command = machine.update(KeyPress(ch))
    return command


def _submit(machine: NavigationMachine, text: str):
    _type(machine, text)
    return machine.update(KeyPress("ENTER"))


def _browse_modules(machine: NavigationMachine, owner: str = "acme") -> None:
    command = _submit(machine, owner)
    machine.update(ModulesLoaded(command, list(MODULES)))


class StartTests(unittest.TestCase):
    def test_no_locator_starts_navigating(self) -> None:
        machine = _machine()
        self.assertIsNone(machine.start())
        self.assertIs(machine.state, NavState.NAVIGATING)
        self.assertEqual((machine.context.remote, machine.context.owner), ("buf.build", ""))

    def test_locator_with_ref_resolves_first(self) -> None:
        locator = Locator("acme", "weather", ref="main")
        machine = _machine(locator)
        command = machine.start()

        self.assertIsInstance(command, ResolveResource)
        self.assertEqual(command.locator, locator)
        self.assertIs(machine.state, NavState.LOADING_RESOURCE)
        self.assertEqual((machine.context.owner, machine.context.module), ("acme", "weather"))

    def test_locator_without_ref_lists_commits(self) -> None:
        machine = _machine(Locator("acme", "weather"))
        command = machine.start()

        self.assertIsInstance(command, ListCommits)
        self.assertEqual((command.origin.owner, command.origin.module), ("acme", "weather"))
        self.assertIs(machine.state, NavState.LOADING_COMMITS)


class NavigatePromptTests(unittest.TestCase):
    def test_bare_owner_lists_modules(self) -> None:
        machine = _machine()
        machine.start()
        command = _submit(machine, "acme")

        self.assertIsInstance(command, ListModules)
        self.assertEqual(command.origin.owner, "acme")
        self.assertIs(machine.state, NavState.LOADING_OWNER_MODULES)

        machine.update(ModulesLoaded(command, list(MODULES)))
        self.assertIs(machine.state, NavState.BROWSING_MODULES)
        self.assertEqual(machine.modules, MODULES)

    def test_editing_keys(self) -> None:
        machine = _machine()
        _type(machine, "acmex")
        machine.update(KeyPress("BACKSPACE"))
        self.assertEqual(machine.input_text, "acme")
        machine.update(KeyPress("CTRL_U"))
        self.assertEqual(machine.input_text, "")

    def test_q_is_typed_not_quit(self) -> None:
        machine = _machine()
        self.assertIsNone(machine.update(KeyPress("q")))
        self.assertEqual(machine.input_text, "q")

    def test_empty_submit_is_ignored(self) -> None:
        machine = _machine()
        self.assertIsNone(machine.update(KeyPress("ENTER")))
        self.assertIs(machine.state, NavState.NAVIGATING)

    def test_invalid_locator_is_reported_inline(self) -> None:
        machine = _machine()
        self.assertIsNone(_submit(machine, "acme/a"))
        self.assertIs(machine.state, NavState.NAVIGATING)
        self.assertTrue(machine.prompt_message.startswith("invalid module:"))
        self.assertEqual(machine.pending_levels, frozenset())

    def test_invalid_bare_owner_is_reported_inline(self) -> None:
        machine = _machine()
        self.assertIsNone(_submit(machine, "bad owner"))
        self.assertIs(machine.state, NavState.NAVIGATING)
        self.assertTrue(machine.prompt_message.startswith("invalid owner:"))

    def test_typing_clears_inline_message(self) -> None:
        machine = _machine()
        _submit(machine, "acme/a")
        _type(machine, "b")
        self.assertEqual(machine.prompt_message, "")

    def test_other_remote_is_rejected(self) -> None:
        machine = _machine()
        self.assertIsNone(_submit(machine, "other.example/acme/weather"))
        self.assertIs(machine.state, NavState.NAVIGATING)
        self.assertIn("other.example", machine.prompt_message)

    def test_same_remote_prefix_is_accepted(self) -> None:
        machine = _machine()
        command = _submit(machine, "buf.build/acme/weather")
        self.assertIsInstance(command, ResolveResource)

    def test_escape_without_previous_view_quits(self) -> None:
        machine = _machine()
        self.assertIsInstance(machine.update(KeyPress("ESC")), Quit)
        self.assertIsInstance(machine.update(KeyPress("CTRL_C")), Quit)

    def test_escape_returns_to_browsing_state(self) -> None:
        machine = _machine()
        _browse_modules(machine)
        machine.update(KeyPress("s"))
        self.assertIs(machine.state, NavState.NAVIGATING)
        self.assertEqual(machine.input_text, "")

        self.assertIsNone(machine.update(KeyPress("ESC")))
        self.assertIs(machine.state, NavState.BROWSING_MODULES)


class ResourceResolutionTests(unittest.TestCase):
    def test_module_resource_lists_commits(self) -> None:
        machine = _machine()
        command = _submit(machine, "acme/weather:main")
        follow_up = machine.update(
            ResourceResolved(command, ResolvedResource(ResourceKind.MODULE, Module(id="m2", name="weather")))
        )

        self.assertIsInstance(follow_up, ListCommits)
        self.assertIs(machine.state, NavState.LOADING_COMMITS)

    def test_commit_resource_downloads_contents(self) -> None:
        machine = _machine()
        command = _submit(machine, "acme/weather:c9")
        follow_up = machine.update(ResourceResolved(command, ResolvedResource(ResourceKind.COMMIT, Commit(id="c9"))))

        self.assertIsInstance(follow_up, DownloadCommitContents)
        self.assertEqual(follow_up.origin.commit_id, "c9")
        self.assertEqual(machine.context.commit_id, "c9")
        self.assertIs(machine.state, NavState.LOADING_COMMIT_CONTENTS)

    def test_label_resource_is_fatal(self) -> None:
        machine = _machine()
        command = _submit(machine, "acme/weather:main")
        follow_up = machine.update(
            ResourceResolved(command, ResolvedResource(ResourceKind.LABEL, Label(id="l1", name="main")))
        )

        self.assertIsNone(follow_up)
        self.assertIs(machine.state, NavState.ERRORED)
        self.assertIsInstance(machine.error, UnsupportedResourceError)
        self.assertEqual(machine.exit_code, 1)


class BrowsingTests(unittest.TestCase):
    def test_full_descent_and_back_out(self) -> None:
        machine = _machine()
        _browse_modules(machine)

        machine.update(KeyPress("j"))
        select_module = machine.update(KeyPress("ENTER"))
        self.assertIsInstance(select_module, ListCommits)
        self.assertEqual(select_module.origin.module, "weather")

        machine.update(CommitsLoaded(select_module, list(COMMITS)))
        self.assertIs(machine.state, NavState.BROWSING_COMMITS)
        machine.update(KeyPress("G"))
        select_commit = machine.update(KeyPress("l"))
        self.assertIsInstance(select_commit, DownloadCommitContents)
        self.assertEqual(select_commit.origin.commit_id, "c9")

        machine.update(ContentsLoaded(select_commit, list(FILES)))
        self.assertIs(machine.state, NavState.BROWSING_COMMIT_CONTENTS)
        self.assertIsNone(machine.update(KeyPress("RIGHT")))
        self.assertIs(machine.state, NavState.BROWSING_COMMIT_FILE)

        self.assertIsNone(machine.update(KeyPress("h")))
        self.assertIs(machine.state, NavState.BROWSING_COMMIT_CONTENTS)

        back_to_commits = machine.update(KeyPress("LEFT"))
        self.assertIsInstance(back_to_commits, ListCommits)
        machine.update(CommitsLoaded(back_to_commits, list(COMMITS)))
        self.assertEqual(machine.commit_index, 2)

        back_to_modules = machine.update(KeyPress("h"))
        self.assertIsInstance(back_to_modules, ListModules)
        self.assertEqual(back_to_modules.origin.owner, "acme")
        machine.update(ModulesLoaded(back_to_modules, list(MODULES)))
        self.assertIs(machine.state, NavState.BROWSING_MODULES)
        self.assertEqual(machine.module_index, 1)

        self.assertIsNone(machine.update(KeyPress("h")))
        self.assertIs(machine.state, NavState.NAVIGATING)

    def test_select_on_empty_collections_is_a_no_op(self) -> None:
        machine = _machine()
        command = _submit(machine, "acme")
        machine.update(ModulesLoaded(command, []))
        self.assertIsNone(machine.update(KeyPress("ENTER")))
        self.assertIs(machine.state, NavState.BROWSING_MODULES)

        machine = _machine(Locator("acme", "weather"))
        command = machine.start()
        machine.update(CommitsLoaded(command, []))
        self.assertIsNone(machine.update(KeyPress("ENTER")))
        self.assertIs(machine.state, NavState.BROWSING_COMMITS)

    def test_selection_is_clamped(self) -> None:
        machine = _machine()
        _browse_modules(machine)
        machine.update(KeyPress("k"))
        self.assertEqual(machine.module_index, 0)
        for _ in range(10):
            machine.update(KeyPress("DOWN"))
        self.assertEqual(machine.module_index, len(MODULES) - 1)
        machine.update(KeyPress("g"))
        self.assertEqual(machine.module_index, 0)

    def test_file_viewport_scrolls(self) -> None:
        machine = _machine(Locator("acme", "weather", ref="c1"))
        command = machine.start()
        command = machine.update(ResourceResolved(command, ResolvedResource(ResourceKind.COMMIT, Commit(id="c1"))))
        body = "".join(f"line {n}\n" for n in range(100)).encode()
        machine.update(ContentsLoaded(command, [File(path="big.proto", content=body)]))
        machine.update(KeyPress("ENTER"))
        self.assertIs(machine.state, NavState.BROWSING_COMMIT_FILE)

        machine.update(KeyPress("j"))
        self.assertEqual(machine.file_scroll, 1)
        machine.update(KeyPress("G"))
        self.assertEqual(machine.file_scroll, 100 - machine.content_rows)
        machine.update(KeyPress("g"))
        self.assertEqual(machine.file_scroll, 0)

    def test_help_and_time_view_toggles(self) -> None:
        machine = _machine(time_view=TimeView.ABSOLUTE)
        _browse_modules(machine)

        self.assertIsNone(machine.update(KeyPress("?")))
        self.assertTrue(machine.show_help)
        self.assertIsNone(machine.update(KeyPress("t")))
        self.assertIs(machine.time_view, TimeView.RELATIVE)
        self.assertIs(machine.state, NavState.BROWSING_MODULES)
        self.assertEqual(machine.pending_levels, frozenset())

    def test_quit_keys_while_browsing(self) -> None:
        machine = _machine()
        _browse_modules(machine)
        for key in ("q", "ESC", "CTRL_C"):
            with self.subTest(key=key):
                self.assertIsInstance(machine.update(KeyPress(key)), Quit)

    def test_search_from_loading_state(self) -> None:
        machine = _machine(Locator("acme", "weather"))
        machine.start()
        machine.update(KeyPress("s"))
        self.assertIs(machine.state, NavState.NAVIGATING)
        # Nothing to return to from a loading state.
        self.assertIsInstance(machine.update(KeyPress("ESC")), Quit)

    def test_open_browser_urls(self) -> None:
        machine = _machine()
        _browse_modules(machine)
        self.assertEqual(machine.update(KeyPress("o")), OpenURL("https://buf.build/acme"))

        command = machine.update(KeyPress("ENTER"))
        machine.update(CommitsLoaded(command, list(COMMITS)))
        self.assertEqual(machine.update(KeyPress("o")), OpenURL("https://buf.build/acme/petapis"))

        command = machine.update(KeyPress("ENTER"))
        machine.update(ContentsLoaded(command, list(FILES)))
        self.assertEqual(machine.update(KeyPress("o")), OpenURL("https://buf.build/acme/petapis/docs/c1"))

        machine.update(KeyPress("j"))
        machine.update(KeyPress("ENTER"))
        self.assertEqual(
            machine.update(KeyPress("o")),
            OpenURL("https://buf.build/acme/petapis/file/c1:pet/v1/pet.proto"),
        )

    def test_resize_and_status_messages(self) -> None:
        machine = _machine()
        machine.update(Resize(120, 40))
        self.assertEqual((machine.width, machine.height), (120, 40))
        self.assertEqual(machine.content_rows, 36)
        machine.update(StatusMessage("opened"))
        self.assertEqual(machine.status_message, "opened")


class FailureAndStaleTests(unittest.TestCase):
    def test_failure_enters_errored_and_stops_fetching(self) -> None:
        machine = _machine()
        command = _submit(machine, "acme")
        error = FetchFailure("ListModules: unavailable", code="unavailable")
        self.assertIsNone(machine.update(FetchFailed(command, error)))

        self.assertIs(machine.state, NavState.ERRORED)
        self.assertIs(machine.error, error)
        for key in ("s", "ENTER", "h", "l", "?", "t", "o"):
            with self.subTest(key=key):
                self.assertIsNone(machine.update(KeyPress(key)))
        self.assertIs(machine.state, NavState.ERRORED)
        self.assertIsInstance(machine.update(KeyPress("q")), Quit)
        self.assertEqual(machine.exit_code, 1)

    def test_protocol_error_is_fatal(self) -> None:
        machine = _machine(Locator("acme", "weather"))
        command = machine.start()
        machine.update(FetchFailed(command, ProtocolError("requested 1 commit contents, got 2")))
        self.assertIs(machine.state, NavState.ERRORED)

    def test_superseded_result_is_discarded(self) -> None:
        machine = _machine()
        first = _submit(machine, "acme")
        machine.update(KeyPress("s"))
        second = _submit(machine, "other")

        self.assertIsNone(machine.update(ModulesLoaded(first, [Module(id="x", name="stale")])))
        self.assertIs(machine.state, NavState.LOADING_OWNER_MODULES)
        self.assertEqual(machine.modules, [])

        machine.update(ModulesLoaded(second, list(MODULES)))
        self.assertIs(machine.state, NavState.BROWSING_MODULES)
        self.assertEqual(machine.context.owner, "other")
        self.assertEqual(machine.modules, MODULES)

    def test_superseded_failure_is_not_fatal(self) -> None:
        machine = _machine()
        first = _submit(machine, "acme")
        machine.update(KeyPress("s"))
        _submit(machine, "other")

        machine.update(FetchFailed(first, FetchFailure("late")))
        self.assertIs(machine.state, NavState.LOADING_OWNER_MODULES)
        self.assertIsNone(machine.error)

    def test_result_for_wrong_level_state_is_discarded(self) -> None:
        machine = _machine()
        command = _submit(machine, "acme")
        machine.update(KeyPress("s"))
        self.assertIs(machine.state, NavState.NAVIGATING)

        machine.update(ModulesLoaded(command, list(MODULES)))
        self.assertIs(machine.state, NavState.NAVIGATING)
        self.assertNotIn(Level.MODULES, machine.pending_levels)

    def test_new_search_releases_select_guard_of_abandoned_fetch(self) -> None:
        machine = _machine()
        _browse_modules(machine)
        abandoned = machine.update(KeyPress("ENTER"))
        self.assertIsInstance(abandoned, ListCommits)

        machine.update(KeyPress("s"))
        other = _submit(machine, "other")
        self.assertEqual(machine.pending_levels, frozenset({Level.MODULES}))
        machine.update(ModulesLoaded(other, list(MODULES)))

        machine.update(KeyPress("G"))
        select = machine.update(KeyPress("ENTER"))
        self.assertIsInstance(select, ListCommits)
        self.assertEqual((select.origin.owner, select.origin.module), ("other", "zoo"))
        self.assertIs(machine.state, NavState.LOADING_COMMITS)

        machine.update(CommitsLoaded(abandoned, [Commit(id="stale")]))
        self.assertIs(machine.state, NavState.LOADING_COMMITS)
        self.assertEqual(machine.commits, [])
        machine.update(CommitsLoaded(select, list(COMMITS)))
        self.assertEqual(machine.commits, COMMITS)

    def test_commits_for_previous_module_are_discarded(self) -> None:
        machine = _machine()
        _browse_modules(machine)
        first = machine.update(KeyPress("ENTER"))
        self.assertEqual(first.origin.module, "petapis")

        machine.update(KeyPress("s"))
        resolve_command = _submit(machine, "acme/weather")
        second = machine.update(
            ResourceResolved(resolve_command, ResolvedResource(ResourceKind.MODULE, Module(id="m2", name="weather")))
        )
        self.assertIsInstance(second, ListCommits)
        self.assertIs(machine.state, NavState.LOADING_COMMITS)

        self.assertIsNone(machine.update(CommitsLoaded(first, [Commit(id="petapis-commit")])))
        self.assertIs(machine.state, NavState.LOADING_COMMITS)
        self.assertEqual(machine.commits, [])

        machine.update(CommitsLoaded(second, list(COMMITS)))
        self.assertIs(machine.state, NavState.BROWSING_COMMITS)
        self.assertEqual(machine.context.module, "weather")
        self.assertEqual(machine.commits, COMMITS)

    def test_contents_for_previous_commit_are_discarded(self) -> None:
        machine = _machine(Locator("acme", "weather"))
        list_commits = machine.start()
        machine.update(CommitsLoaded(list_commits, list(COMMITS)))
        first = machine.update(KeyPress("ENTER"))
        self.assertIsInstance(first, DownloadCommitContents)
        self.assertEqual(first.origin.commit_id, "c1")

        machine.update(KeyPress("s"))
        resolve_command = _submit(machine, "acme/weather:c9")
        second = machine.update(ResourceResolved(resolve_command, ResolvedResource(ResourceKind.COMMIT, Commit(id="c9"))))
        self.assertIsInstance(second, DownloadCommitContents)
        self.assertIs(machine.state, NavState.LOADING_COMMIT_CONTENTS)

        self.assertIsNone(machine.update(ContentsLoaded(first, [File(path="old.proto", content=b"")])))
        self.assertIs(machine.state, NavState.LOADING_COMMIT_CONTENTS)
        self.assertEqual(machine.files, [])

        machine.update(ContentsLoaded(second, list(FILES)))
        self.assertIs(machine.state, NavState.BROWSING_COMMIT_CONTENTS)
        self.assertEqual(machine.context.commit_id, "c9")
        self.assertEqual(machine.files, FILES)

    def test_errored_machine_ignores_late_outcomes(self) -> None:
        machine = _machine(Locator("acme", "weather"))
        command = machine.start()
        machine.update(FetchFailed(command, FetchFailure("down")))
        machine.update(CommitsLoaded(command, list(COMMITS)))
        self.assertIs(machine.state, NavState.ERRORED)
        self.assertEqual(machine.commits, [])


if __name__ == "__main__":
    unittest.main()
