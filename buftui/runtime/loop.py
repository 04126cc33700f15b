"""Single-threaded event loop.

Each iteration renders when dirty, feeds delivered fetch outcomes to the
machine, then polls one key. Commands returned by the machine are executed
here: fetches go to the dispatcher, URLs to the browser.
"""

from __future__ import annotations

import logging
import shutil
import webbrowser
from collections.abc import Callable
from os import terminal_size

from ..input.reader import read_key as default_read_key
from ..navigator.machine import NavigationMachine
from ..navigator.messages import KeyPress, OpenURL, Quit, Resize, StatusMessage
from ..registry.commands import FetchCommand, FetchDispatcher
from ..render import Renderer
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_POLL_MS = 120
ENTER_TOKENS = {"ENTER_CR", "ENTER_LF"}


def normalize_key(key: str) -> str:
    return "ENTER" if key in ENTER_TOKENS else key


def open_in_browser(url: str) -> StatusMessage:
    try:
        opened = webbrowser.open(url)
    except webbrowser.Error as exc:
        logger.warning("cannot open %s: %s", url, exc)
        return StatusMessage(f"could not open browser: {exc}")
    if not opened:
        return StatusMessage(f"could not open browser; visit {url}")
    return StatusMessage(f"opened {url}")


def run_main_loop(
    *,
    machine: NavigationMachine,
    renderer: Renderer,
    terminal: TerminalController,
    dispatcher: FetchDispatcher,
    stdin_fd: int,
    read_key: Callable[[int, int], str] = default_read_key,
    get_terminal_size: Callable[[], terminal_size] = lambda: shutil.get_terminal_size((80, 24)),
    open_url: Callable[[str], StatusMessage] = open_in_browser,
    poll_ms: int = KEY_POLL_MS,
) -> int:
    """Run until the machine asks to quit; returns the process exit code."""

    def execute(command) -> bool:
        """Run one command; returns False when the loop should stop."""
        while command is not None:
            if isinstance(command, Quit):
                return False
            if isinstance(command, FetchCommand):
                dispatcher.dispatch(command)
                return True
            if isinstance(command, OpenURL):
                command = machine.update(open_url(command.url))
                continue
            raise TypeError(f"unsupported command: {command!r}")
        return True

    with terminal.raw_mode():
        term = get_terminal_size()
        machine.update(Resize(term.columns, term.lines))
        running = execute(machine.start())
        dirty = True
        while running:
            term = get_terminal_size()
            if (term.columns, term.lines) != (machine.width, machine.height):
                machine.update(Resize(term.columns, term.lines))
                dirty = True

            if dirty or machine.state.is_loading:
                renderer.render(machine)
                dirty = False

            for outcome in dispatcher.drain():
                dirty = True
                if not execute(machine.update(outcome)):
                    running = False
                    break
            if not running:
                break

            key = read_key(stdin_fd, poll_ms)
            if not key:
                continue
            dirty = True
            running = execute(machine.update(KeyPress(normalize_key(key))))

    return machine.exit_code
