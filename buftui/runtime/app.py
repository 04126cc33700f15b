"""Composition root: wires transport, client, dispatcher, machine, and UI."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass

from ..navigator.machine import NavigationMachine
from ..reference import Locator
from ..registry.client import RegistryClient
from ..registry.commands import FetchDispatcher
from ..registry.transport import ConnectTransport
from ..render import Renderer
from .config import NavigatorConfig, save_time_view
from .credentials import Credentials
from .loop import run_main_loop
from .terminal import TerminalController

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NavigatorResult:
    exit_code: int
    error: Exception | None = None


def run_navigator(
    config: NavigatorConfig,
    credentials: Credentials,
    startup_locator: Locator | None = None,
) -> NavigatorResult:
    """Run an interactive session against ``config.remote`` until the user quits."""
    stdin_fd = sys.stdin.fileno()
    stdout_fd = sys.stdout.fileno()
    logger.info("starting session on %s (locator=%s)", config.remote, startup_locator)

    with ConnectTransport(
        config.remote,
        username=credentials.username,
        token=credentials.token,
        timeout=config.fetch_timeout,
    ) as transport:
        client = RegistryClient(transport, page_size=config.page_size)
        dispatcher = FetchDispatcher(client)
        machine = NavigationMachine(config, startup_locator)
        renderer = Renderer(config, fd=stdout_fd)
        terminal = TerminalController(stdin_fd, stdout_fd, fullscreen=config.fullscreen)
        exit_code = run_main_loop(
            machine=machine,
            renderer=renderer,
            terminal=terminal,
            dispatcher=dispatcher,
            stdin_fd=stdin_fd,
        )
        if dispatcher.in_flight:
            logger.debug("exiting with %d fetches in flight", dispatcher.in_flight)

    if machine.time_view is not config.time_view:
        save_time_view(machine.time_view)
    return NavigatorResult(exit_code=exit_code, error=machine.error)
