"""One-shot fetch commands and their outcome messages.

A command captures its origin context, runs exactly once against a
``RegistryClient``, and yields exactly one outcome. Commands never touch
navigator state; the dispatcher posts outcomes into the event-loop mailbox.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from queue import Empty, Queue
from typing import ClassVar

from ..context import ContextSnapshot, Level
from ..errors import FetchFailure
from ..reference import Locator
from .client import RegistryClient
from .types import Commit, File, Module, ResolvedResource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchOutcome:
    command: FetchCommand


@dataclass(frozen=True)
class ModulesLoaded(FetchOutcome):
    modules: list[Module]


@dataclass(frozen=True)
class CommitsLoaded(FetchOutcome):
    commits: list[Commit]


@dataclass(frozen=True)
class ContentsLoaded(FetchOutcome):
    files: list[File]


@dataclass(frozen=True)
class ResourceResolved(FetchOutcome):
    resource: ResolvedResource


@dataclass(frozen=True)
class FetchFailed(FetchOutcome):
    error: Exception


@dataclass(frozen=True)
class FetchCommand:
    """Base for registry fetches issued by the navigator."""

    origin: ContextSnapshot

    level: ClassVar[Level]

    def execute(self, client: RegistryClient) -> FetchOutcome:
        raise NotImplementedError

    def run(self, client: RegistryClient) -> FetchOutcome:
        """Run once and convert any failure into a ``FetchFailed`` outcome."""
        try:
            return self.execute(client)
        except FetchFailure as exc:
            logger.warning("%s failed: %s", type(self).__name__, exc)
            return FetchFailed(self, exc)
        except Exception as exc:
            logger.exception("%s failed", type(self).__name__)
            return FetchFailed(self, exc)


@dataclass(frozen=True)
class ListModules(FetchCommand):
    level: ClassVar[Level] = Level.MODULES

    def execute(self, client: RegistryClient) -> FetchOutcome:
        return ModulesLoaded(self, client.list_modules(self.origin.owner))


@dataclass(frozen=True)
class ListCommits(FetchCommand):
    level: ClassVar[Level] = Level.COMMITS

    def execute(self, client: RegistryClient) -> FetchOutcome:
        return CommitsLoaded(self, client.list_commits(self.origin.owner, self.origin.module))


@dataclass(frozen=True)
class DownloadCommitContents(FetchCommand):
    level: ClassVar[Level] = Level.CONTENTS

    def execute(self, client: RegistryClient) -> FetchOutcome:
        files = client.download_commit_contents(
            self.origin.owner,
            self.origin.module,
            self.origin.commit_id,
        )
        return ContentsLoaded(self, files)


@dataclass(frozen=True)
class ResolveResource(FetchCommand):
    locator: Locator | None = None
    level: ClassVar[Level] = Level.RESOURCE

    def execute(self, client: RegistryClient) -> FetchOutcome:
        assert self.locator is not None
        return ResourceResolved(self, client.resolve_resource(self.locator))


class FetchDispatcher:
    """Run each command on its own daemon worker and queue the outcome."""

    def __init__(self, client: RegistryClient, mailbox: Queue[FetchOutcome] | None = None) -> None:
        self.client = client
        self.mailbox: Queue[FetchOutcome] = mailbox if mailbox is not None else Queue()
        self._lock = threading.Lock()
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        with self._lock:
            return self._in_flight

    def _worker(self, command: FetchCommand) -> None:
        try:
            outcome = command.run(self.client)
        finally:
            with self._lock:
                self._in_flight -= 1
        self.mailbox.put(outcome)

    def dispatch(self, command: FetchCommand) -> None:
        """Start ``command`` in the background."""
        logger.debug("dispatching %s", command)
        with self._lock:
            self._in_flight += 1
        worker = threading.Thread(
            target=self._worker,
            args=(command,),
            name=f"buftui-fetch-{command.level.value}",
            daemon=True,
        )
        worker.start()

    def drain(self) -> list[FetchOutcome]:
        """Return every outcome delivered so far, in delivery order."""
        out: list[FetchOutcome] = []
        while True:
            try:
                out.append(self.mailbox.get_nowait())
            except Empty:
                break
        return out


__all__ = [
    "CommitsLoaded",
    "ContentsLoaded",
    "DownloadCommitContents",
    "FetchCommand",
    "FetchDispatcher",
    "FetchFailed",
    "FetchOutcome",
    "ListCommits",
    "ListModules",
    "ModulesLoaded",
    "ResolveResource",
    "ResourceResolved",
]
