"""Registry access: Connect transport, typed client, and fetch commands."""

from __future__ import annotations

from .client import RegistryClient
from .commands import (
    CommitsLoaded,
    ContentsLoaded,
    DownloadCommitContents,
    FetchCommand,
    FetchDispatcher,
    FetchFailed,
    FetchOutcome,
    ListCommits,
    ListModules,
    ModulesLoaded,
    ResolveResource,
    ResourceResolved,
)
from .transport import ConnectTransport
from .types import Commit, Digest, File, Label, Module, ResolvedResource, ResourceKind

__all__ = [
    "Commit",
    "CommitsLoaded",
    "ConnectTransport",
    "ContentsLoaded",
    "Digest",
    "DownloadCommitContents",
    "FetchCommand",
    "FetchDispatcher",
    "FetchFailed",
    "FetchOutcome",
    "File",
    "Label",
    "ListCommits",
    "ListModules",
    "Module",
    "ModulesLoaded",
    "RegistryClient",
    "ResolveResource",
    "ResolvedResource",
    "ResourceKind",
    "ResourceResolved",
]
