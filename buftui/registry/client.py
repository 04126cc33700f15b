"""Blocking registry operations used by fetch commands.

Each method issues one Connect call, decodes the typed payload, and checks
response cardinality where the request asked for exactly one item.
"""

from __future__ import annotations

import logging
from typing import Protocol

from ..errors import ProtocolError, UnsupportedResourceError
from ..reference import Locator
from .types import Commit, File, Label, Module, ResolvedResource, ResourceKind

logger = logging.getLogger(__name__)

MODULE_SERVICE = "buf.registry.module.v1.ModuleService"
COMMIT_SERVICE = "buf.registry.module.v1.CommitService"
DOWNLOAD_SERVICE = "buf.registry.module.v1.DownloadService"
RESOURCE_SERVICE = "buf.registry.module.v1.ResourceService"

DEFAULT_PAGE_SIZE = 100


class Transport(Protocol):
    remote: str

    def call(self, service: str, method: str, request: dict) -> dict: ...


def _name_ref(owner: str, module: str, ref: str | None = None) -> dict:
    name: dict[str, str] = {"owner": owner, "module": module}
    if ref is not None:
        name["ref"] = ref
    return {"name": name}


def _list_field(payload: dict, key: str) -> list:
    value = payload.get(key, [])
    if not isinstance(value, list):
        raise ProtocolError(f"expected {key!r} to be a list, got {type(value).__name__}")
    return value


class RegistryClient:
    """Typed wrapper around the module, commit, download, and resource services."""

    def __init__(self, transport: Transport, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self.transport = transport
        self.page_size = page_size

    @property
    def remote(self) -> str:
        return self.transport.remote

    def list_modules(self, owner: str) -> list[Module]:
        payload = self.transport.call(
            MODULE_SERVICE,
            "ListModules",
            {"pageSize": self.page_size, "ownerRefs": [{"name": owner}]},
        )
        modules = [Module.from_json(item) for item in _list_field(payload, "modules")]
        logger.debug("listed %d modules for %s", len(modules), owner)
        return modules

    def list_commits(self, owner: str, module: str) -> list[Commit]:
        payload = self.transport.call(
            COMMIT_SERVICE,
            "ListCommits",
            {"pageSize": self.page_size, "resourceRef": _name_ref(owner, module)},
        )
        commits = [Commit.from_json(item) for item in _list_field(payload, "commits")]
        logger.debug("listed %d commits for %s/%s", len(commits), owner, module)
        return commits

    def download_commit_contents(self, owner: str, module: str, ref: str) -> list[File]:
        """Download files for one ref; the remote must return exactly one bundle."""
        payload = self.transport.call(
            DOWNLOAD_SERVICE,
            "Download",
            {"values": [{"resourceRef": _name_ref(owner, module, ref)}]},
        )
        contents = _list_field(payload, "contents")
        if len(contents) != 1:
            raise ProtocolError(f"requested 1 commit contents, got {len(contents)}")
        bundle = contents[0]
        if not isinstance(bundle, dict):
            raise ProtocolError(f"expected content object, got {type(bundle).__name__}")
        return [File.from_json(item) for item in _list_field(bundle, "files")]

    def resolve_resource(self, locator: Locator) -> ResolvedResource:
        """Ask the remote which module, commit, or label ``locator`` names."""
        payload = self.transport.call(
            RESOURCE_SERVICE,
            "GetResources",
            {"resourceRefs": [_name_ref(locator.owner, locator.module, locator.ref)]},
        )
        resources = _list_field(payload, "resources")
        if len(resources) != 1:
            raise ProtocolError(f"requested 1 resource, got {len(resources)}")
        resource = resources[0]
        if not isinstance(resource, dict):
            raise ProtocolError(f"expected resource object, got {type(resource).__name__}")
        if "module" in resource:
            return ResolvedResource(ResourceKind.MODULE, Module.from_json(resource["module"]))
        if "commit" in resource:
            return ResolvedResource(ResourceKind.COMMIT, Commit.from_json(resource["commit"]))
        if "label" in resource:
            return ResolvedResource(ResourceKind.LABEL, Label.from_json(resource["label"]))
        kinds = ", ".join(sorted(resource)) or "<empty>"
        raise UnsupportedResourceError(f"cannot handle resource of type {kinds}")
