"""Registry credentials from the user's ``~/.netrc``."""

from __future__ import annotations

import logging
import netrc
import os
from dataclasses import dataclass
from pathlib import Path

from ..errors import CredentialError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Credentials:
    username: str
    token: str


class NetrcCredentialSource:
    """Look up ``login``/``password`` for a remote host in a netrc file.

    The file defaults to ``$NETRC`` or ``~/.netrc``, the same lookup ``buf``
    itself performs after ``buf registry login``.
    """

    def __init__(self, path: Path | None = None) -> None:
        if path is None:
            env_path = os.environ.get("NETRC")
            path = Path(env_path) if env_path else Path.home() / ".netrc"
        self.path = path

    def lookup(self, remote: str) -> Credentials:
        if not self.path.exists():
            raise CredentialError(f"no credentials for {remote}: {self.path} does not exist")
        try:
            parsed = netrc.netrc(str(self.path))
        except (netrc.NetrcParseError, OSError) as exc:
            raise CredentialError(f"cannot read {self.path}: {exc}") from exc
        entry = parsed.authenticators(remote)
        if entry is None:
            raise CredentialError(f"no credentials for {remote} in {self.path}")
        login, _account, password = entry
        if not login or not password:
            raise CredentialError(f"incomplete credentials for {remote} in {self.path}")
        logger.debug("loaded credentials for %s from %s", remote, self.path)
        return Credentials(username=login, token=password)


def resolve_credentials(
    remote: str,
    username: str | None,
    token: str | None,
    source: NetrcCredentialSource | None = None,
) -> Credentials:
    """Use explicit flags when both are given, otherwise fall back to netrc."""
    if username is not None or token is not None:
        if not username or not token:
            raise CredentialError("--username and --token must be given together and be non-empty")
        return Credentials(username=username, token=token)
    return (source if source is not None else NetrcCredentialSource()).lookup(remote)
