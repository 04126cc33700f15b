"""Typed registry entities decoded from Connect JSON payloads."""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from ..errors import ProtocolError

_FRACTION_RE = re.compile(r"\.(\d+)")


class ResourceKind(Enum):
    MODULE = "module"
    COMMIT = "commit"
    LABEL = "label"


_VISIBILITY_LABELS = {
    "MODULE_VISIBILITY_PUBLIC": "public",
    "MODULE_VISIBILITY_PRIVATE": "private",
}

_STATE_LABELS = {
    "MODULE_STATE_ACTIVE": "active",
    "MODULE_STATE_DEPRECATED": "deprecated",
}


def parse_timestamp(value: object) -> datetime | None:
    """Parse an RFC 3339 timestamp as emitted by protobuf JSON.

    Fractional seconds are truncated to microseconds. Missing values return
    ``None``; anything else unparseable is a ``ProtocolError``.
    """
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ProtocolError(f"expected timestamp string, got {type(value).__name__}")
    text = value.replace("Z", "+00:00").replace("z", "+00:00")
    text = _FRACTION_RE.sub(lambda match: "." + match.group(1)[:6].ljust(6, "0"), text, count=1)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ProtocolError(f"invalid timestamp {value!r}") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def decode_bytes(value: object) -> bytes:
    """Decode a protobuf JSON ``bytes`` field (standard or URL-safe base64)."""
    if value is None:
        return b""
    if not isinstance(value, str):
        raise ProtocolError(f"expected base64 string, got {type(value).__name__}")
    padded = value + "=" * (-len(value) % 4)
    try:
        if "-" in padded or "_" in padded:
            return base64.urlsafe_b64decode(padded)
        return base64.b64decode(padded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ProtocolError("invalid base64 payload") from exc


def _expect_object(payload: object, what: str) -> dict:
    if not isinstance(payload, dict):
        raise ProtocolError(f"expected {what} object, got {type(payload).__name__}")
    return payload


def _str(payload: dict, key: str) -> str:
    value = payload.get(key, "")
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True)
class Module:
    id: str
    name: str
    owner_id: str = ""
    create_time: datetime | None = None
    update_time: datetime | None = None
    visibility: str = "MODULE_VISIBILITY_UNSPECIFIED"
    state: str = "MODULE_STATE_UNSPECIFIED"
    description: str = ""
    url: str = ""
    default_label_name: str = ""

    @property
    def visibility_label(self) -> str:
        return _VISIBILITY_LABELS.get(self.visibility, "unknown")

    @property
    def state_label(self) -> str:
        return _STATE_LABELS.get(self.state, "unknown")

    @classmethod
    def from_json(cls, payload: object) -> Module:
        data = _expect_object(payload, "module")
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            owner_id=_str(data, "ownerId"),
            create_time=parse_timestamp(data.get("createTime")),
            update_time=parse_timestamp(data.get("updateTime")),
            visibility=_str(data, "visibility") or "MODULE_VISIBILITY_UNSPECIFIED",
            state=_str(data, "state") or "MODULE_STATE_UNSPECIFIED",
            description=_str(data, "description"),
            url=_str(data, "url"),
            default_label_name=_str(data, "defaultLabelName"),
        )


@dataclass(frozen=True)
class Digest:
    type: str = "DIGEST_TYPE_UNSPECIFIED"
    value: bytes = b""

    @property
    def hex(self) -> str:
        return self.value.hex()

    @classmethod
    def from_json(cls, payload: object) -> Digest:
        if payload is None:
            return cls()
        data = _expect_object(payload, "digest")
        return cls(
            type=_str(data, "type") or "DIGEST_TYPE_UNSPECIFIED",
            value=decode_bytes(data.get("value")),
        )


@dataclass(frozen=True)
class Commit:
    id: str
    create_time: datetime | None = None
    owner_id: str = ""
    module_id: str = ""
    digest: Digest = field(default_factory=Digest)
    created_by_user_id: str = ""
    source_control_url: str = ""

    @classmethod
    def from_json(cls, payload: object) -> Commit:
        data = _expect_object(payload, "commit")
        return cls(
            id=_str(data, "id"),
            create_time=parse_timestamp(data.get("createTime")),
            owner_id=_str(data, "ownerId"),
            module_id=_str(data, "moduleId"),
            digest=Digest.from_json(data.get("digest")),
            created_by_user_id=_str(data, "createdByUserId"),
            source_control_url=_str(data, "sourceControlUrl"),
        )


@dataclass(frozen=True)
class Label:
    id: str
    name: str
    commit_id: str = ""
    owner_id: str = ""
    module_id: str = ""
    create_time: datetime | None = None

    @classmethod
    def from_json(cls, payload: object) -> Label:
        data = _expect_object(payload, "label")
        return cls(
            id=_str(data, "id"),
            name=_str(data, "name"),
            commit_id=_str(data, "commitId"),
            owner_id=_str(data, "ownerId"),
            module_id=_str(data, "moduleId"),
            create_time=parse_timestamp(data.get("createTime")),
        )


@dataclass(frozen=True)
class File:
    path: str
    content: bytes = b""

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @classmethod
    def from_json(cls, payload: object) -> File:
        data = _expect_object(payload, "file")
        return cls(path=_str(data, "path"), content=decode_bytes(data.get("content")))


@dataclass(frozen=True)
class ResolvedResource:
    """Remote's answer to a locator: exactly one module, commit, or label."""

    kind: ResourceKind
    value: Module | Commit | Label


__all__ = [
    "Commit",
    "Digest",
    "File",
    "Label",
    "Module",
    "ResolvedResource",
    "ResourceKind",
    "decode_bytes",
    "parse_timestamp",
]
