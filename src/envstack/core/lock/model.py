"""Lock file structures."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from envstack.core.utils.time import format_iso8601, parse_iso8601


class LockApiVersion(str, Enum):
    V0 = "envstack/v0/lock"


@dataclass(frozen=True)
class GenerationMetadata:
    """When, where and by which envstack version the lock was generated."""

    timestamp: datetime
    envstack_version: str
    hostname: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": format_iso8601(self.timestamp),
            "envstack_version": self.envstack_version,
            "hostname": self.hostname,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "GenerationMetadata":
        return cls(
            timestamp=parse_iso8601(raw["timestamp"]),
            envstack_version=str(raw["envstack_version"]),
            hostname=str(raw["hostname"]),
        )


@dataclass(frozen=True)
class SourceRecord:
    """One declaration file tracked by the lock."""

    path: Path
    sha256: str
    mtime: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {"path": str(self.path), "sha256": self.sha256, "mtime": format_iso8601(self.mtime)}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "SourceRecord":
        return cls(path=Path(raw["path"]), sha256=str(raw["sha256"]), mtime=parse_iso8601(raw["mtime"]))


@dataclass(frozen=True)
class ResolvedLayer:
    """One layer reference and the digest it resolved to."""

    reference: str
    digest: str
    resolved_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "reference": self.reference,
            "digest": self.digest,
            "resolved_at": format_iso8601(self.resolved_at),
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ResolvedLayer":
        return cls(
            reference=str(raw["reference"]),
            digest=str(raw["digest"]),
            resolved_at=parse_iso8601(raw["resolved_at"]),
        )


@dataclass(frozen=True)
class LockSnapshot:
    """Point-in-time record of source hashes and layer digests.

    ``sources[i]`` and ``layers[i]`` line up with ``source_files[i]`` and
    ``layers[i]`` of the composed environment the lock was generated from.
    """

    generated: GenerationMetadata
    sources: Tuple[SourceRecord, ...] = ()
    layers: Tuple[ResolvedLayer, ...] = ()
    api: LockApiVersion = LockApiVersion.V0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "api": self.api.value,
            "generated": self.generated.to_dict(),
            "sources": [s.to_dict() for s in self.sources],
            "layers": [layer.to_dict() for layer in self.layers],
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "LockSnapshot":
        return cls(
            api=LockApiVersion(raw["api"]),
            generated=GenerationMetadata.from_dict(raw["generated"]),
            sources=tuple(SourceRecord.from_dict(s) for s in raw.get("sources") or ()),
            layers=tuple(ResolvedLayer.from_dict(item) for item in raw.get("layers") or ()),
        )


class LockChangeKind(str, Enum):
    """Types of lock mismatches."""

    LAYER_DIGEST_CHANGED = "layer_digest_changed"
    LAYER_ADDED = "layer_added"
    LAYER_REMOVED = "layer_removed"
    SOURCE_FILE_CHANGED = "source_file_changed"
    SOURCE_FILE_REMOVED = "source_file_removed"


@dataclass(frozen=True)
class LockChange:
    """A single detected difference between a lock and the live environment."""

    kind: LockChangeKind
    reference: str
    expected: Optional[str] = None
    actual: Optional[str] = None

    def describe(self) -> str:
        if self.kind is LockChangeKind.LAYER_DIGEST_CHANGED:
            return f"Layer '{self.reference}' digest changed"
        if self.kind is LockChangeKind.LAYER_ADDED:
            return f"Layer '{self.reference}' was added"
        if self.kind is LockChangeKind.LAYER_REMOVED:
            return f"Layer '{self.reference}' was removed"
        if self.kind is LockChangeKind.SOURCE_FILE_CHANGED:
            return f"Source file '{self.reference}' was modified"
        if self.kind is LockChangeKind.SOURCE_FILE_REMOVED:
            return f"Source file '{self.reference}' is no longer part of the environment"
        raise TypeError(f"Unhandled lock change kind: {self.kind!r}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "reference": self.reference,
            "expected": self.expected,
            "actual": self.actual,
        }


__all__ = [
    "LockApiVersion",
    "GenerationMetadata",
    "SourceRecord",
    "ResolvedLayer",
    "LockSnapshot",
    "LockChangeKind",
    "LockChange",
]
