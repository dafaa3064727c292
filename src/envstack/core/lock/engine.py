"""Generate lock snapshots and verify them against the live environment.

Both operations await the resolver once per layer, in list order; the first
failure aborts and no partial result is returned. Verification reports drift
as :class:`LockChange` records and only raises on I/O or resolver errors.

Known limitation: locked sources and layers are matched to the live
environment by position, not by path or reference. Reordering the live
declarations without changing them shows up as drift.
"""
from __future__ import annotations

import hashlib
import logging
import socket
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from envstack import __version__
from envstack.core.composition import ComposedEnvironment
from envstack.core.exceptions import ReadFailed
from envstack.core.store import LayerResolver
from envstack.core.utils.io import read_bytes
from envstack.core.utils.time import from_timestamp, utc_now

from .model import (
    GenerationMetadata,
    LockChange,
    LockChangeKind,
    LockSnapshot,
    ResolvedLayer,
    SourceRecord,
)

logger = logging.getLogger(__name__)


def hash_file(path: Path) -> str:
    """Return the hex sha256 of ``path``'s content."""
    try:
        content = read_bytes(path)
    except OSError as exc:
        raise ReadFailed(path, exc) from exc
    return hashlib.sha256(content).hexdigest()


def _source_record(path: Path) -> SourceRecord:
    digest = hash_file(path)
    try:
        mtime = from_timestamp(path.stat().st_mtime)
    except OSError as exc:
        raise ReadFailed(path, exc) from exc
    return SourceRecord(path=path, sha256=digest, mtime=mtime)


def _hostname() -> str:
    return socket.gethostname() or "unknown"


async def generate_lock(
    composed: ComposedEnvironment,
    resolver: LayerResolver,
    *,
    now: Optional[datetime] = None,
    hostname: Optional[str] = None,
) -> LockSnapshot:
    """Build a lock snapshot for ``composed``.

    Raises:
        ReadFailed: If a source file cannot be hashed.
        UnknownLayerReference: If any layer cannot be resolved.
    """
    sources = [_source_record(path) for path in composed.source_files]

    layers: List[ResolvedLayer] = []
    for reference in composed.layers:
        digest = await resolver.resolve_reference(reference)
        layers.append(ResolvedLayer(reference=reference, digest=digest, resolved_at=utc_now()))

    lock = LockSnapshot(
        generated=GenerationMetadata(
            timestamp=now or utc_now(),
            envstack_version=__version__,
            hostname=hostname or _hostname(),
        ),
        sources=tuple(sources),
        layers=tuple(layers),
    )
    logger.info("generated lock: %d source(s), %d layer(s)", len(sources), len(layers))
    return lock


async def verify_lock(
    lock: LockSnapshot,
    composed: ComposedEnvironment,
    resolver: LayerResolver,
) -> List[LockChange]:
    """Compare ``lock`` with ``composed``; an empty list means no drift."""
    changes: List[LockChange] = []

    for i, source in enumerate(lock.sources):
        if i >= len(composed.source_files):
            changes.append(
                LockChange(
                    kind=LockChangeKind.SOURCE_FILE_REMOVED,
                    reference=str(source.path),
                    expected=source.sha256,
                )
            )
            continue
        actual = hash_file(composed.source_files[i])
        if actual != source.sha256:
            changes.append(
                LockChange(
                    kind=LockChangeKind.SOURCE_FILE_CHANGED,
                    reference=str(source.path),
                    expected=source.sha256,
                    actual=actual,
                )
            )

    for i, locked in enumerate(lock.layers):
        if i >= len(composed.layers):
            changes.append(
                LockChange(
                    kind=LockChangeKind.LAYER_REMOVED,
                    reference=locked.reference,
                    expected=locked.digest,
                )
            )
            continue
        actual = await resolver.resolve_reference(composed.layers[i])
        if actual != locked.digest:
            changes.append(
                LockChange(
                    kind=LockChangeKind.LAYER_DIGEST_CHANGED,
                    reference=locked.reference,
                    expected=locked.digest,
                    actual=actual,
                )
            )

    for extra in composed.layers[len(lock.layers):]:
        changes.append(LockChange(kind=LockChangeKind.LAYER_ADDED, reference=extra))

    if changes:
        logger.info("lock drift: %d change(s)", len(changes))
    return changes


__all__ = ["generate_lock", "verify_lock", "hash_file"]
