"""Lock engine: freeze a composed environment and detect drift."""
from __future__ import annotations

from .engine import generate_lock, hash_file, verify_lock
from .io import lock_path_for, read_lock, write_lock
from .model import (
    GenerationMetadata,
    LockApiVersion,
    LockChange,
    LockChangeKind,
    LockSnapshot,
    ResolvedLayer,
    SourceRecord,
)

__all__ = [
    "GenerationMetadata",
    "LockApiVersion",
    "LockChange",
    "LockChangeKind",
    "LockSnapshot",
    "ResolvedLayer",
    "SourceRecord",
    "generate_lock",
    "verify_lock",
    "hash_file",
    "lock_path_for",
    "read_lock",
    "write_lock",
]
