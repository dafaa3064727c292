"""Persist lock snapshots as YAML."""
from __future__ import annotations

import logging
from pathlib import Path

import yaml

from envstack.core.constants import LOCK_FILENAME
from envstack.core.exceptions import MalformedLockFile, ReadFailed
from envstack.core.schemas import validate_payload_safe
from envstack.core.utils.io import parse_yaml_string, read_text, write_yaml

from .model import LockSnapshot

logger = logging.getLogger(__name__)


def lock_path_for(start: Path) -> Path:
    """Return the lock file location for a discovery start directory."""
    return Path(start) / LOCK_FILENAME


def read_lock(path: Path) -> LockSnapshot:
    """Load a lock snapshot.

    Raises:
        ReadFailed: If the file cannot be read.
        MalformedLockFile: If the content is not a valid lock.
    """
    path = Path(path)
    try:
        text = read_text(path)
    except OSError as exc:
        raise ReadFailed(path, exc) from exc

    try:
        data = parse_yaml_string(text, default=None, raise_on_error=True)
    except yaml.YAMLError as exc:
        raise MalformedLockFile(path, str(exc)) from exc

    errors = validate_payload_safe(data, "lock")
    if errors:
        raise MalformedLockFile(path, "; ".join(errors))

    try:
        return LockSnapshot.from_dict(data)
    except (KeyError, TypeError, ValueError) as exc:
        raise MalformedLockFile(path, str(exc)) from exc


def write_lock(path: Path, lock: LockSnapshot) -> None:
    """Atomically write ``lock`` to ``path``."""
    write_yaml(Path(path), lock.to_dict())
    logger.debug("wrote lock file %s", path)


__all__ = ["lock_path_for", "read_lock", "write_lock"]
