"""Path helpers shared by include resolution, bind mounts and discovery."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from envstack.core.exceptions import ValidationFailed

HOME_MARKER = "~"


def home_dir() -> Path:
    """Return the caller's home directory.

    Raises:
        ValidationFailed: If no home directory can be determined.
    """
    try:
        return Path.home()
    except RuntimeError as exc:
        raise ValidationFailed(f"Cannot resolve {HOME_MARKER} without HOME") from exc


def expand_reference(raw: str, base_dir: Optional[Path], *, what: str = "path") -> Path:
    """Turn a home-relative, absolute or base-relative string into a path.

    Precedence: a leading ``~`` resolves against the home directory, an
    absolute path is used as-is, anything else is joined onto ``base_dir``.
    """
    if raw.startswith(HOME_MARKER):
        # Only a leading "~/" is stripped; "~name" stays a literal child of home.
        rest = raw[2:] if raw.startswith(HOME_MARKER + "/") else raw
        return home_dir() / rest if rest else home_dir()
    candidate = Path(raw)
    if candidate.is_absolute():
        return candidate
    if base_dir is None:
        raise ValidationFailed(
            f"Cannot resolve relative {what} '{raw}' without base directory",
            context={"path": raw},
        )
    return Path(base_dir) / candidate


def resolve_start_path(start: Path, environ: Optional[Mapping[str, str]] = None) -> Path:
    """Absolutize ``start`` without resolving symlinks.

    Relative paths are joined onto ``$PWD`` when set so the caller's logical
    working directory (and its symlinks) is preserved; otherwise the process
    working directory is used.
    """
    start = Path(start)
    if start.is_absolute():
        return start
    env = os.environ if environ is None else environ
    pwd = env.get("PWD")
    if pwd:
        return Path(pwd) / start
    return Path.cwd() / start


__all__ = ["HOME_MARKER", "home_dir", "expand_reference", "resolve_start_path"]
