from __future__ import annotations

import logging
import os
import sys

from envstack.core.constants import ENV_LOG_LEVEL

_ENVSTACK_HANDLER: logging.Handler | None = None


def _level_from_name(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def level_for(verbose: int, quiet: bool) -> int:
    """Map -v/-q counts to a logging level; ENVSTACK_LOG_LEVEL is the default."""
    if quiet:
        return logging.ERROR
    if verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    env_level = os.environ.get(ENV_LOG_LEVEL)
    return _level_from_name(env_level) if env_level else logging.WARNING


def configure_logging(level: int) -> None:
    """Install (or replace) the envstack stderr handler on the ``envstack`` logger.

    Idempotent per-process: repeated calls only swap the handler.
    """
    global _ENVSTACK_HANDLER

    root = logging.getLogger("envstack")
    root.setLevel(level)

    if _ENVSTACK_HANDLER is not None:
        root.removeHandler(_ENVSTACK_HANDLER)
        _ENVSTACK_HANDLER.close()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    root.addHandler(handler)
    _ENVSTACK_HANDLER = handler


def reset_logging_for_tests() -> None:
    """Test-only: remove the installed handler."""
    global _ENVSTACK_HANDLER
    if _ENVSTACK_HANDLER is not None:
        logging.getLogger("envstack").removeHandler(_ENVSTACK_HANDLER)
        _ENVSTACK_HANDLER.close()
    _ENVSTACK_HANDLER = None


__all__ = ["configure_logging", "level_for", "reset_logging_for_tests"]
