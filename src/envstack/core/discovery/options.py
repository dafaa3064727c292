"""Caller-facing discovery controls."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

from envstack.core.constants import ENV_INCLUDE, ENV_INHERIT, ENV_NO_INHERIT, TRUTHY_VALUES


def is_truthy(value: Optional[str]) -> bool:
    """Return True for ``1``/``true``/``yes``/``on`` (case-insensitive)."""
    if value is None:
        return False
    return value.strip().lower() in TRUTHY_VALUES


def split_include_list(value: Optional[str]) -> Tuple[str, ...]:
    """Split a colon-separated include list, dropping empty entries."""
    if not value:
        return ()
    return tuple(part for part in value.split(":") if part.strip())


@dataclass(frozen=True)
class DiscoveryOptions:
    """Options for discovery behavior.

    ``force_inherit`` wins over ``no_inherit`` when both are set, and both
    win over a file's own ``inherit`` field at the start directory.
    """

    # Hard stop at the start directory (--no-inherit / ENVSTACK_NO_INHERIT).
    no_inherit: bool = False
    # Walk upward regardless of the start file's setting (--inherit / ENVSTACK_INHERIT).
    force_inherit: bool = False
    # Includes from the command line, loaded first.
    cli_includes: Tuple[str, ...] = ()
    # Includes from ENVSTACK_INCLUDE, loaded after the CLI ones.
    env_includes: Tuple[str, ...] = ()

    @classmethod
    def from_environ(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        *,
        no_inherit: bool = False,
        force_inherit: bool = False,
        cli_includes: Iterable[str] = (),
    ) -> "DiscoveryOptions":
        """Combine explicit flags with the ``ENVSTACK_*`` process variables."""
        env = os.environ if environ is None else environ
        return cls(
            no_inherit=no_inherit or is_truthy(env.get(ENV_NO_INHERIT)),
            force_inherit=force_inherit or is_truthy(env.get(ENV_INHERIT)),
            cli_includes=tuple(cli_includes),
            env_includes=split_include_list(env.get(ENV_INCLUDE)),
        )


__all__ = ["DiscoveryOptions", "is_truthy", "split_include_list"]
