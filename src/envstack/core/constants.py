"""Well-known file names and environment variable names."""
from __future__ import annotations

# Per-directory declaration file.
DECLARATION_FILENAME = ".envstack.yaml"

# Local override, applied last and never inherited.
LOCAL_OVERRIDE_FILENAME = ".envstack.local.yaml"

# Lock file written next to the start directory.
LOCK_FILENAME = ".envstack.lock.yaml"

ENV_INCLUDE = "ENVSTACK_INCLUDE"
ENV_INHERIT = "ENVSTACK_INHERIT"
ENV_NO_INHERIT = "ENVSTACK_NO_INHERIT"
ENV_TAGS = "ENVSTACK_TAGS"
ENV_LOG_LEVEL = "ENVSTACK_LOG_LEVEL"

TRUTHY_VALUES = frozenset({"1", "true", "yes", "on"})

__all__ = [
    "DECLARATION_FILENAME",
    "LOCAL_OVERRIDE_FILENAME",
    "LOCK_FILENAME",
    "ENV_INCLUDE",
    "ENV_INHERIT",
    "ENV_NO_INHERIT",
    "ENV_TAGS",
    "ENV_LOG_LEVEL",
    "TRUTHY_VALUES",
]
