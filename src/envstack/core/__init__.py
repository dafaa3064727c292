"""envstack core library.

Re-exports the public surface of the declaration, discovery, composition and
lock engines.
"""
from __future__ import annotations

from . import exceptions  # noqa: F401
from .composition import ComposedEnvironment, compose_declarations
from .constants import DECLARATION_FILENAME, LOCAL_OVERRIDE_FILENAME, LOCK_FILENAME
from .declaration import (
    ApiVersion,
    BindMount,
    Declaration,
    EnvOp,
    PackageOptions,
    generate_startup_script,
    get_priority,
    load_declaration,
    parse_declaration,
)
from .discovery import DiscoveryOptions, DiscoverySession, discover_declarations
from .lock import (
    LockChange,
    LockChangeKind,
    LockSnapshot,
    generate_lock,
    read_lock,
    verify_lock,
    write_lock,
)
from .store import LayerResolver, MappingResolver

__all__ = [
    "exceptions",
    "ApiVersion",
    "BindMount",
    "Declaration",
    "EnvOp",
    "PackageOptions",
    "generate_startup_script",
    "get_priority",
    "load_declaration",
    "parse_declaration",
    "DiscoveryOptions",
    "DiscoverySession",
    "discover_declarations",
    "ComposedEnvironment",
    "compose_declarations",
    "LockChange",
    "LockChangeKind",
    "LockSnapshot",
    "generate_lock",
    "verify_lock",
    "read_lock",
    "write_lock",
    "LayerResolver",
    "MappingResolver",
    "DECLARATION_FILENAME",
    "LOCAL_OVERRIDE_FILENAME",
    "LOCK_FILENAME",
]
