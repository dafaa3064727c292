"""Declaration model: one ``.envstack.yaml`` file and its fields."""
from __future__ import annotations

from .environment import (
    AppendEnv,
    CommentEnv,
    EnvOp,
    PrependEnv,
    PriorityEnv,
    SetEnv,
    generate_startup_script,
    get_priority,
    parse_env_op,
)
from .model import ApiVersion, BindMount, Declaration, PackageOptions, resolve_include_path
from .parser import load_declaration, parse_declaration

__all__ = [
    "ApiVersion",
    "BindMount",
    "Declaration",
    "PackageOptions",
    "resolve_include_path",
    "EnvOp",
    "SetEnv",
    "PrependEnv",
    "AppendEnv",
    "CommentEnv",
    "PriorityEnv",
    "parse_env_op",
    "generate_startup_script",
    "get_priority",
    "parse_declaration",
    "load_declaration",
]
