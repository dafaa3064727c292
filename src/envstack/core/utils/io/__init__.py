"""I/O utilities for envstack.

This package provides safe, atomic file operations:
- Core: atomic writes, directory management, text and byte reads
- YAML: read/write with advisory locks
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_parent_dir,
    read_bytes,
    read_text,
)
from .yaml import (
    dump_yaml_string,
    parse_yaml_string,
    read_yaml,
    write_yaml,
)

__all__ = [
    # core
    "PathLike",
    "ensure_parent_dir",
    "atomic_write",
    "read_text",
    "read_bytes",
    # yaml
    "read_yaml",
    "write_yaml",
    "parse_yaml_string",
    "dump_yaml_string",
]
