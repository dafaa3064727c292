"""YAML I/O utilities with atomic writes and advisory locks."""
from __future__ import annotations

import fcntl
from pathlib import Path
from typing import Any

import yaml

from .core import atomic_write


# Multiline strings use literal block style (|) so generated files stay readable.
def _str_representer(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


class _Dumper(yaml.SafeDumper):
    """SafeDumper with envstack's string representation."""


_Dumper.add_representer(str, _str_representer)


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Read YAML with error handling.

    Returns default if file is missing or invalid, unless raise_on_error is True.

    Args:
        path: YAML file path to read
        default: Value to return if file missing or invalid (default: None)
        raise_on_error: If True, propagate exceptions instead of returning default.
    """
    path = Path(path)
    if not path.exists():
        if raise_on_error:
            raise FileNotFoundError(f"File not found: {path}")
        return default

    try:
        with open(path, "r", encoding="utf-8") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_SH)
            data = yaml.safe_load(f)
            fcntl.flock(f.fileno(), fcntl.LOCK_UN)
        return data if data is not None else default
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default


def write_yaml(path: Path, data: Any, *, sort_keys: bool = False) -> None:
    """Atomically write YAML data to ``path``.

    Key order is preserved by default so documents read in their natural
    field order.
    """

    def _writer(f) -> None:
        yaml.dump(
            data,
            f,
            Dumper=_Dumper,
            default_flow_style=False,
            sort_keys=sort_keys,
            allow_unicode=True,
        )

    atomic_write(Path(path), _writer)


def parse_yaml_string(content: str, default: Any = None, raise_on_error: bool = False) -> Any:
    """Parse YAML from string.

    Args:
        content: YAML string content
        default: Value to return for empty documents or on error
        raise_on_error: If True, propagate ``yaml.YAMLError``
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError:
        if raise_on_error:
            raise
        return default
    return data if data is not None else default


def dump_yaml_string(data: Any, sort_keys: bool = False) -> str:
    """Dump data to a YAML string."""
    return yaml.dump(
        data,
        Dumper=_Dumper,
        default_flow_style=False,
        sort_keys=sort_keys,
        allow_unicode=True,
    )


__all__ = [
    "read_yaml",
    "write_yaml",
    "parse_yaml_string",
    "dump_yaml_string",
]
