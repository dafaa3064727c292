"""
envstack data resource helpers.

Provides access to bundled schemas and ``init`` templates using
importlib.resources.
"""

from __future__ import annotations

from importlib import resources
from pathlib import Path


def get_data_path(subpackage: str, filename: str = "") -> Path:
    """
    Get absolute path to a data file or directory.

    Example:
        >>> get_data_path("schemas", "declaration.schema.yaml")
        PosixPath('/path/to/envstack/data/schemas/declaration.schema.yaml')
    """
    pkg = resources.files("envstack.data")
    base = Path(str(pkg / subpackage))
    return base / filename if filename else base


__all__ = ["get_data_path"]
