"""Discovery engine: find, order and load every applicable declaration."""
from __future__ import annotations

from .engine import discover_declarations, discover_in_tree
from .options import DiscoveryOptions, is_truthy, split_include_list
from .session import DiscoverySession

__all__ = [
    "DiscoveryOptions",
    "DiscoverySession",
    "discover_declarations",
    "discover_in_tree",
    "is_truthy",
    "split_include_list",
]
