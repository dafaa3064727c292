"""Backing-store collaborator interface for layer reference resolution."""
from __future__ import annotations

from .resolver import LayerResolver, MappingResolver, is_digest

__all__ = ["LayerResolver", "MappingResolver", "is_digest"]
