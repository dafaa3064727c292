"""Composition engine: fold ordered declarations into one environment."""
from __future__ import annotations

from .compose import ComposedEnvironment, compose_declarations

__all__ = ["ComposedEnvironment", "compose_declarations"]
