"""Per-run discovery state and include expansion."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Set

from envstack.core.declaration import Declaration, load_declaration, resolve_include_path
from envstack.core.exceptions import CircularInclude

logger = logging.getLogger(__name__)


@dataclass
class _Frame:
    declaration: Declaration
    next_include: int = 0


class DiscoverySession:
    """State owned by exactly one discovery run.

    Tracks the canonical path of every file loaded through an include so a
    second visit, whether a true cycle or a repeated include, is reported as
    :class:`CircularInclude`. Sessions are never shared between runs.
    """

    def __init__(self) -> None:
        self._seen: Set[Path] = set()

    @property
    def seen(self) -> frozenset[Path]:
        return frozenset(self._seen)

    def load_include(self, include: str, base_dir: Optional[Path]) -> Declaration:
        """Resolve and load one include, recording it in the seen-set."""
        path = resolve_include_path(include, base_dir)
        if path in self._seen:
            raise CircularInclude(path)
        self._seen.add(path)
        logger.debug("loading include %s -> %s", include, path)
        return load_declaration(path, absolute=path)

    def expand_includes(self, declarations: Iterable[Declaration]) -> List[Declaration]:
        """Expand includes depth-first, placing each include before its includer.

        For a declaration ``D`` with includes ``[a, b]`` the output order is
        ``expand(a), expand(b), D``. Uses an explicit stack rather than
        recursion.
        """
        result: List[Declaration] = []
        for root in declarations:
            stack: List[_Frame] = [_Frame(root)]
            while stack:
                frame = stack[-1]
                includes = frame.declaration.includes
                if frame.next_include < len(includes):
                    raw = includes[frame.next_include]
                    frame.next_include += 1
                    stack.append(_Frame(self.load_include(raw, frame.declaration.base_dir)))
                    continue
                stack.pop()
                result.append(frame.declaration)
        return result


__all__ = ["DiscoverySession"]
