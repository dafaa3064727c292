"""Discovery algorithm for finding and ordering declaration files.

Composition order (earlier entries are layered first):

1. ``cli_includes``, in the order given
2. ``env_includes``, in the order given
3. in-tree declarations, root-most ancestor first
4. every include expanded in front of the declaration naming it
5. the local override at the start directory, last
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Optional

from envstack.core.constants import DECLARATION_FILENAME, LOCAL_OVERRIDE_FILENAME
from envstack.core.declaration import Declaration, load_declaration
from envstack.core.exceptions import NotFoundAtPath, NotFoundInTree
from envstack.core.utils.paths import resolve_start_path

from .options import DiscoveryOptions
from .session import DiscoverySession

logger = logging.getLogger(__name__)


def _should_walk_from_start(declaration: Declaration, options: DiscoveryOptions) -> bool:
    if options.force_inherit:
        return True
    if options.no_inherit:
        return False
    return declaration.inherit


def discover_in_tree(start: Path, options: DiscoveryOptions) -> List[Declaration]:
    """Find the start directory's declaration and any inherited ancestors.

    ``start`` must already be absolute. Returned list is root-most first.

    Raises:
        NotFoundAtPath: ``no_inherit`` is set and ``start`` holds no file.
        NotFoundInTree: Nothing was found at ``start`` or above it.
    """
    found: List[Declaration] = []
    current = start

    start_file = current / DECLARATION_FILENAME
    if start_file.is_file():
        declaration = load_declaration(start_file)
        found.append(declaration)
        if not _should_walk_from_start(declaration, options):
            logger.debug("discovery stops at %s (no inheritance)", start_file)
            return found
    elif options.no_inherit:
        raise NotFoundAtPath(current)

    # Walk up; the nearest ancestor found decides whether to keep going.
    while current.parent != current:
        current = current.parent
        candidate = current / DECLARATION_FILENAME
        if not candidate.is_file():
            continue
        ancestor = load_declaration(candidate)
        found.insert(0, ancestor)
        logger.debug("inherited %s (inherit=%s)", candidate, ancestor.inherit)
        if not ancestor.inherit:
            break

    if not found:
        raise NotFoundInTree(start)
    return found


def discover_declarations(
    start: Path,
    options: Optional[DiscoveryOptions] = None,
    *,
    environ: Optional[Mapping[str, str]] = None,
    session: Optional[DiscoverySession] = None,
) -> List[Declaration]:
    """Discover every applicable declaration, in composition order.

    Args:
        start: Directory to start from. Relative paths resolve against
            ``$PWD`` (from ``environ``) or the process working directory.
        options: Inheritance and include controls.
        environ: Environment used to resolve ``start`` (default: os.environ).
        session: Discovery state; a fresh one is created per call when
            omitted. A session must not be reused across runs.
    """
    options = options or DiscoveryOptions()
    session = session or DiscoverySession()

    collected: List[Declaration] = []
    for include in options.cli_includes:
        collected.append(session.load_include(include, None))
    for include in options.env_includes:
        collected.append(session.load_include(include, None))

    resolved_start = resolve_start_path(Path(start), environ)
    collected.extend(discover_in_tree(resolved_start, options))

    ordered = session.expand_includes(collected)

    local = resolved_start / LOCAL_OVERRIDE_FILENAME
    if local.is_file():
        ordered.append(load_declaration(local))
        logger.debug("applied local override %s", local)

    logger.debug("discovered %d declaration(s) from %s", len(ordered), resolved_start)
    return ordered


__all__ = ["discover_declarations", "discover_in_tree"]
