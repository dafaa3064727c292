"""Shared CLI utilities."""
from __future__ import annotations

import argparse
import logging
import os
from pathlib import Path
from typing import Optional

from envstack.core.constants import ENV_TAGS
from envstack.core.discovery import DiscoveryOptions
from envstack.core.store import MappingResolver

from ._output import OutputFormatter

logger = logging.getLogger(__name__)


def get_start_path(args: argparse.Namespace) -> Path:
    return Path(getattr(args, "file", None) or ".")


def build_discovery_options(args: argparse.Namespace) -> DiscoveryOptions:
    """Merge command-line flags with ``ENVSTACK_*`` variables."""
    return DiscoveryOptions.from_environ(
        os.environ,
        no_inherit=bool(getattr(args, "no_inherit", False)),
        force_inherit=bool(getattr(args, "inherit", False)),
        cli_includes=getattr(args, "includes", None) or (),
    )


def load_resolver(args: argparse.Namespace) -> MappingResolver:
    """Build the layer resolver from ``--tags`` or ``$ENVSTACK_TAGS``.

    Without a tag file only digest references can be resolved.
    """
    tags_file: Optional[str] = getattr(args, "tags", None) or os.environ.get(ENV_TAGS)
    if not tags_file:
        logger.debug("no tag file configured; only digests will resolve")
        return MappingResolver()
    return MappingResolver.from_file(Path(tags_file))


def report_error(args: argparse.Namespace, error: Exception) -> int:
    OutputFormatter(json_mode=getattr(args, "json", False)).error(error)
    return 1
