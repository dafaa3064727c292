"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_start_flag(parser: argparse.ArgumentParser) -> None:
    """Add -f/--file for the discovery start directory."""
    parser.add_argument(
        "-f",
        "--file",
        default=".",
        help="Start discovery from PATH (default: current directory)",
    )


def add_discovery_flags(parser: argparse.ArgumentParser) -> None:
    """Add inheritance and include controls."""
    parser.add_argument(
        "--inherit",
        action="store_true",
        help="Walk parent directories regardless of the start file's 'inherit' setting",
    )
    parser.add_argument(
        "-n",
        "--no-inherit",
        action="store_true",
        help="Only load the declaration in the start directory",
    )
    parser.add_argument(
        "-i",
        "--include",
        dest="includes",
        action="append",
        default=[],
        metavar="FILE",
        help="Additional declaration to layer first (repeatable)",
    )


def add_tags_flag(parser: argparse.ArgumentParser) -> None:
    """Add --tags for the tag-to-digest mapping used to resolve layers."""
    parser.add_argument(
        "--tags",
        metavar="FILE",
        help="YAML mapping of layer tags to digests (default: $ENVSTACK_TAGS)",
    )
