"""
envstack lock command.

SUMMARY: Generate or update the lock file

Writes ``.envstack.lock.yaml`` next to the start directory, pinning every
layer reference to its digest and hashing every contributing declaration.
"""

from __future__ import annotations

import argparse
import asyncio

from envstack.cli import (
    OutputFormatter,
    add_json_flag,
    add_start_flag,
    add_tags_flag,
    build_discovery_options,
    get_start_path,
    load_resolver,
    report_error,
)
from envstack.core.composition import compose_declarations
from envstack.core.discovery import discover_declarations
from envstack.core.exceptions import EnvstackError
from envstack.core.lock import generate_lock, lock_path_for, read_lock, verify_lock, write_lock

SUMMARY = "Generate or update the lock file"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_start_flag(parser)
    add_tags_flag(parser)
    parser.add_argument("--update", action="store_true", help="Update an existing lock file")
    parser.add_argument("--force", action="store_true", help="Regenerate even if a lock file exists")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Verify the lock is current (exit 1 on drift, 2 when missing)",
    )
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    start = get_start_path(args)
    lock_path = lock_path_for(start)

    try:
        declarations = discover_declarations(start, build_discovery_options(args))
        composed = compose_declarations(declarations)
        resolver = load_resolver(args)

        if args.check:
            if not lock_path.exists():
                formatter.error(f"No lock file found at {lock_path}", error_code="missing_lock")
                return 2
            changes = asyncio.run(verify_lock(read_lock(lock_path), composed, resolver))
            if changes:
                if formatter.json_mode:
                    formatter.json_output({"status": "drift", "changes": [c.to_dict() for c in changes]})
                else:
                    formatter.text("Lock file is out of date:")
                    for change in changes:
                        formatter.text(f"  - {change.describe()}")
                return 1
            formatter.success({"path": str(lock_path)}, "Lock file is up to date")
            return 0

        if lock_path.exists() and not (args.update or args.force):
            formatter.error(
                f"Lock file already exists at {lock_path}. Use --update or --force",
                error_code="exists",
            )
            return 1

        lock = asyncio.run(generate_lock(composed, resolver))
        write_lock(lock_path, lock)
    except EnvstackError as exc:
        return report_error(args, exc)

    formatter.success(
        {"path": str(lock_path), "layers": len(lock.layers), "sources": len(lock.sources)},
        f"Generated lock file: {lock_path}",
    )
    return 0
