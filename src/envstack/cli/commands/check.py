"""
envstack check command.

SUMMARY: Verify the environment matches the lock file
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
from envstack.core.lock import LockChangeKind, lock_path_for, read_lock, verify_lock

SUMMARY = "Verify the environment matches the lock file"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_start_flag(parser)
    add_tags_flag(parser)
    parser.add_argument("--strict", action="store_true", help="Exit with error on mismatch")
    add_json_flag(parser)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    start = get_start_path(args)
    lock_path = lock_path_for(start)

    if not lock_path.exists():
        if args.strict:
            formatter.error(f"No lock file found at {lock_path}", error_code="missing_lock")
            return 1
        formatter.warn("No lock file found")
        return 2

    try:
        declarations = discover_declarations(start, build_discovery_options(args))
        composed = compose_declarations(declarations)
        changes = asyncio.run(verify_lock(read_lock(lock_path), composed, load_resolver(args)))
    except EnvstackError as exc:
        return report_error(args, exc)

    if not changes:
        formatter.success({"changes": []}, "✓ Environment matches lock file")
        return 0

    if formatter.json_mode:
        formatter.json_output(
            {"status": "drift", "strict": args.strict, "changes": [c.to_dict() for c in changes]}
        )
    else:
        if args.strict:
            formatter.error("Environment differs from lock file:")
        else:
            formatter.warn("Environment differs from lock file:")
        for change in changes:
            formatter.text(f"  - {change.describe()}")
            if change.kind is LockChangeKind.LAYER_DIGEST_CHANGED:
                formatter.text(f"    Expected: {change.expected}")
                formatter.text(f"    Actual:   {change.actual}")
        if not args.strict:
            formatter.text("")
            formatter.text("Run 'envstack lock --update' to update the lock file")

    return 1 if args.strict else 0
