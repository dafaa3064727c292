"""
envstack show command.

SUMMARY: Display the resolved environment

Discovers every applicable declaration from the start directory, composes
them, and prints the discovered files, the layer stack, or the full composed
environment.
"""

from __future__ import annotations

import argparse
from typing import Any, Dict, List

from envstack.cli import (
    OutputFormatter,
    add_discovery_flags,
    add_start_flag,
    build_discovery_options,
    get_start_path,
)
from envstack.core.composition import ComposedEnvironment, compose_declarations
from envstack.core.declaration import Declaration
from envstack.core.discovery import discover_declarations
from envstack.core.exceptions import EnvstackError
from envstack.core.utils.io import dump_yaml_string

SUMMARY = "Display the resolved environment"


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    add_start_flag(parser)
    add_discovery_flags(parser)
    parser.add_argument("--files", action="store_true", help="Show discovered files")
    parser.add_argument("--layers", action="store_true", help="Show the layer stack")
    parser.add_argument("--all", action="store_true", help="Show all information")
    parser.add_argument(
        "--format",
        choices=["table", "yaml", "json"],
        default="table",
        help="Output format (default: table)",
    )


def _file_entry(declaration: Declaration) -> Dict[str, Any]:
    return {
        "path": str(declaration.source_path) if declaration.source_path else None,
        "description": declaration.description,
        "inherit": declaration.inherit,
        "includes": list(declaration.includes),
    }


def build_report(declarations: List[Declaration], composed: ComposedEnvironment) -> Dict[str, Any]:
    """Structured view used by the yaml and json formats."""
    return {
        "files": [_file_entry(d) for d in declarations],
        "composed": composed.to_dict(),
    }


def _print_files(formatter: OutputFormatter, declarations: List[Declaration]) -> None:
    formatter.text("Discovered Files:")
    formatter.text("")
    for i, declaration in enumerate(declarations, start=1):
        path = str(declaration.source_path) if declaration.source_path else "<unknown>"
        markers = ""
        if declaration.inherit:
            markers += " [inherit]"
        if declaration.includes:
            markers += f" [includes: {len(declaration.includes)}]"
        formatter.text(f"  {i}. {path}{markers}")
        if declaration.description:
            formatter.text(f"     {declaration.description}")


def _print_layers(formatter: OutputFormatter, composed: ComposedEnvironment) -> None:
    formatter.text("Layer Stack:")
    formatter.text("")
    if not composed.has_layers:
        formatter.text("  (no layers)")
        return
    for i, layer in enumerate(composed.layers, start=1):
        formatter.text(f"  {i}. {layer}")


def main(args: argparse.Namespace) -> int:
    """Show the composed environment."""
    formatter = OutputFormatter(json_mode=args.format == "json")

    try:
        declarations = discover_declarations(
            get_start_path(args), build_discovery_options(args)
        )
    except EnvstackError as exc:
        formatter.error(exc)
        return 1

    composed = compose_declarations(declarations)

    if args.format == "json":
        formatter.json_output(build_report(declarations, composed))
        return 0
    if args.format == "yaml":
        formatter.text(dump_yaml_string(build_report(declarations, composed)).rstrip())
        return 0

    neither = not args.files and not args.layers
    show_files = args.files or args.all or neither
    show_layers = args.layers or args.all or neither

    if show_files:
        _print_files(formatter, declarations)
    if show_files and show_layers:
        formatter.text("")
    if show_layers:
        _print_layers(formatter, composed)
    return 0
