"""
envstack init command.

SUMMARY: Create a new .envstack.yaml file
"""

from __future__ import annotations

import argparse
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from envstack.cli import OutputFormatter, add_json_flag
from envstack.core.constants import DECLARATION_FILENAME
from envstack.core.utils.io import atomic_write
from envstack.data import get_data_path

SUMMARY = "Create a new .envstack.yaml file"

TEMPLATES = ("minimal", "standard", "full")


def register_args(parser: argparse.ArgumentParser) -> None:
    """Register command-specific arguments."""
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to create the file in (default: current directory)",
    )
    parser.add_argument(
        "--inherit",
        action="store_true",
        help="Enable in-tree inheritance in the new file",
    )
    parser.add_argument(
        "--layer",
        dest="layers",
        action="append",
        default=[],
        help="Initial layer reference (repeatable)",
    )
    parser.add_argument(
        "--template",
        choices=TEMPLATES,
        default="standard",
        help="Template to use (default: standard)",
    )
    add_json_flag(parser)


def render_template(name: str, *, inherit: bool, layers: list[str]) -> str:
    env = Environment(
        loader=FileSystemLoader(str(get_data_path("templates"))),
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    return env.get_template(f"{name}.yaml.j2").render(inherit=inherit, layers=layers)


def main(args: argparse.Namespace) -> int:
    formatter = OutputFormatter(json_mode=getattr(args, "json", False))
    target = Path(args.path) / DECLARATION_FILENAME

    if target.exists():
        formatter.error(f"{DECLARATION_FILENAME} already exists at {target}", error_code="exists")
        return 1

    content = render_template(args.template, inherit=args.inherit, layers=list(args.layers))
    atomic_write(target, lambda f: f.write(content))

    if formatter.json_mode:
        formatter.success({"path": str(target), "template": args.template}, "")
        return 0

    formatter.text(f"Created {DECLARATION_FILENAME} at {target}")
    formatter.text("")
    formatter.text("Next steps:")
    formatter.text("  1. Edit the file to add your layers")
    formatter.text("  2. Run 'envstack show' to preview the environment")
    formatter.text("  3. Run 'envstack lock' to pin layer digests")
    return 0
