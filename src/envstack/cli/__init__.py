"""
envstack CLI package.

Commands live in ``envstack.cli.commands``; each module exposes ``SUMMARY``,
``register_args(parser)`` and ``main(args) -> int`` and is registered
automatically by the dispatcher.

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
"""
from ._output import OutputFormatter
from ._args import add_discovery_flags, add_json_flag, add_start_flag, add_tags_flag
from ._utils import build_discovery_options, get_start_path, load_resolver, report_error

__all__ = [
    # Output formatting
    "OutputFormatter",
    # Argument helpers
    "add_json_flag",
    "add_start_flag",
    "add_discovery_flags",
    "add_tags_flag",
    # Utilities
    "build_discovery_options",
    "get_start_path",
    "load_resolver",
    "report_error",
]
