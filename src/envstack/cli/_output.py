"""Unified CLI output formatting utilities.

Consistent output formatting for all envstack CLI commands, supporting both
JSON and text output modes.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Optional

from envstack.core.exceptions import EnvstackError


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def success(self, data: Dict[str, Any], message: str, *, status: str = "success") -> None:
        """Output success result.

        Args:
            data: Result data dictionary
            message: Human-readable success message (used in text mode)
            status: Status string for JSON output
        """
        if self.json_mode:
            output = {"status": status, **data}
            print(json.dumps(output, indent=self.indent, default=str))
        else:
            print(message)

    def error(self, error: Exception | str, message: Optional[str] = None, *, error_code: str = "error") -> None:
        """Output error result.

        envstack errors carry their own code, context and remediation hint.
        """
        if isinstance(error, EnvstackError):
            payload = error.to_json_error()
            if self.json_mode:
                print(json.dumps({"error": payload["code"], **payload}, indent=self.indent, default=str), file=sys.stderr)
            else:
                print(f"Error: {message or payload['message']}", file=sys.stderr)
                if payload.get("hint"):
                    print(f"  hint: {payload['hint']}", file=sys.stderr)
            return

        msg = message or str(error)
        if self.json_mode:
            print(json.dumps({"error": error_code, "message": msg}, indent=self.indent), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        print(message)

    def warn(self, message: str) -> None:
        """Warnings go to stderr so stdout stays machine-readable."""
        print(f"Warning: {message}", file=sys.stderr)

