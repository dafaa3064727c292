from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence


class EnvstackError(Exception):
    """Base exception for envstack."""

    context: Dict[str, Any]
    hint: Optional[str] = None

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            self.context = dict(context)
        else:
            self.context = {}

    @property
    def code(self) -> str:
        return self.__class__.__name__

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        payload: Dict[str, Any] = {
            "message": str(self),
            "code": self.code,
            "context": {k: (str(v) if isinstance(v, Path) else v) for k, v in self.context.items()},
        }
        if self.hint:
            payload["hint"] = self.hint
        return payload


class NotFoundInTree(EnvstackError, FileNotFoundError):
    """No declaration file in the start directory or any parent directory."""

    hint = "Create one with 'envstack init' or point discovery at another directory with -f"

    def __init__(self, start: Path) -> None:
        message = f"No .envstack.yaml found in {start} or any parent directory"
        EnvstackError.__init__(self, message, context={"path": Path(start)})
        FileNotFoundError.__init__(self, message)
        self.path = Path(start)


class NotFoundAtPath(EnvstackError, FileNotFoundError):
    """Inheritance was disabled and the start directory holds no declaration."""

    def __init__(self, path: Path) -> None:
        message = f".envstack.yaml not found at {path}"
        EnvstackError.__init__(self, message, context={"path": Path(path)})
        FileNotFoundError.__init__(self, message)
        self.path = Path(path)


class MalformedDeclaration(EnvstackError, ValueError):
    """Declaration text could not be parsed or does not match the schema."""

    hint = "Check YAML syntax and ensure 'api: envstack/v0' is present"

    def __init__(self, message: str, *, text: str, path: Path | None = None) -> None:
        ctx: Dict[str, Any] = {}
        if path is not None:
            ctx["path"] = Path(path)
        EnvstackError.__init__(self, f"Invalid declaration: {message}", context=ctx)
        ValueError.__init__(self, f"Invalid declaration: {message}")
        self.reason = message
        self.text = text
        self.path = path


class ReadFailed(EnvstackError, OSError):
    """A known path could not be read."""

    def __init__(self, path: Path, error: OSError) -> None:
        message = f"Failed to read file: {path} ({error})"
        EnvstackError.__init__(self, message, context={"path": Path(path)})
        OSError.__init__(self, message)
        self.path = Path(path)
        self.error = error


class IncludeNotFound(EnvstackError, FileNotFoundError):
    """An include entry does not point at an accessible file."""

    hint = "Check that the include path is correct and the file exists"

    def __init__(self, path: Path, error: OSError) -> None:
        message = f"Include file not found: {path}"
        EnvstackError.__init__(self, message, context={"path": Path(path), "details": str(error)})
        FileNotFoundError.__init__(self, message)
        self.path = Path(path)
        self.error = error


class CircularInclude(EnvstackError):
    """A file was reached twice through includes during one discovery run."""

    hint = "Remove the circular reference in your includes"

    def __init__(self, path: Path) -> None:
        super().__init__(f"Circular include detected: {path}", context={"path": Path(path)})
        self.path = Path(path)


class ValidationFailed(EnvstackError, ValueError):
    """A precondition was violated."""

    def __init__(self, message: str, *, context: Mapping[str, Any] | None = None) -> None:
        EnvstackError.__init__(self, f"Validation failed: {message}", context=context)
        ValueError.__init__(self, f"Validation failed: {message}")


class UnknownLayerReference(EnvstackError, LookupError):
    """A layer string is neither a digest nor a known tag."""

    def __init__(self, reference: str, similar: Sequence[str] = ()) -> None:
        message = f"Unknown layer reference: {reference}"
        EnvstackError.__init__(
            self, message, context={"reference": reference, "similar": list(similar)}
        )
        LookupError.__init__(self, message)
        self.reference = reference
        self.similar = list(similar)

    @property
    def hint(self) -> str:  # type: ignore[override]
        if not self.similar:
            return "Check that the layer reference is correct"
        return f"Did you mean one of: {', '.join(self.similar)}?"


class MalformedLockFile(EnvstackError, ValueError):
    """A persisted lock file could not be parsed."""

    hint = "Regenerate the lock with 'envstack lock --force'"

    def __init__(self, path: Path, message: str) -> None:
        text = f"Invalid lock file {path}: {message}"
        EnvstackError.__init__(self, text, context={"path": Path(path)})
        ValueError.__init__(self, text)
        self.path = Path(path)


__all__ = [
    "EnvstackError",
    "NotFoundInTree",
    "NotFoundAtPath",
    "MalformedDeclaration",
    "ReadFailed",
    "IncludeNotFound",
    "CircularInclude",
    "ValidationFailed",
    "UnknownLayerReference",
    "MalformedLockFile",
]
