"""Environment variable operations and startup script generation.

Each entry of a declaration's ``environment:`` list is exactly one of::

    - set: NAME
      value: VALUE
    - prepend: NAME
      value: VALUE
      separator: ":"      # optional
    - append: NAME
      value: VALUE
      separator: ":"      # optional
    - comment: TEXT
    - priority: 10

Operations keep their order; ``comment`` and ``priority`` are annotations and
never change variable state.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional, Union

DEFAULT_SEPARATOR = ":"
DEFAULT_PRIORITY = 50


@dataclass(frozen=True)
class SetEnv:
    name: str
    value: str


@dataclass(frozen=True)
class PrependEnv:
    name: str
    value: str
    separator: Optional[str] = None


@dataclass(frozen=True)
class AppendEnv:
    name: str
    value: str
    separator: Optional[str] = None


@dataclass(frozen=True)
class CommentEnv:
    text: str


@dataclass(frozen=True)
class PriorityEnv:
    value: int


EnvOp = Union[SetEnv, PrependEnv, AppendEnv, CommentEnv, PriorityEnv]


class EnvOpError(ValueError):
    """An ``environment:`` entry does not match any known operation."""


def _require_str(raw: Mapping[str, Any], key: str, kind: str) -> str:
    value = raw.get(key)
    if value is None:
        raise EnvOpError(f"'{kind}' operation requires '{key}'")
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        raise EnvOpError(f"'{kind}' operation field '{key}' must be a string")
    return str(value)


def _check_keys(raw: Mapping[str, Any], allowed: set[str], kind: str) -> None:
    extra = sorted(set(raw) - allowed, key=str)
    if extra:
        raise EnvOpError(f"'{kind}' operation has unexpected field(s): {', '.join(str(k) for k in extra)}")


def parse_env_op(raw: Any) -> EnvOp:
    """Build one operation from its file form.

    The operation kind is identified by which of ``set``/``prepend``/
    ``append``/``comment``/``priority`` is present.
    """
    if not isinstance(raw, Mapping):
        raise EnvOpError(f"environment entry must be a mapping, got {type(raw).__name__}")

    kinds = [k for k in ("set", "prepend", "append", "comment", "priority") if k in raw]
    if len(kinds) != 1:
        raise EnvOpError(
            "environment entry must contain exactly one of "
            f"set/prepend/append/comment/priority, got {sorted(raw, key=str)}"
        )
    kind = kinds[0]

    if kind == "set":
        _check_keys(raw, {"set", "value"}, kind)
        return SetEnv(name=_require_str(raw, "set", kind), value=_require_str(raw, "value", kind))
    if kind in ("prepend", "append"):
        _check_keys(raw, {kind, "value", "separator"}, kind)
        sep = raw.get("separator")
        cls = PrependEnv if kind == "prepend" else AppendEnv
        return cls(
            name=_require_str(raw, kind, kind),
            value=_require_str(raw, "value", kind),
            separator=None if sep is None else str(sep),
        )
    if kind == "comment":
        _check_keys(raw, {"comment"}, kind)
        return CommentEnv(text=_require_str(raw, "comment", kind))

    _check_keys(raw, {"priority"}, kind)
    value = raw.get("priority")
    if isinstance(value, bool) or not isinstance(value, int):
        raise EnvOpError("'priority' operation value must be an integer")
    return PriorityEnv(value=value)


def env_op_to_dict(op: EnvOp) -> Dict[str, Any]:
    """Return the file form of ``op``."""
    if isinstance(op, SetEnv):
        return {"set": op.name, "value": op.value}
    if isinstance(op, PrependEnv):
        out: Dict[str, Any] = {"prepend": op.name, "value": op.value}
        if op.separator is not None:
            out["separator"] = op.separator
        return out
    if isinstance(op, AppendEnv):
        out = {"append": op.name, "value": op.value}
        if op.separator is not None:
            out["separator"] = op.separator
        return out
    if isinstance(op, CommentEnv):
        return {"comment": op.text}
    if isinstance(op, PriorityEnv):
        return {"priority": op.value}
    raise TypeError(f"Unhandled environment operation: {op!r}")


def _escape(value: str) -> str:
    """Escape ``value`` for use inside a double-quoted sh string."""
    out = value.replace("\\", "\\\\")
    for ch in ('"', "$", "`"):
        out = out.replace(ch, "\\" + ch)
    return out


def generate_startup_script(ops: Iterable[EnvOp]) -> str:
    """Render ``ops`` as a POSIX sh startup script."""
    lines = ["#!/bin/sh", "# generated by envstack"]
    for op in ops:
        if isinstance(op, SetEnv):
            lines.append(f'export {op.name}="{_escape(op.value)}"')
        elif isinstance(op, PrependEnv):
            sep = _escape(op.separator if op.separator is not None else DEFAULT_SEPARATOR)
            lines.append(f'export {op.name}="{_escape(op.value)}{sep}${{{op.name}}}"')
        elif isinstance(op, AppendEnv):
            sep = _escape(op.separator if op.separator is not None else DEFAULT_SEPARATOR)
            lines.append(f'export {op.name}="${{{op.name}}}{sep}{_escape(op.value)}"')
        elif isinstance(op, CommentEnv):
            for text_line in op.text.splitlines() or [""]:
                lines.append(f"# {text_line}".rstrip())
        elif isinstance(op, PriorityEnv):
            continue
        else:
            raise TypeError(f"Unhandled environment operation: {op!r}")
    return "\n".join(lines) + "\n"


def get_priority(ops: Iterable[EnvOp]) -> int:
    """Return the last declared priority, or the default of 50."""
    priority = DEFAULT_PRIORITY
    for op in ops:
        if isinstance(op, PriorityEnv):
            priority = op.value
    return priority


__all__ = [
    "DEFAULT_PRIORITY",
    "DEFAULT_SEPARATOR",
    "SetEnv",
    "PrependEnv",
    "AppendEnv",
    "CommentEnv",
    "PriorityEnv",
    "EnvOp",
    "EnvOpError",
    "parse_env_op",
    "env_op_to_dict",
    "generate_startup_script",
    "get_priority",
]
