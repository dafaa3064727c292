"""Two-stage, version-dispatched declaration parsing.

Stage 1 reads only the ``api`` tag from the raw YAML; stage 2 hands the full
document to the parser registered for that version.
"""
from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import yaml

from envstack.core.exceptions import MalformedDeclaration, ReadFailed
from envstack.core.schemas import validate_payload_safe
from envstack.core.utils.io import parse_yaml_string, read_text

from .environment import EnvOpError, parse_env_op
from .model import ApiVersion, BindMount, Declaration, PackageOptions

logger = logging.getLogger(__name__)


def _parse_v0(data: Dict[str, Any], text: str) -> Declaration:
    errors = validate_payload_safe(data, "declaration")
    if errors:
        raise MalformedDeclaration("; ".join(errors), text=text)

    try:
        environment = tuple(parse_env_op(raw) for raw in data.get("environment") or ())
    except EnvOpError as exc:
        raise MalformedDeclaration(str(exc), text=text) from exc

    raw_options = data.get("package_options")
    description = data.get("description")
    return Declaration(
        api=ApiVersion.V0,
        description=None if description is None else str(description),
        inherit=bool(data.get("inherit", False)),
        includes=tuple(data.get("includes") or ()),
        layers=tuple(data.get("layers") or ()),
        environment=environment,
        contents=tuple(BindMount.from_dict(raw) for raw in data.get("contents") or ()),
        packages=tuple(data.get("packages") or ()),
        package_options=None if raw_options is None else PackageOptions.from_dict(raw_options),
    )


_PARSERS: Dict[ApiVersion, Callable[[Dict[str, Any], str], Declaration]] = {
    ApiVersion.V0: _parse_v0,
}


def _read_api_version(data: Dict[str, Any], text: str) -> ApiVersion:
    raw = data.get("api")
    if raw is None:
        return ApiVersion.default()
    try:
        return ApiVersion(raw)
    except ValueError:
        known = ", ".join(v.value for v in ApiVersion)
        raise MalformedDeclaration(
            f"unknown api version {raw!r} (expected one of: {known})", text=text
        ) from None


def parse_declaration(text: str) -> Declaration:
    """Parse declaration YAML into a :class:`Declaration`.

    Raises:
        MalformedDeclaration: On YAML errors, non-mapping documents, unknown
            versions, or schema violations. The original text is attached.
    """
    try:
        data = parse_yaml_string(text, default=None, raise_on_error=True)
    except yaml.YAMLError as exc:
        raise MalformedDeclaration(str(exc), text=text) from exc

    if not isinstance(data, dict):
        kind = "empty document" if data is None else f"expected a mapping, got {type(data).__name__}"
        raise MalformedDeclaration(kind, text=text)

    version = _read_api_version(data, text)
    return _PARSERS[version](data, text)


def load_declaration(path: Path, *, absolute: Optional[Path] = None) -> Declaration:
    """Load and parse the declaration at ``path``.

    The returned declaration's ``source_path`` is the absolute path it was
    read from (``absolute`` when the caller already computed it).

    Raises:
        ReadFailed: If the file cannot be read.
        MalformedDeclaration: If the content is invalid.
    """
    path = Path(path)
    source = absolute if absolute is not None else path.absolute()
    try:
        text = read_text(path)
    except OSError as exc:
        raise ReadFailed(path, exc) from exc

    try:
        declaration = parse_declaration(text)
    except MalformedDeclaration as exc:
        raise MalformedDeclaration(exc.reason, text=text, path=source) from exc

    logger.debug("loaded declaration %s (%d layer(s))", source, len(declaration.layers))
    return replace(declaration, source_path=source)


__all__ = ["parse_declaration", "load_declaration"]
