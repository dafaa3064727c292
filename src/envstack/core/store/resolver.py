"""Resolve symbolic layer references to content digests.

The backing store is external; envstack only needs
``resolve_reference(reference) -> digest``. A reference that already is a
digest resolves to itself.
"""
from __future__ import annotations

import difflib
import logging
import re
from pathlib import Path
from typing import Dict, Mapping, Protocol, runtime_checkable

import yaml

from envstack.core.exceptions import ReadFailed, UnknownLayerReference, ValidationFailed
from envstack.core.utils.io import read_yaml

logger = logging.getLogger(__name__)

# Content digests are 52 characters of RFC 4648 base32 (a padded-off sha256).
_DIGEST_RE = re.compile(r"^[A-Z2-7]{52}$")


def is_digest(reference: str) -> bool:
    """Return True when ``reference`` is a content digest rather than a tag."""
    return bool(_DIGEST_RE.match(reference))


@runtime_checkable
class LayerResolver(Protocol):
    """Anything able to turn a layer reference into a digest."""

    async def resolve_reference(self, reference: str) -> str:
        """Return the digest for ``reference``.

        Raises:
            UnknownLayerReference: If the reference is neither a digest nor a
                known tag.
        """
        ...


class MappingResolver:
    """Resolve tags through an in-memory ``{tag: digest}`` mapping."""

    def __init__(self, tags: Mapping[str, str] | None = None) -> None:
        self._tags: Dict[str, str] = dict(tags or {})

    @property
    def tags(self) -> Dict[str, str]:
        return dict(self._tags)

    @classmethod
    def from_file(cls, path: Path) -> "MappingResolver":
        """Load a YAML mapping of tag names to digests."""
        path = Path(path)
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except OSError as exc:
            raise ReadFailed(path, exc) from exc
        except yaml.YAMLError as exc:
            raise ValidationFailed(f"Tag file {path} is not valid YAML: {exc}", context={"path": path}) from exc
        if not isinstance(data, dict):
            raise ValidationFailed(f"Tag file {path} must contain a mapping", context={"path": Path(path)})
        bad = sorted(str(k) for k, v in data.items() if not is_digest(str(v)))
        if bad:
            raise ValidationFailed(
                f"Tag file {path} maps non-digest values for: {', '.join(bad)}",
                context={"path": Path(path)},
            )
        return cls({str(k): str(v) for k, v in data.items()})

    def similar(self, reference: str) -> list[str]:
        return difflib.get_close_matches(reference, list(self._tags), n=3)

    async def resolve_reference(self, reference: str) -> str:
        if is_digest(reference):
            return reference
        try:
            digest = self._tags[reference]
        except KeyError:
            raise UnknownLayerReference(reference, self.similar(reference)) from None
        logger.debug("resolved tag %s -> %s", reference, digest)
        return digest


__all__ = ["LayerResolver", "MappingResolver", "is_digest"]
