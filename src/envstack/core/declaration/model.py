"""Typed representation of one ``.envstack.yaml`` declaration."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from envstack.core.exceptions import IncludeNotFound, ValidationFailed
from envstack.core.utils.paths import expand_reference

from .environment import EnvOp, env_op_to_dict


class ApiVersion(str, Enum):
    """Declaration schema versions."""

    V0 = "envstack/v0"

    @classmethod
    def default(cls) -> "ApiVersion":
        return cls.V0


@dataclass(frozen=True)
class PackageOptions:
    """Options controlling package resolution."""

    # Resolve packages in binary-only mode (no source builds).
    binary_only: bool = True
    # Additional repository names to search.
    repositories: Tuple[str, ...] = ()
    # Optional solver selector, e.g. "step" or "resolvo".
    solver: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "PackageOptions":
        solver = raw.get("solver")
        return cls(
            binary_only=bool(raw.get("binary_only", True)),
            repositories=tuple(str(r) for r in raw.get("repositories") or ()),
            solver=None if solver is None else str(solver),
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"binary_only": self.binary_only}
        if self.repositories:
            out["repositories"] = list(self.repositories)
        if self.solver is not None:
            out["solver"] = self.solver
        return out


@dataclass(frozen=True)
class BindMount:
    """One ``contents:`` entry binding a host path into the runtime."""

    bind: str
    dest: str
    readonly: bool = False

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "BindMount":
        return cls(bind=str(raw["bind"]), dest=str(raw["dest"]), readonly=bool(raw.get("readonly", False)))

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"bind": self.bind, "dest": self.dest}
        if self.readonly:
            out["readonly"] = True
        return out

    def resolve_source(self, base_dir: Path) -> Path:
        """Return the canonical host path for ``bind``.

        Raises:
            ValidationFailed: If the source does not exist.
        """
        src = expand_reference(self.bind, base_dir, what="bind source")
        try:
            return src.resolve(strict=True)
        except (OSError, RuntimeError) as exc:
            raise ValidationFailed(
                f"Bind mount source not found or invalid: {src} ({exc})",
                context={"path": src},
            ) from exc


@dataclass(frozen=True)
class Declaration:
    """One parsed declaration file.

    Instances are immutable; ``source_path`` is provenance only and is never
    serialized.
    """

    api: ApiVersion = ApiVersion.V0
    description: Optional[str] = None
    # In-tree inheritance; False stops the upward walk at this file.
    inherit: bool = False
    includes: Tuple[str, ...] = ()
    layers: Tuple[str, ...] = ()
    environment: Tuple[EnvOp, ...] = ()
    contents: Tuple[BindMount, ...] = ()
    packages: Tuple[str, ...] = ()
    package_options: Optional[PackageOptions] = None
    source_path: Optional[Path] = field(default=None, compare=False)

    @property
    def base_dir(self) -> Optional[Path]:
        """Directory relative includes and binds resolve against."""
        return self.source_path.parent if self.source_path is not None else None

    def validate(self) -> None:
        if self.source_path is None:
            raise ValidationFailed("source_path must be set")

    def resolve_includes(self) -> List[Path]:
        """Resolve every include against this declaration's directory."""
        if self.base_dir is None:
            raise ValidationFailed("Cannot resolve includes without source_path")
        return [resolve_include_path(raw, self.base_dir) for raw in self.includes]

    def to_dict(self) -> Dict[str, Any]:
        """Return the file form, omitting empty fields."""
        out: Dict[str, Any] = {"api": self.api.value}
        if self.description is not None:
            out["description"] = self.description
        out["inherit"] = self.inherit
        if self.includes:
            out["includes"] = list(self.includes)
        if self.layers:
            out["layers"] = list(self.layers)
        if self.environment:
            out["environment"] = [env_op_to_dict(op) for op in self.environment]
        if self.contents:
            out["contents"] = [b.to_dict() for b in self.contents]
        if self.packages:
            out["packages"] = list(self.packages)
        if self.package_options is not None:
            out["package_options"] = self.package_options.to_dict()
        return out


def resolve_include_path(include: str, base_dir: Optional[Path]) -> Path:
    """Resolve one include string to a canonical path.

    Raises:
        ValidationFailed: For a relative include without ``base_dir``.
        IncludeNotFound: If the target does not exist or is inaccessible.
    """
    path = expand_reference(include, base_dir, what="include")
    try:
        return path.resolve(strict=True)
    except OSError as exc:
        raise IncludeNotFound(path, exc) from exc
    except RuntimeError as exc:
        # Symlink loops surface as RuntimeError on older interpreters.
        raise IncludeNotFound(path, OSError(str(exc))) from exc


__all__ = ["ApiVersion", "PackageOptions", "BindMount", "Declaration", "resolve_include_path"]
