"""Merge an ordered list of declarations into a single environment."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from envstack.core.declaration import BindMount, Declaration, EnvOp, PackageOptions
from envstack.core.declaration.environment import env_op_to_dict


@dataclass(frozen=True)
class ComposedEnvironment:
    """Composed environment from multiple declarations.

    List-valued fields are concatenations in declaration order; nothing is
    deduplicated. Duplicate layer references are left for the backing store's
    own precedence rules.
    """

    layers: Tuple[str, ...] = ()
    environment: Tuple[EnvOp, ...] = ()
    contents: Tuple[BindMount, ...] = ()
    packages: Tuple[str, ...] = ()
    # Last non-None value encountered.
    package_options: Optional[PackageOptions] = None
    # Provenance of every contributing declaration that has one.
    source_files: Tuple[Path, ...] = ()

    @property
    def has_layers(self) -> bool:
        return bool(self.layers)

    @property
    def source_count(self) -> int:
        return len(self.source_files)

    def extend(self, declarations: Iterable[Declaration]) -> "ComposedEnvironment":
        """Return a new environment with ``declarations`` layered on top."""
        layers = list(self.layers)
        environment = list(self.environment)
        contents = list(self.contents)
        packages = list(self.packages)
        package_options = self.package_options
        source_files = list(self.source_files)

        for declaration in declarations:
            layers.extend(declaration.layers)
            environment.extend(declaration.environment)
            contents.extend(declaration.contents)
            packages.extend(declaration.packages)
            if declaration.package_options is not None:
                package_options = declaration.package_options
            if declaration.source_path is not None:
                source_files.append(declaration.source_path)

        return ComposedEnvironment(
            layers=tuple(layers),
            environment=tuple(environment),
            contents=tuple(contents),
            packages=tuple(packages),
            package_options=package_options,
            source_files=tuple(source_files),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "layers": list(self.layers),
            "environment": [env_op_to_dict(op) for op in self.environment],
            "contents": [b.to_dict() for b in self.contents],
            "packages": list(self.packages),
            "package_options": None if self.package_options is None else self.package_options.to_dict(),
            "source_files": [str(p) for p in self.source_files],
        }


def compose_declarations(declarations: Iterable[Declaration]) -> ComposedEnvironment:
    """Compose declarations in order; later declarations layer on top."""
    return ComposedEnvironment().extend(declarations)
