import sys
from pathlib import Path
from typing import Callable, Iterable, Optional

import pytest

# Keep the repository free of Python bytecode and __pycache__ artifacts during tests.
sys.dont_write_bytecode = True

TESTS_ROOT = Path(__file__).resolve().parent
REPO_ROOT = TESTS_ROOT.parent
SRC_ROOT = REPO_ROOT / "src"

# Make src/ importable as 'envstack'
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from envstack.core.constants import DECLARATION_FILENAME  # noqa: E402

_ENVSTACK_ENV_KEYS = (
    "ENVSTACK_INCLUDE",
    "ENVSTACK_INHERIT",
    "ENVSTACK_NO_INHERIT",
    "ENVSTACK_TAGS",
    "ENVSTACK_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _isolate_envstack_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep a developer's ENVSTACK_* settings from leaking into tests."""
    for key in _ENVSTACK_ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def render_declaration(
    *,
    inherit: Optional[bool] = None,
    includes: Iterable[str] = (),
    layers: Iterable[str] = (),
    extra: str = "",
) -> str:
    lines = ["api: envstack/v0"]
    if inherit is not None:
        lines.append(f"inherit: {'true' if inherit else 'false'}")
    includes = list(includes)
    if includes:
        lines.append("includes:")
        lines.extend(f"  - {inc}" for inc in includes)
    layers = list(layers)
    if layers:
        lines.append("layers:")
        lines.extend(f"  - {layer}" for layer in layers)
    if extra:
        lines.append(extra.rstrip("\n"))
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_declaration() -> Callable[..., Path]:
    """Write a declaration file and return its path.

    ``target`` is a directory (the file is named ``.envstack.yaml``) unless
    it already carries a ``.yaml`` suffix.
    """

    def _write(target: Path, **kwargs) -> Path:
        target = Path(target)
        path = target if target.suffix == ".yaml" else target / DECLARATION_FILENAME
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(render_declaration(**kwargs), encoding="utf-8")
        return path

    return _write
