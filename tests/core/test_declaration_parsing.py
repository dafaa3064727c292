from __future__ import annotations

from pathlib import Path

import pytest

from envstack.core.declaration import (
    ApiVersion,
    BindMount,
    Declaration,
    PackageOptions,
    load_declaration,
    parse_declaration,
)
from envstack.core.declaration.environment import AppendEnv, CommentEnv, PrependEnv, PriorityEnv, SetEnv
from envstack.core.exceptions import MalformedDeclaration, ReadFailed, ValidationFailed


def test_minimal_declaration_defaults() -> None:
    decl = parse_declaration("api: envstack/v0\n")

    assert decl.api is ApiVersion.V0
    assert decl.inherit is False
    assert decl.includes == ()
    assert decl.layers == ()
    assert decl.environment == ()
    assert decl.package_options is None
    assert decl.source_path is None


def test_missing_api_defaults_to_v0() -> None:
    decl = parse_declaration("layers: [base]\n")
    assert decl.api is ApiVersion.V0
    assert decl.layers == ("base",)


def test_full_declaration() -> None:
    text = """
api: envstack/v0
description: Project env
inherit: true
includes:
  - ~/defaults.envstack.yaml
  - ../shared.yaml
layers:
  - platform/centos7
  - dev-tools/latest
packages:
  - python/3.11
package_options:
  binary_only: false
  repositories: [origin, extra]
  solver: step
contents:
  - bind: ./src
    dest: /opt/src
    readonly: true
environment:
  - set: ROOT
    value: /opt
  - prepend: PATH
    value: /opt/bin
  - append: MANPATH
    value: /opt/man
    separator: ";"
  - comment: hello
  - priority: 10
"""
    decl = parse_declaration(text)

    assert decl.description == "Project env"
    assert decl.inherit is True
    assert decl.includes == ("~/defaults.envstack.yaml", "../shared.yaml")
    assert decl.layers == ("platform/centos7", "dev-tools/latest")
    assert decl.packages == ("python/3.11",)
    assert decl.package_options == PackageOptions(
        binary_only=False, repositories=("origin", "extra"), solver="step"
    )
    assert decl.contents == (BindMount(bind="./src", dest="/opt/src", readonly=True),)
    assert decl.environment == (
        SetEnv("ROOT", "/opt"),
        PrependEnv("PATH", "/opt/bin"),
        AppendEnv("MANPATH", "/opt/man", separator=";"),
        CommentEnv("hello"),
        PriorityEnv(10),
    )


def test_package_options_defaults() -> None:
    decl = parse_declaration("api: envstack/v0\npackage_options: {}\n")
    assert decl.package_options == PackageOptions()
    assert decl.package_options.binary_only is True


@pytest.mark.parametrize(
    "text",
    [
        "",
        "- just\n- a list\n",
        "api: envstack/v0\nlayers: [unterminated\n",
        "api: envstack/v99\n",
        "api: envstack/v0\ninherit: maybe\n",
        "api: envstack/v0\nunknown_field: 1\n",
        "api: envstack/v0\ncontents:\n  - bind: ./x\n",
        "api: envstack/v0\nenvironment:\n  - set: A\n    prepend: B\n    value: c\n",
        "api: envstack/v0\nenvironment:\n  - export: A\n",
        "api: envstack/v0\nenvironment:\n  - priority: high\n",
        "api: envstack/v0\nenvironment:\n  - {set: FOO, value: x, 1: a, b: c}\n",
        "api: envstack/v0\nenvironment:\n  - {1: a, x: b}\n",
    ],
)
def test_invalid_declarations_raise_malformed(text: str) -> None:
    with pytest.raises(MalformedDeclaration) as excinfo:
        parse_declaration(text)
    assert excinfo.value.text == text


def test_unknown_api_message_names_version() -> None:
    with pytest.raises(MalformedDeclaration, match="envstack/v99"):
        parse_declaration("api: envstack/v99\n")


def test_load_stamps_absolute_source_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "decl.yaml"
    path.write_text("api: envstack/v0\nlayers: [base]\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    decl = load_declaration(Path("decl.yaml"))

    assert decl.source_path is not None
    assert decl.source_path.is_absolute()
    assert decl.source_path == tmp_path / "decl.yaml"
    assert decl.base_dir == tmp_path


def test_source_path_is_not_part_of_equality(tmp_path: Path) -> None:
    path = tmp_path / "decl.yaml"
    path.write_text("api: envstack/v0\nlayers: [base]\n", encoding="utf-8")

    assert load_declaration(path) == parse_declaration(path.read_text(encoding="utf-8"))


def test_load_missing_file_raises_read_failed(tmp_path: Path) -> None:
    missing = tmp_path / "nope.yaml"
    with pytest.raises(ReadFailed) as excinfo:
        load_declaration(missing)
    assert excinfo.value.path == missing
    assert isinstance(excinfo.value, OSError)


def test_load_malformed_file_attaches_path(tmp_path: Path) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text("api: envstack/v0\ninherit: maybe\n", encoding="utf-8")

    with pytest.raises(MalformedDeclaration) as excinfo:
        load_declaration(path)

    assert excinfo.value.path == path
    assert excinfo.value.context["path"] == path


def test_validate_requires_source_path() -> None:
    with pytest.raises(ValidationFailed):
        Declaration().validate()


def test_to_dict_round_trips_through_parser() -> None:
    text = """
api: envstack/v0
inherit: true
layers: [a, b]
environment:
  - prepend: PATH
    value: /x
contents:
  - bind: /src
    dest: /dst
"""
    decl = parse_declaration(text)
    data = decl.to_dict()

    assert data["api"] == "envstack/v0"
    assert data["layers"] == ["a", "b"]
    assert data["environment"] == [{"prepend": "PATH", "value": "/x"}]
    assert "includes" not in data


def test_bind_mount_resolve_source(tmp_path: Path) -> None:
    (tmp_path / "src").mkdir()
    mount = BindMount(bind="./src", dest="/opt/src")

    assert mount.resolve_source(tmp_path) == (tmp_path / "src").resolve()

    with pytest.raises(ValidationFailed):
        BindMount(bind="missing", dest="/x").resolve_source(tmp_path)
