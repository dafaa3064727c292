from __future__ import annotations

import json
from pathlib import Path

import pytest

from envstack.cli._dispatcher import build_parser, main
from envstack.core.declaration import load_declaration

DIGEST_A = "A" * 52
DIGEST_B = "B" * 52


@pytest.fixture
def tags_file(tmp_path: Path) -> Path:
    path = tmp_path / "tags.yaml"
    path.write_text(f"base: {DIGEST_A}\ntools: {DIGEST_B}\n", encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path, write_declaration) -> Path:
    root = tmp_path / "project"
    write_declaration(root, layers=["base", "tools"])
    return root


def test_parser_registers_all_commands() -> None:
    parser = build_parser()
    subparsers = parser._subparsers._group_actions[0].choices
    assert {"init", "show", "lock", "check"} <= set(subparsers)


def test_no_command_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    assert "usage: envstack" in capsys.readouterr().out


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert "envstack" in capsys.readouterr().out


@pytest.mark.parametrize("template", ["minimal", "standard", "full"])
def test_init_renders_parseable_templates(tmp_path: Path, template: str) -> None:
    target = tmp_path / template
    target.mkdir()

    rc = main(["init", str(target), "--template", template, "--inherit", "--layer", "base", "--layer", "tools"])

    assert rc == 0
    decl = load_declaration(target / ".envstack.yaml")
    assert decl.inherit is True
    assert decl.layers == ("base", "tools")


@pytest.mark.parametrize("template", ["minimal", "standard", "full"])
def test_init_without_layers(tmp_path: Path, template: str) -> None:
    assert main(["init", str(tmp_path), "--template", template]) == 0

    decl = load_declaration(tmp_path / ".envstack.yaml")
    assert decl.inherit is False
    assert decl.layers == ()


def test_init_refuses_to_overwrite(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["init", str(tmp_path)]) == 0
    original = (tmp_path / ".envstack.yaml").read_text(encoding="utf-8")

    assert main(["init", str(tmp_path), "--template", "minimal"]) == 1
    assert "already exists" in capsys.readouterr().err
    assert (tmp_path / ".envstack.yaml").read_text(encoding="utf-8") == original


def test_show_table(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["show", "-f", str(project)]) == 0

    out = capsys.readouterr().out
    assert "Discovered Files:" in out
    assert "Layer Stack:" in out
    assert "1. base" in out
    assert "2. tools" in out


def test_show_layers_only(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["show", "-f", str(project), "--layers"]) == 0

    out = capsys.readouterr().out
    assert "Layer Stack:" in out
    assert "Discovered Files:" not in out


def test_show_json(project: Path, tmp_path: Path, write_declaration, capsys: pytest.CaptureFixture[str]) -> None:
    extra = write_declaration(tmp_path / "extra.yaml", layers=["extra"])

    assert main(["show", "-f", str(project), "-i", str(extra), "--format", "json"]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["composed"]["layers"] == ["extra", "base", "tools"]
    assert len(report["files"]) == 2


def test_show_yaml(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    import yaml

    assert main(["show", "-f", str(project), "--format", "yaml"]) == 0

    report = yaml.safe_load(capsys.readouterr().out)
    assert report["composed"]["layers"] == ["base", "tools"]


def test_show_reports_missing_declaration(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()

    assert main(["show", "-f", str(empty), "--no-inherit"]) == 1

    err = capsys.readouterr().err
    assert "Error:" in err
    assert ".envstack.yaml not found" in err


def test_show_json_error_payload(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    empty = tmp_path / "empty"
    empty.mkdir()

    assert main(["show", "-f", str(empty), "-n", "--format", "json"]) == 1

    payload = json.loads(capsys.readouterr().err)
    assert payload["code"] == "NotFoundAtPath"


def test_lock_lifecycle(project: Path, tags_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    lock_path = project / ".envstack.lock.yaml"

    assert main(["lock", "-f", str(project), "--tags", str(tags_file)]) == 0
    assert lock_path.exists()

    # Existing lock is not overwritten without --update/--force.
    assert main(["lock", "-f", str(project), "--tags", str(tags_file)]) == 1
    assert main(["lock", "-f", str(project), "--tags", str(tags_file), "--update"]) == 0

    assert main(["lock", "-f", str(project), "--tags", str(tags_file), "--check"]) == 0
    assert "up to date" in capsys.readouterr().out

    decl = project / ".envstack.yaml"
    decl.write_text(decl.read_text(encoding="utf-8") + "# edited\n", encoding="utf-8")
    assert main(["lock", "-f", str(project), "--tags", str(tags_file), "--check"]) == 1
    assert "was modified" in capsys.readouterr().out


def test_lock_check_without_lock_file(project: Path, tags_file: Path) -> None:
    assert main(["lock", "-f", str(project), "--tags", str(tags_file), "--check"]) == 2


def test_lock_reads_tags_from_environment(
    project: Path, tags_file: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("ENVSTACK_TAGS", str(tags_file))

    assert main(["lock", "-f", str(project)]) == 0


def test_lock_unknown_layer_fails(project: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["lock", "-f", str(project)]) == 1

    err = capsys.readouterr().err
    assert "Unknown layer reference: base" in err
    assert not (project / ".envstack.lock.yaml").exists()


def test_check_exit_codes(project: Path, tags_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    args = ["check", "-f", str(project), "--tags", str(tags_file)]

    assert main(args) == 2
    assert main(args + ["--strict"]) == 1

    assert main(["lock", "-f", str(project), "--tags", str(tags_file)]) == 0
    assert main(args) == 0
    assert main(args + ["--strict"]) == 0
    capsys.readouterr()

    retagged = tags_file.parent / "retagged.yaml"
    retagged.write_text(f"base: {DIGEST_A}\ntools: {DIGEST_A}\n", encoding="utf-8")
    drift_args = ["check", "-f", str(project), "--tags", str(retagged)]

    assert main(drift_args) == 0
    out = capsys.readouterr().out
    assert "Layer 'tools' digest changed" in out
    assert "envstack lock --update" in out

    assert main(drift_args + ["--strict"]) == 1


def test_check_json_reports_changes(project: Path, tags_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["lock", "-f", str(project), "--tags", str(tags_file)]) == 0
    capsys.readouterr()

    retagged = tags_file.parent / "retagged.yaml"
    retagged.write_text(f"base: {DIGEST_B}\ntools: {DIGEST_B}\n", encoding="utf-8")

    assert main(["check", "-f", str(project), "--tags", str(retagged), "--json"]) == 0

    report = json.loads(capsys.readouterr().out)
    assert report["status"] == "drift"
    assert [c["kind"] for c in report["changes"]] == ["layer_digest_changed"]


def test_verbosity_maps_to_log_levels(monkeypatch: pytest.MonkeyPatch) -> None:
    import logging

    from envstack.cli._logging import level_for

    assert level_for(0, False) == logging.WARNING
    assert level_for(1, False) == logging.INFO
    assert level_for(2, False) == logging.DEBUG
    assert level_for(2, True) == logging.ERROR

    monkeypatch.setenv("ENVSTACK_LOG_LEVEL", "debug")
    assert level_for(0, False) == logging.DEBUG
    monkeypatch.setenv("ENVSTACK_LOG_LEVEL", "nonsense")
    assert level_for(0, False) == logging.WARNING


@pytest.mark.parametrize("template", ["minimal", "standard", "full"])
def test_init_writes_layers_as_strings(tmp_path: Path, template: str) -> None:
    rc = main(
        ["init", str(tmp_path), "--template", template,
         "--layer", "1.0", "--layer", "true", "--layer", "a: b", "--layer", "#tag"]
    )

    assert rc == 0
    decl = load_declaration(tmp_path / ".envstack.yaml")
    assert decl.layers == ("1.0", "true", "a: b", "#tag")
