from __future__ import annotations

import threading
from datetime import datetime, timezone
from pathlib import Path

import pytest
import yaml

from envstack.core.utils.io import atomic_write, dump_yaml_string, read_yaml, write_yaml
from envstack.core.utils.time import format_iso8601, parse_iso8601, utc_now


def test_write_yaml_roundtrip(tmp_path: Path) -> None:
    out = tmp_path / "nested" / "data.yaml"
    payload = {"b": 1, "a": {"c": [1, 2, 3]}}
    write_yaml(out, payload)

    assert out.exists()
    assert read_yaml(out) == payload
    # Key order is preserved.
    assert out.read_text(encoding="utf-8").startswith("b: 1")

    write_yaml(out, {"a": 2})
    assert read_yaml(out) == {"a": 2}


def test_read_yaml_missing(tmp_path: Path) -> None:
    missing = tmp_path / "nope.yaml"
    assert read_yaml(missing, default={}) == {}
    with pytest.raises(FileNotFoundError):
        read_yaml(missing, raise_on_error=True)


def test_read_yaml_invalid_returns_default(tmp_path: Path) -> None:
    bad = tmp_path / "bad.yaml"
    bad.write_text("a: [unterminated\n", encoding="utf-8")

    assert read_yaml(bad, default="fallback") == "fallback"
    with pytest.raises(yaml.YAMLError):
        read_yaml(bad, raise_on_error=True)


def test_multiline_strings_use_literal_blocks() -> None:
    assert "|" in dump_yaml_string({"text": "one\ntwo\n"})


def test_concurrent_atomic_writes_produce_valid_yaml(tmp_path: Path) -> None:
    out = tmp_path / "race.yaml"

    def writer(value: int) -> None:
        for _ in range(50):
            write_yaml(out, {"v": value})

    t1 = threading.Thread(target=writer, args=(1,))
    t2 = threading.Thread(target=writer, args=(2,))
    t1.start(); t2.start()
    t1.join(); t2.join()

    assert read_yaml(out).get("v") in (1, 2)
    assert [p.name for p in tmp_path.iterdir()] == ["race.yaml"]


def test_atomic_write_failure_leaves_target_untouched(tmp_path: Path) -> None:
    out = tmp_path / "target.txt"
    out.write_text("original", encoding="utf-8")

    def boom(f) -> None:
        f.write("partial")
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        atomic_write(out, boom)

    assert out.read_text(encoding="utf-8") == "original"
    assert [p.name for p in tmp_path.iterdir()] == ["target.txt"]


def test_iso8601_uses_z_suffix() -> None:
    ts = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    assert format_iso8601(ts) == "2024-01-02T03:04:05Z"
    assert parse_iso8601("2024-01-02T03:04:05Z") == ts
    assert parse_iso8601(datetime(2024, 1, 2, 3, 4, 5)) == ts


def test_utc_now_is_aware_and_second_precision() -> None:
    now = utc_now()
    assert now.tzinfo is not None
    assert now.microsecond == 0
