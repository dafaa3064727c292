from __future__ import annotations

import pytest

from envstack.core.declaration import generate_startup_script, get_priority, parse_env_op
from envstack.core.declaration.environment import (
    DEFAULT_PRIORITY,
    AppendEnv,
    CommentEnv,
    EnvOpError,
    PrependEnv,
    PriorityEnv,
    SetEnv,
    env_op_to_dict,
)


def test_parse_each_operation_kind() -> None:
    assert parse_env_op({"set": "A", "value": "1"}) == SetEnv("A", "1")
    assert parse_env_op({"prepend": "PATH", "value": "/x"}) == PrependEnv("PATH", "/x")
    assert parse_env_op({"append": "PATH", "value": "/y", "separator": ";"}) == AppendEnv("PATH", "/y", ";")
    assert parse_env_op({"comment": "note"}) == CommentEnv("note")
    assert parse_env_op({"priority": 5}) == PriorityEnv(5)


@pytest.mark.parametrize(
    "raw",
    [
        "set A=1",
        {},
        {"set": "A"},
        {"set": "A", "value": "1", "separator": ":"},
        {"comment": "x", "priority": 1},
        {"priority": True},
        {"set": "FOO", "value": "x", 1: "a", "b": "c"},
        {1: "a", "x": "b"},
    ],
)
def test_parse_rejects_bad_shapes(raw) -> None:
    with pytest.raises(EnvOpError):
        parse_env_op(raw)


def test_env_op_to_dict_matches_file_form() -> None:
    raw = {"append": "PATH", "value": "/y", "separator": ";"}
    assert env_op_to_dict(parse_env_op(raw)) == raw
    assert env_op_to_dict(PrependEnv("PATH", "/x")) == {"prepend": "PATH", "value": "/x"}


def test_startup_script_renders_in_order() -> None:
    script = generate_startup_script(
        [
            CommentEnv("project setup"),
            SetEnv("ROOT", "/opt/env"),
            PrependEnv("PATH", "/opt/env/bin"),
            AppendEnv("MANPATH", "/opt/env/man", separator=";"),
            PriorityEnv(10),
        ]
    )

    assert script.splitlines() == [
        "#!/bin/sh",
        "# generated by envstack",
        "# project setup",
        'export ROOT="/opt/env"',
        'export PATH="/opt/env/bin:${PATH}"',
        'export MANPATH="${MANPATH};/opt/env/man"',
    ]


def test_startup_script_escapes_shell_metacharacters() -> None:
    script = generate_startup_script([SetEnv("MSG", 'say "hi" $USER `cmd` \\n')])
    assert 'export MSG="say \\"hi\\" \\$USER \\`cmd\\` \\\\n"' in script


def test_priority_defaults_and_last_wins() -> None:
    assert get_priority([]) == DEFAULT_PRIORITY == 50
    assert get_priority([SetEnv("A", "1")]) == 50
    assert get_priority([PriorityEnv(10), SetEnv("A", "1"), PriorityEnv(99)]) == 99
