from __future__ import annotations

import subprocess

import pytest

from keystone.utils import subproc

MISSING_TOOL = "keystone-no-such-tool"


def test_run_missing_executable_is_127() -> None:
    result = subproc.run([MISSING_TOOL, "--version"])

    assert result.exit_code == 127
    assert MISSING_TOOL in result.stderr


def test_run_captures_stdout_and_exit_code() -> None:
    result = subproc.run(["sh", "-c", "echo one; echo two >&2; exit 3"])

    assert result.exit_code == 3
    assert result.lines() == ["one"]
    assert result.stderr.strip() == "two"


def test_run_replaces_undecodable_bytes() -> None:
    result = subproc.run(["sh", "-c", "printf 'broken: /usr/share/\\377\\n'"])

    assert result.ok
    assert result.stdout == "broken: /usr/share/\ufffd\n"


def test_stream_missing_executable_is_127() -> None:
    result = subproc.stream([MISSING_TOOL], interactive=False)

    assert result.exit_code == 127


def test_stream_forwards_each_line_to_logging(caplog) -> None:
    with caplog.at_level("INFO", logger="keystone.utils.subproc"):
        result = subproc.stream(["sh", "-c", "echo first; echo second >&2; exit 4"], interactive=False)

    assert result.exit_code == 4
    assert result.stdout == "first\nsecond"
    messages = [r.getMessage() for r in caplog.records if r.name == "keystone.utils.subproc"]
    assert "first" in messages
    assert "second" in messages


def test_stream_replaces_undecodable_bytes(caplog) -> None:
    with caplog.at_level("INFO", logger="keystone.utils.subproc"):
        result = subproc.stream(["sh", "-c", "printf 'pkg \\377\\n'; echo after"], interactive=False)

    assert result.ok
    assert result.stdout == "pkg \ufffd\nafter"


def test_stream_reaps_child_when_reading_fails(monkeypatch) -> None:
    spawned: list[subprocess.Popen] = []
    real_popen = subprocess.Popen

    def recording_popen(*args, **kwargs):
        p = real_popen(*args, **kwargs)
        spawned.append(p)
        return p

    def boom(*_args, **_kwargs):
        raise RuntimeError("log sink failed")

    monkeypatch.setattr(subproc.subprocess, "Popen", recording_popen)
    monkeypatch.setattr(subproc.logger, "info", boom)

    with pytest.raises(RuntimeError):
        subproc.stream(["sh", "-c", "echo started; sleep 30"], interactive=False)

    assert len(spawned) == 1
    # Killed and waited on before the error propagated.
    assert spawned[0].returncode is not None
