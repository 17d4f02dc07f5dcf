from __future__ import annotations

import pytest

from keystone.core.errors import FatalError
from keystone.steps.step_db_lock import db_lock_runner, find_lock_holders


def _lock(sys_paths):
    sys_paths.db_lock.write_text("", encoding="utf-8")
    return sys_paths.db_lock


def test_no_lock_file_is_success(make_ctx, host) -> None:
    outcome = db_lock_runner(make_ctx())

    assert outcome.status == "success"
    assert host.executed == []


def test_held_lock_term_then_kill_then_remove(make_ctx, host, sys_paths, monkeypatch) -> None:
    lock = _lock(sys_paths)
    host.install("lsof")
    host.respond(["lsof", "-t", str(lock)], stdout="4242\n")
    (sys_paths.proc_root / "4242").mkdir()
    (sys_paths.proc_root / "4242" / "comm").write_text("pacman\n", encoding="utf-8")

    signals = []
    monkeypatch.setattr("keystone.core.gate.os.kill", lambda pid, sig: signals.append((pid, int(sig))))

    # Still alive after SIGTERM, so the step escalates.
    outcome = db_lock_runner(make_ctx(interactive=True, answers=["y"], alive=[4242]))

    assert outcome.status == "success"
    assert signals == [(4242, 15), (4242, 9)]
    assert host.sleeps == [2.0]
    assert not lock.exists()


def test_held_lock_no_escalation_when_process_exits(make_ctx, host, sys_paths, monkeypatch) -> None:
    lock = _lock(sys_paths)
    host.install("fuser")
    host.respond(["fuser", str(lock)], stdout=" 777")

    signals = []
    monkeypatch.setattr("keystone.core.gate.os.kill", lambda pid, sig: signals.append((pid, int(sig))))

    outcome = db_lock_runner(make_ctx(alive=[]))

    assert outcome.status == "success"
    assert signals == [(777, 15)]
    assert not lock.exists()


def test_held_lock_declined_is_fatal_and_untouched(make_ctx, host, sys_paths, monkeypatch) -> None:
    lock = _lock(sys_paths)
    host.install("lsof")
    host.respond(["lsof", "-t", str(lock)], stdout="4242\n")
    monkeypatch.setattr("keystone.core.gate.os.kill", lambda pid, sig: pytest.fail("must not signal"))

    with pytest.raises(FatalError):
        db_lock_runner(make_ctx(interactive=True, answers=["n"], alive=[4242]))

    assert lock.exists()


def test_stale_lock_is_offered_for_removal(make_ctx, sys_paths) -> None:
    lock = _lock(sys_paths)

    outcome = db_lock_runner(make_ctx(interactive=True, answers=["yes"]))

    assert outcome.status == "success"
    assert outcome.message == "Removed stale lock file."
    assert not lock.exists()


def test_stale_lock_declined_is_fatal(make_ctx, sys_paths) -> None:
    lock = _lock(sys_paths)

    with pytest.raises(FatalError):
        db_lock_runner(make_ctx(interactive=True, answers=["no"]))

    assert lock.exists()


def test_dry_run_held_lock_only_prints(make_ctx, host, sys_paths, monkeypatch, caplog) -> None:
    lock = _lock(sys_paths)
    host.install("lsof")
    host.respond(["lsof", "-t", str(lock)], stdout="4242\n")
    monkeypatch.setattr("keystone.core.gate.os.kill", lambda pid, sig: pytest.fail("must not signal"))

    with caplog.at_level("INFO"):
        outcome = db_lock_runner(make_ctx(dry_run=True, interactive=True, alive=[4242]))

    assert outcome.status == "success"
    assert outcome.message.startswith("Would")
    assert lock.exists()
    assert "[DRY-RUN] kill -15 4242" in caplog.text
    assert "[DRY-RUN] kill -9 4242" in caplog.text
    assert f"[DRY-RUN] rm -f -- {lock}" in caplog.text


def test_find_lock_holders_falls_back_to_proc_scan(make_ctx, sys_paths) -> None:
    lock = _lock(sys_paths)
    fd_dir = sys_paths.proc_root / "99" / "fd"
    fd_dir.mkdir(parents=True)
    (fd_dir / "3").symlink_to(lock)

    assert find_lock_holders(make_ctx(), lock) == [99]
