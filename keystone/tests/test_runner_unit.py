from __future__ import annotations

import pytest

from keystone.core.errors import FatalError
from keystone.core.model import Step, StepOutcome
from keystone.core.runner import run, run_step


def _step(number: int, name: str, fn) -> Step:
    return Step(number=number, name=name, description=f"Running {name}", runner=fn)


def test_failures_are_isolated(make_ctx) -> None:
    calls = []

    def ok(ctx):
        calls.append("ok")
        return StepOutcome.success("fine")

    def bad(ctx):
        calls.append("bad")
        return StepOutcome.failure("broken")

    def boom(ctx):
        calls.append("boom")
        raise RuntimeError("unexpected")

    failed = run([_step(1, "A", bad), _step(2, "B", boom), _step(3, "C", ok)], make_ctx())

    assert calls == ["bad", "boom", "ok"]
    assert [s.name for s in failed] == ["A", "B"]


def test_skipped_steps_are_not_failures(make_ctx) -> None:
    failed = run([_step(1, "A", lambda ctx: StepOutcome.skipped("tool missing"))], make_ctx())
    assert failed == []


def test_fatal_error_stops_the_pipeline(make_ctx) -> None:
    calls = []

    def fatal(ctx):
        raise FatalError("locked")

    def after(ctx):
        calls.append("after")
        return StepOutcome.success("")

    with pytest.raises(FatalError):
        run([_step(1, "Lock", fatal), _step(2, "After", after)], make_ctx())

    assert calls == []


def test_run_step_records_duration_and_prints_header(make_ctx, caplog) -> None:
    with caplog.at_level("INFO"):
        outcome = run_step(_step(7, "Orphans", lambda ctx: StepOutcome.success("done")), make_ctx())

    assert outcome.status == "success"
    assert outcome.duration_s >= 0
    assert "==> Running Orphans" in caplog.text
    assert "✔ done" in caplog.text
