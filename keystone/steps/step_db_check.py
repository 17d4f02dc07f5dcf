from __future__ import annotations

from ..core.context import RunContext
from ..core.model import StepOutcome
from ..utils import log_format


def db_check_runner(ctx: RunContext) -> StepOutcome:
    if not ctx.has("pacman"):
        return StepOutcome.skipped("'pacman' not found. Skipping the database check.")

    result = ctx.query(["pacman", "-Dk"])
    if result.ok:
        return StepOutcome.success("Pacman database is consistent.")

    log_format.info("Pacman database consistency check failed with the following issues:")
    for line in (result.stdout + "\n" + result.stderr).splitlines():
        if line.strip():
            log_format.detail(line)
    return StepOutcome.failure(f"pacman -Dk reported problems (exit {result.exit_code}).")
