from __future__ import annotations

from ..core.context import RunContext
from ..core.model import StepOutcome
from ..utils import log_format


def services_runner(ctx: RunContext) -> StepOutcome:
    if not ctx.has("systemctl"):
        return StepOutcome.skipped("'systemctl' not found. Skipping the unit check.")

    failed_units = ctx.query(["systemctl", "list-units", "--failed", "--no-legend", "--no-pager"]).lines()
    if not failed_units:
        return StepOutcome.success("No failed systemd units.")

    for line in failed_units:
        log_format.detail(line.strip())
    return StepOutcome.failure(f"Found {len(failed_units)} failed systemd units.")
