from __future__ import annotations

from ..core.context import RunContext
from ..core.errors import FatalError
from ..core.model import StepOutcome
from ..utils import log_format

PROBE_HOST = "archlinux.org"


def network_runner(ctx: RunContext) -> StepOutcome:
    if not ctx.has("ping"):
        return StepOutcome.skipped("'ping' not found. Skipping the connectivity check.")

    result = ctx.query(["ping", "-c", "1", "-W", "2", PROBE_HOST])
    if result.ok:
        return StepOutcome.success(f"Network OK ({PROBE_HOST} is reachable).")

    log_format.error("Network failed. Updates are likely to fail.")
    if not ctx.confirm("Continue anyway?"):
        raise FatalError("Network check failed and the run was not continued.")
    return StepOutcome.failure(f"Continuing without a connection to {PROBE_HOST}.")
