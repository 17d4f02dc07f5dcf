from __future__ import annotations

from ..core.context import RunContext
from ..core.model import StepOutcome
from ..utils import log_format


def cache_runner(ctx: RunContext) -> StepOutcome:
    if not ctx.has("paccache"):
        return StepOutcome.skipped("'paccache' not found. Install 'pacman-contrib' to enable this feature.")

    keep = ctx.config.cache_versions
    problems: list[str] = []

    log_format.info(f"Removing all cached packages except for the last {keep} versions.")
    if not ctx.gate.run(["paccache", f"-rk{keep}"]).ok:
        problems.append("paccache failed")

    log_format.info("Removing uninstalled package cache.")
    if not ctx.gate.run(["paccache", "-ruk0"]).ok:
        problems.append("paccache (uninstall clean) failed")

    if problems:
        return StepOutcome.failure("; ".join(problems) + ".")
    return StepOutcome.success("Package cache successfully cleaned.")
