from __future__ import annotations

from ..core.context import RunContext
from ..core.model import StepOutcome
from ..utils import log_format


def list_orphans(ctx: RunContext) -> list[str]:
    # pacman exits 1 when there is nothing to list; treat that as "none".
    return [line.strip() for line in ctx.query(["pacman", "-Qtdq"]).lines()]


def removal_args(orphans: list[str], *, interactive: bool) -> list[str]:
    args = ["pacman", "-Rns"]
    if not interactive:
        args.append("--noconfirm")
    return [*args, "--", *orphans]


def orphans_runner(ctx: RunContext) -> StepOutcome:
    if not ctx.has("pacman"):
        return StepOutcome.skipped("'pacman' not found. Skipping orphan removal.")

    orphans = list_orphans(ctx)
    if not orphans:
        return StepOutcome.success("No orphan packages found.")

    log_format.info("Orphan packages found:")
    for name in orphans:
        log_format.detail(name)

    if not ctx.confirm(f"Remove these {len(orphans)} orphan packages?"):
        return StepOutcome.skipped("Orphan packages were kept.")

    result = ctx.gate.run(removal_args(orphans, interactive=ctx.config.interactive))
    if not result.ok:
        return StepOutcome.failure("Failed to remove some orphan packages.")
    return StepOutcome.success("Orphan packages successfully removed.")
