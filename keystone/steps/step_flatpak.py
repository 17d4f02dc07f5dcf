from __future__ import annotations

from ..core.context import RunContext
from ..core.model import StepOutcome


def flatpak_runner(ctx: RunContext) -> StepOutcome:
    if not ctx.has("flatpak"):
        return StepOutcome.skipped("'flatpak' not found. Skipping.")

    problems: list[str] = []
    if not ctx.gate.run(["flatpak", "update", "--noninteractive"]).ok:
        problems.append("Flatpak update failed")
    if not ctx.gate.run(["flatpak", "uninstall", "--unused", "--noninteractive"]).ok:
        problems.append("Flatpak cleanup failed")

    if problems:
        return StepOutcome.failure("; ".join(problems) + ".")
    return StepOutcome.success("Flatpak packages updated and unused runtimes removed.")
