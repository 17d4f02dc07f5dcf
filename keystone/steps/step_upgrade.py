from __future__ import annotations

from ..core.context import RunContext
from ..core.model import StepOutcome
from ..utils import log_format

CONFLICT_WIKI = "https://wiki.archlinux.org/title/Pacman#%22Failed_to_commit_transaction_(conflicting_files)%22_error"


def upgrade_args(interactive: bool) -> list[str]:
    args = ["pacman", "-Syu"]
    if not interactive:
        args += ["--noconfirm", "--needed"]
    return args


def upgrade_runner(ctx: RunContext) -> StepOutcome:
    if not ctx.has("pacman"):
        return StepOutcome.skipped("'pacman' not found. Skipping the system update.")

    result = ctx.gate.run(upgrade_args(ctx.config.interactive))
    if result.ok:
        return StepOutcome.success("System successfully updated.")

    log_format.info("If errors mention 'exists in filesystem', you may need to intervene manually.")
    log_format.info(f"For more info, see: {CONFLICT_WIKI}")
    return StepOutcome.failure(f"System update failed (exit {result.exit_code}). This could be due to file conflicts.")
