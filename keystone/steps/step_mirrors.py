from __future__ import annotations

from ..core.context import RunContext
from ..core.model import StepOutcome
from ..utils import log_format


def reflector_args(ctx: RunContext) -> list[str]:
    args = ["reflector"]
    if ctx.config.country:
        args += ["--country", ctx.config.country]
    args += ["--latest", "10", "--sort", "rate", "--save", str(ctx.paths.mirrorlist), "--protocol", "https"]
    return args


def _pacman_mirrors(ctx: RunContext) -> StepOutcome:
    log_format.info("Detected 'pacman-mirrors' (Manjaro). Ranking the 3 fastest mirrors..")
    result = ctx.gate.run(["pacman-mirrors", "--fasttrack", "3"])
    if not result.ok:
        return StepOutcome.failure("pacman-mirrors failed. The mirrorlist was not updated!")
    return StepOutcome.success("Mirrorlist successfully updated by pacman-mirrors.")


def _reflector(ctx: RunContext) -> StepOutcome:
    log_format.info("Detected 'reflector' (Arch Linux).")
    if ctx.config.country:
        log_format.info(f"Using country: {ctx.config.country}")
    else:
        log_format.info("No country specified; using global mirrors..")

    mirrorlist = ctx.paths.mirrorlist
    backup = ctx.paths.mirrorlist_backup
    have_backup = False
    if mirrorlist.exists():
        log_format.info(f"Backing up current mirrorlist to {backup}")
        have_backup = ctx.gate.copy(mirrorlist, backup).ok
        if not have_backup:
            return StepOutcome.failure("Could not back up the mirrorlist. Leaving it untouched.")

    log_format.info("Querying for the 10 latest fastest HTTPS mirrors...")
    result = ctx.gate.run(reflector_args(ctx))
    if result.ok:
        return StepOutcome.success("Mirrorlist successfully updated.")

    if have_backup:
        log_format.info("Reflector failed. Restoring backup mirrorlist..")
        if not ctx.gate.move(backup, mirrorlist).ok:
            return StepOutcome.failure(f"Reflector failed and the backup could not be restored from {backup}.")
        return StepOutcome.failure("Reflector failed. The previous mirrorlist was restored.")
    return StepOutcome.failure("Reflector failed.")


def mirrors_runner(ctx: RunContext) -> StepOutcome:
    if not ctx.config.update_mirrors:
        return StepOutcome.skipped("Mirror refresh not requested (use -m/--update-mirrors).")

    # pacman-mirrors wins on Manjaro, where reflector may also be installed.
    if ctx.has("pacman-mirrors"):
        return _pacman_mirrors(ctx)
    if ctx.has("reflector"):
        return _reflector(ctx)
    return StepOutcome.skipped("Neither 'reflector' nor 'pacman-mirrors' found. Skipping mirror update.")
