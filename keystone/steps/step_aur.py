from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.context import RunContext
from ..core.model import StepOutcome
from ..utils import log_format


@dataclass(frozen=True)
class AurHelper:
    name: str
    upgrade_args: tuple[str, ...]
    noconfirm_flag: str

    def command(self, *, interactive: bool) -> list[str]:
        args = [self.name, *self.upgrade_args]
        if not interactive:
            args.append(self.noconfirm_flag)
        return args


# Probed in this order; the first installed helper wins.
AUR_HELPERS: tuple[AurHelper, ...] = (
    AurHelper(name="paru", upgrade_args=("-Sua",), noconfirm_flag="--noconfirm"),
    AurHelper(name="yay", upgrade_args=("-Sua",), noconfirm_flag="--noconfirm"),
    AurHelper(name="pamac", upgrade_args=("update", "--aur"), noconfirm_flag="--no-confirm"),
    AurHelper(name="pikaur", upgrade_args=("-Syu",), noconfirm_flag="--noconfirm"),
)


def detect_aur_helper(ctx: RunContext) -> Optional[AurHelper]:
    for helper in AUR_HELPERS:
        if ctx.has(helper.name):
            return helper
    return None


def aur_command(helper: AurHelper, *, user: str, interactive: bool) -> list[str]:
    # AUR helpers refuse to build as root; drop back to the invoking user.
    return ["sudo", "-H", "-u", user, "--", *helper.command(interactive=interactive)]


def aur_runner(ctx: RunContext) -> StepOutcome:
    helper = detect_aur_helper(ctx)
    if helper is None:
        return StepOutcome.skipped("No supported AUR helper found. Skipping..")

    log_format.info(f"Found AUR helper: {helper.name}")
    log_format.info(f"Running AUR update as user '{ctx.run_as_user}'...")

    result = ctx.gate.run(aur_command(helper, user=ctx.run_as_user, interactive=ctx.config.interactive))
    if not result.ok:
        return StepOutcome.failure(f"AUR helper {helper.name} failed (exit {result.exit_code}).")
    return StepOutcome.success("AUR successfully updated.")
