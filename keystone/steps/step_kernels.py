from __future__ import annotations

import platform
import re
from typing import Iterable

from ..core.context import RunContext
from ..core.model import StepOutcome
from ..utils import log_format

# Official kernel package names only; custom AUR kernels are not judged.
KERNEL_RE = re.compile(r"^linux(-lts|-zen|-hardened)?$|^linux[0-9]+$")


def kernel_packages(names: Iterable[str]) -> list[str]:
    return sorted({n.strip() for n in names if KERNEL_RE.match(n.strip())})


def find_eol_kernels(installed: Iterable[str], available: Iterable[str]) -> list[str]:
    return sorted(set(installed) - set(available))


def kernels_runner(ctx: RunContext) -> StepOutcome:
    if not ctx.has("pacman"):
        return StepOutcome.skipped("'pacman' not found. Skipping the kernel check.")

    log_format.info(f"Currently running kernel: {platform.release()}")

    installed = kernel_packages(ctx.query(["pacman", "-Qq"]).lines())
    if not installed:
        return StepOutcome.skipped("No standard kernel packages detected.")

    log_format.info("Installed kernel packages:")
    for name in installed:
        log_format.detail(name)

    available = kernel_packages(ctx.query(["pacman", "-Ssq"]).lines())
    eol = find_eol_kernels(installed, available)
    if not eol:
        return StepOutcome.success("All installed kernels are supported.")

    log_format.info("The following installed kernels are End of Life (EOL) or no longer in the repositories:")
    for name in eol:
        log_format.detail(name)
    log_format.info("It is highly recommended to switch to a supported kernel and remove these.")
    return StepOutcome.failure(f"{len(eol)} installed kernel(s) are no longer available: {', '.join(eol)}")
