from __future__ import annotations

import os
from pathlib import Path

from ..core.context import RunContext
from ..core.model import StepOutcome
from ..utils import log_format


def scan_pacnew(root: Path) -> list[Path]:
    found: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(root, onerror=lambda _exc: None):
        for name in filenames:
            if name.endswith(".pacnew"):
                found.append(Path(dirpath) / name)
    return sorted(found)


def _scan_without_pacdiff(ctx: RunContext) -> StepOutcome:
    log_format.info("'pacdiff' not found. Install 'pacman-contrib' to enable this feature.")
    root = ctx.paths.pacnew_root
    pacfiles = scan_pacnew(root)
    if not pacfiles:
        return StepOutcome.success(f"No .pacnew files found in {root}.")

    for p in pacfiles:
        log_format.detail(str(p))
    return StepOutcome.failure(f"Found {len(pacfiles)} .pacnew files. Please resolve them manually.")


def pacfiles_runner(ctx: RunContext) -> StepOutcome:
    if not ctx.has("pacdiff"):
        return _scan_without_pacdiff(ctx)

    pending = ctx.query(["pacdiff", "-o"]).lines()
    if not pending:
        return StepOutcome.success("No .pacnew/.pacsave files found.")

    log_format.info(f"Found {len(pending)} .pacnew/.pacsave files.")
    if not ctx.config.interactive:
        log_format.info("Listing files. Please review them manually later.")
        for line in pending:
            log_format.detail(line)
        return StepOutcome.failure("Pending .pacnew/.pacsave files need manual review.")

    log_format.info("Launching 'pacdiff' to resolve conflicts...")
    result = ctx.gate.run(["pacdiff"], interactive=True)
    if not result.ok:
        return StepOutcome.failure(f"pacdiff exited with status {result.exit_code}.")
    return StepOutcome.success("Pacdiff session finished.")
