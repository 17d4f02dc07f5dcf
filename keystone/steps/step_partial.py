from __future__ import annotations

from pathlib import Path

from ..core.context import RunContext
from ..core.model import StepOutcome
from ..utils import log_format


def find_partial_downloads(cache_dir: Path) -> list[Path]:
    if not cache_dir.is_dir():
        return []
    return sorted(p for p in cache_dir.rglob("*") if p.name.lower().endswith(".part") and p.is_file())


def partial_runner(ctx: RunContext) -> StepOutcome:
    partial_files = find_partial_downloads(ctx.paths.pkg_cache)
    if not partial_files:
        return StepOutcome.success("No partial download files found.")

    log_format.info(f"Found and removing {len(partial_files)} partial downloads:")
    for p in partial_files:
        log_format.detail(str(p))

    result = ctx.gate.remove(partial_files)
    if not result.ok:
        return StepOutcome.failure(f"Could not remove some partial downloads: {result.stderr}")
    return StepOutcome.success(f"Removed {len(partial_files)} partial downloads.")
