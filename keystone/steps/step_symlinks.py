from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable

from ..core.context import RunContext
from ..core.model import StepOutcome
from ..utils import log_format


def find_broken_symlinks(roots: Iterable[Path]) -> list[Path]:
    """Symlinks whose target does not resolve (dangling or looping).

    Symlinked directories are reported, never descended into.
    """

    broken: list[Path] = []
    for root in roots:
        for dirpath, dirnames, filenames in os.walk(root, onerror=lambda _exc: None):
            for name in (*dirnames, *filenames):
                p = Path(dirpath) / name
                if p.is_symlink() and not p.exists():
                    broken.append(p)
    return sorted(broken)


def symlinks_runner(ctx: RunContext) -> StepOutcome:
    broken = find_broken_symlinks(ctx.paths.symlink_roots)
    if not broken:
        return StepOutcome.success("No broken symbolic links found.")

    for p in broken:
        log_format.detail(str(p))
    return StepOutcome.failure(f"Found {len(broken)} broken symbolic links. Please review and fix them manually.")
