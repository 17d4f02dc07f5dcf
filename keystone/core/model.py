from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from .context import RunContext


@dataclass(frozen=True)
class RunConfig:
    interactive: bool = False
    dry_run: bool = False
    log_file: Optional[Path] = None
    country: Optional[str] = None
    update_mirrors: bool = False
    cache_versions: int = 2
    profile: str = "full"
    skip_steps: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class StepOutcome:
    status: str  # success|failure|skipped
    message: str = ""
    duration_s: float = 0.0

    @classmethod
    def success(cls, message: str) -> "StepOutcome":
        return cls(status="success", message=message)

    @classmethod
    def failure(cls, message: str) -> "StepOutcome":
        return cls(status="failure", message=message)

    @classmethod
    def skipped(cls, message: str) -> "StepOutcome":
        return cls(status="skipped", message=message)


@dataclass(frozen=True)
class Step:
    number: int
    name: str
    description: str
    runner: Callable[["RunContext"], StepOutcome]
