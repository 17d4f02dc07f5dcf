from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .gate import CommandGate
from .model import RunConfig
from ..utils import proc, subproc
from ..utils.paths import SystemPaths
from ..utils.subproc import RunResult

logger = logging.getLogger(__name__)


@dataclass
class RunContext:
    """Everything a step needs: config, the gates and host probes.

    Host probes are plain callables so tests can swap in a fake system.
    """

    config: RunConfig
    run_as_user: str
    gate: CommandGate
    paths: SystemPaths = field(default_factory=SystemPaths)
    query: Callable[[list[str]], RunResult] = subproc.run
    which: Callable[[str], Optional[str]] = subproc.which
    sleep: Callable[[float], None] = time.sleep
    read_input: Callable[[str], str] = input
    is_alive: Callable[[int], bool] = proc.is_alive

    def has(self, tool: str) -> bool:
        return self.which(tool) is not None

    def confirm(self, question: str) -> bool:
        """Ask a yes/no question; default-yes unless interactive and live."""

        if not self.config.interactive or self.config.dry_run:
            return True

        try:
            resp = self.read_input(f"    ? {question} [y/N] ")
        except EOFError:
            resp = ""
        answer = resp.strip().lower() in {"y", "yes"}
        logger.debug("Confirmation %r answered %s", question, "yes" if answer else "no")
        return answer


def build_context(config: RunConfig, *, run_as_user: str, **overrides: Any) -> RunContext:
    executor = overrides.pop("executor", subproc.stream)
    gate = CommandGate(dry_run=config.dry_run, interactive=config.interactive, executor=executor)
    return RunContext(config=config, run_as_user=run_as_user, gate=gate, **overrides)
