"""Single execution gate for every mutating action.

Under dry-run the gate prints the shell-quoted command it would have run and
returns success without touching the system. Steps must never mutate the host
any other way.
"""

from __future__ import annotations

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Iterable, Optional

from ..utils import log_format
from ..utils.subproc import RunResult, quote_command, stream

logger = logging.getLogger(__name__)

Executor = Callable[..., RunResult]


class CommandGate:
    def __init__(self, *, dry_run: bool, interactive: bool, executor: Executor = stream):
        self.dry_run = dry_run
        self.interactive = interactive
        self._executor = executor

    def _dry(self, args: list[str]) -> Optional[RunResult]:
        if not self.dry_run:
            return None
        command_str = quote_command(args)
        log_format.dry_run(command_str)
        return RunResult(command_str=command_str, stdout="", stderr="", exit_code=0)

    def run(self, args: list[str], *, interactive: bool | None = None) -> RunResult:
        dry = self._dry(args)
        if dry is not None:
            return dry
        return self._executor(args, interactive=self.interactive if interactive is None else interactive)

    def remove(self, paths: Iterable[Path]) -> RunResult:
        targets = [Path(p) for p in paths]
        args = ["rm", "-f", "--", *(str(p) for p in targets)]
        dry = self._dry(args)
        if dry is not None:
            return dry

        errors: list[str] = []
        for p in targets:
            try:
                p.unlink(missing_ok=True)
            except OSError as exc:
                errors.append(f"{p}: {exc}")
        return RunResult(
            command_str=quote_command(args),
            stdout="",
            stderr="\n".join(errors),
            exit_code=1 if errors else 0,
        )

    def kill(self, pid: int, sig: int) -> RunResult:
        return self._apply(["kill", f"-{int(sig)}", str(pid)], lambda: os.kill(pid, sig))

    def copy(self, src: Path, dst: Path) -> RunResult:
        return self._apply(["cp", str(src), str(dst)], lambda: shutil.copy2(src, dst))

    def move(self, src: Path, dst: Path) -> RunResult:
        return self._apply(["mv", str(src), str(dst)], lambda: shutil.move(str(src), str(dst)))

    def _apply(self, args: list[str], op: Callable[[], object]) -> RunResult:
        dry = self._dry(args)
        if dry is not None:
            return dry

        command_str = quote_command(args)
        try:
            op()
        except OSError as exc:
            logger.debug("%s failed: %s", command_str, exc)
            return RunResult(command_str=command_str, stdout="", stderr=str(exc), exit_code=1)
        return RunResult(command_str=command_str, stdout="", stderr="", exit_code=0)
