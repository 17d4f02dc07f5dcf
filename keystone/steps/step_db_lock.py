from __future__ import annotations

import signal
from pathlib import Path

from ..core.context import RunContext
from ..core.errors import FatalError
from ..core.model import StepOutcome
from ..utils import log_format
from ..utils.proc import parse_pids, proc_open_holders, process_name

TERM_GRACE_S = 2.0


def find_lock_holders(ctx: RunContext, lock_file: Path) -> list[int]:
    """Resolve the PIDs holding *lock_file*: lsof, then fuser, then /proc."""

    if ctx.has("lsof"):
        pids = parse_pids(ctx.query(["lsof", "-t", str(lock_file)]).stdout)
        if pids:
            return pids

    if ctx.has("fuser"):
        # fuser prints the file name on stderr and the PIDs on stdout.
        pids = parse_pids(ctx.query(["fuser", str(lock_file)]).stdout)
        if pids:
            return pids

    return proc_open_holders(lock_file, proc_root=ctx.paths.proc_root)


def _remove_lock(ctx: RunContext, lock_file: Path) -> None:
    result = ctx.gate.remove([lock_file])
    if not result.ok:
        raise FatalError(f"Could not remove lock file {lock_file}: {result.stderr}")


def db_lock_runner(ctx: RunContext) -> StepOutcome:
    lock_file = ctx.paths.db_lock
    if not lock_file.exists():
        return StepOutcome.success("Pacman database is not locked.")

    pids = find_lock_holders(ctx, lock_file)

    if not pids:
        log_format.error("A stale pacman DB lock file was found.")
        if not ctx.confirm(f"Remove stale lock file '{lock_file}'?"):
            raise FatalError("Cannot proceed with a locked database. Exiting..")
        _remove_lock(ctx, lock_file)
        if ctx.config.dry_run:
            return StepOutcome.success("Would remove stale lock file.")
        return StepOutcome.success("Removed stale lock file.")

    holders = ", ".join(f"{pid} ({process_name(pid, proc_root=ctx.paths.proc_root) or 'unknown'})" for pid in pids)
    log_format.error(f"Pacman DB lock is held by PID: {holders}")

    pid_list = " ".join(str(pid) for pid in pids)
    if not ctx.confirm(f"Attempt to kill process {pid_list} and remove the lock?"):
        raise FatalError("Cannot proceed with a locked database. Exiting..")

    for pid in pids:
        log_format.info(f"Sending TERM signal (15) to PID {pid}...")
        ctx.gate.kill(pid, signal.SIGTERM)

    ctx.sleep(TERM_GRACE_S)

    for pid in pids:
        if ctx.is_alive(pid):
            log_format.info(f"Process {pid} still running. Sending KILL signal (9).")
            ctx.gate.kill(pid, signal.SIGKILL)

    _remove_lock(ctx, lock_file)
    if ctx.config.dry_run:
        return StepOutcome.success("Would kill the lock holder and remove the lock.")
    return StepOutcome.success("Killed process and removed lock.")
