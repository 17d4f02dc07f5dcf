from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from typing import Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    command_str: str
    stdout: str
    stderr: str
    exit_code: int

    @property
    def ok(self) -> bool:
        return self.exit_code == 0

    def lines(self) -> list[str]:
        return [line for line in self.stdout.splitlines() if line.strip()]


def quote_command(args: list[str]) -> str:
    return " ".join(shlex.quote(p) for p in args)


def which(name: str) -> Optional[str]:
    return shutil.which(name)


def run(
    args: list[str],
    *,
    env_overrides: Mapping[str, str] | None = None,
    timeout_s: float | None = None,
) -> RunResult:
    """Run a read-only query command and capture its output.

    Missing executables are reported as exit code 127, like a shell would.
    """

    command_str = quote_command(args)
    env = {**os.environ, **(env_overrides or {})}

    try:
        proc = subprocess.run(
            args,
            text=True,
            errors="replace",
            capture_output=True,
            env=env,
            timeout=timeout_s,
        )
    except FileNotFoundError:
        return RunResult(command_str=command_str, stdout="", stderr=f"command not found: {args[0]}", exit_code=127)
    except subprocess.TimeoutExpired:
        return RunResult(command_str=command_str, stdout="", stderr=f"timed out after {timeout_s}s", exit_code=124)

    return RunResult(
        command_str=command_str,
        stdout=proc.stdout,
        stderr=proc.stderr,
        exit_code=proc.returncode,
    )


def stream(args: list[str], *, interactive: bool) -> RunResult:
    """Run a command for its side effects.

    Interactive commands keep the terminal so the operator can answer their
    prompts. Otherwise stdout/stderr are merged and forwarded line by line
    through logging, which puts them in the run log as well.
    """

    command_str = quote_command(args)
    logger.debug("Executing: %s", command_str)

    try:
        if interactive:
            proc = subprocess.run(args)
            return RunResult(command_str=command_str, stdout="", stderr="", exit_code=proc.returncode)

        process = subprocess.Popen(
            args,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            text=True,
            errors="replace",
            bufsize=1,
        )
    except FileNotFoundError:
        return RunResult(command_str=command_str, stdout="", stderr=f"command not found: {args[0]}", exit_code=127)

    # For type-checkers: stdout is only None if stdout=DEVNULL/None.
    assert process.stdout is not None

    captured: list[str] = []
    try:
        with process.stdout:
            for line in process.stdout:
                line = line.rstrip("\n")
                captured.append(line)
                logger.info("%s", line)
    except BaseException:
        # Never leave the child running; the next step may need the same lock.
        process.kill()
        process.wait()
        raise
    exit_code = process.wait()

    return RunResult(command_str=command_str, stdout="\n".join(captured), stderr="", exit_code=exit_code)
