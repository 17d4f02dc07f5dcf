from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Iterable

import pytest

from keystone.core.context import RunContext, build_context
from keystone.core.model import RunConfig
from keystone.utils.paths import SystemPaths
from keystone.utils.subproc import RunResult, quote_command


# Safety default: during pytest, never read the real /etc/keystone.conf.
os.environ.setdefault(
    "KEYSTONE_CONFIG_PATH",
    str(Path(tempfile.mkdtemp(prefix="keystone-test-config-")) / "keystone.conf"),
)


class FakeHost:
    """Stand-in for the host: installed tools, query output, executed commands."""

    def __init__(self) -> None:
        self.tools: set[str] = set()
        self.responses: dict[tuple[str, ...], RunResult] = {}
        self.exit_codes: dict[str, int] = {}
        self.queries: list[list[str]] = []
        self.executed: list[list[str]] = []
        self.sleeps: list[float] = []

    def install(self, *tools: str) -> "FakeHost":
        self.tools.update(tools)
        return self

    def respond(self, args: Iterable[str], *, stdout: str = "", stderr: str = "", exit_code: int = 0) -> None:
        args = tuple(args)
        self.responses[args] = RunResult(quote_command(list(args)), stdout, stderr, exit_code)

    def fail(self, program: str, exit_code: int = 1) -> None:
        """Make executed commands whose argv contains *program* exit non-zero."""

        self.exit_codes[program] = exit_code

    def which(self, name: str):
        return f"/usr/bin/{name}" if name in self.tools else None

    def query(self, args: list[str]) -> RunResult:
        self.queries.append(list(args))
        hit = self.responses.get(tuple(args))
        if hit is not None:
            return hit
        return RunResult(quote_command(args), "", "", 0)

    def executor(self, args: list[str], *, interactive: bool) -> RunResult:
        self.executed.append(list(args))
        code = 0
        for program, rc in self.exit_codes.items():
            if program in args:
                code = rc
        return RunResult(quote_command(args), "", "", code)

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)


def _no_prompt(question: str) -> str:
    raise AssertionError(f"unexpected prompt: {question}")


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def sys_paths(tmp_path: Path) -> SystemPaths:
    """A throwaway filesystem layout mirroring the real pacman paths."""

    paths = SystemPaths(
        db_lock=tmp_path / "var/lib/pacman/db.lck",
        pkg_cache=tmp_path / "var/cache/pacman/pkg",
        mirrorlist=tmp_path / "etc/pacman.d/mirrorlist",
        pacnew_root=tmp_path / "etc",
        symlink_roots=(tmp_path / "etc", tmp_path / "usr"),
        proc_root=tmp_path / "proc",
    )
    for d in (paths.db_lock.parent, paths.pkg_cache, paths.mirrorlist.parent, tmp_path / "usr", paths.proc_root):
        d.mkdir(parents=True, exist_ok=True)
    return paths


@pytest.fixture
def make_ctx(host: FakeHost, sys_paths: SystemPaths):
    """Factory for a RunContext wired to the fake host.

    `answers` feeds the confirmation prompt; without it any prompt fails the test.
    """

    def _make(*, answers: list[str] | None = None, alive: Iterable[int] = (), **config) -> RunContext:
        if answers is None:
            read_input = _no_prompt
        else:
            pending = list(answers)

            def read_input(question: str) -> str:
                return pending.pop(0)

        alive_pids = set(alive)
        return build_context(
            RunConfig(**config),
            run_as_user="alice",
            paths=sys_paths,
            query=host.query,
            which=host.which,
            sleep=host.sleep,
            read_input=read_input,
            is_alive=lambda pid: pid in alive_pids,
            executor=host.executor,
        )

    return _make
