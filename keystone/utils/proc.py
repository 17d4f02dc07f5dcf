from __future__ import annotations

import os
from pathlib import Path
from typing import Optional


def read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8").strip()
    except Exception:
        return None


def parse_pids(raw: str) -> list[int]:
    """Extract PIDs from `lsof -t` / `fuser` output.

    `fuser` may suffix PIDs with access letters (e.g. `1234c`), so strip those.
    """

    pids: list[int] = []
    for token in raw.split():
        digits = token.rstrip("cefFrmn")
        if digits.isdigit():
            pid = int(digits)
            if pid not in pids:
                pids.append(pid)
    return pids


def proc_open_holders(target_path: Path, *, proc_root: Path = Path("/proc"), pid_limit: int = 5000) -> list[int]:
    """Best-effort scan of /proc/*/fd to find processes holding a file open.

    Used when neither `lsof` nor `fuser` is installed.
    """

    holders: list[int] = []
    target_str = str(target_path)
    try:
        target_real = str(target_path.resolve()) if target_path.exists() else target_str
    except OSError:
        target_real = target_str

    if not proc_root.exists():
        return []

    checked = 0
    try:
        children = sorted(proc_root.iterdir(), key=lambda p: p.name)
    except OSError:
        return []

    for child in children:
        if checked >= pid_limit:
            break
        if not child.name.isdigit() or not child.is_dir():
            continue
        checked += 1

        fd_dir = child / "fd"
        try:
            for fd in fd_dir.iterdir():
                try:
                    link = os.readlink(fd)
                except OSError:
                    continue
                if link in (target_str, target_real):
                    holders.append(int(child.name))
                    break
        except OSError:
            # Permission denied or the process exited mid-scan.
            continue

    return holders


def process_name(pid: int, *, proc_root: Path = Path("/proc")) -> Optional[str]:
    return read_text(proc_root / str(pid) / "comm")


def is_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but owned by someone else.
        return True
    return True
