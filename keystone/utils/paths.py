"""Filesystem locations Keystone reads or mutates.

Kept in one place so tests can point every step at a temporary tree.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path


DEFAULT_CONFIG_FILE = Path("/etc/keystone.conf")


@dataclass(frozen=True)
class SystemPaths:
    db_lock: Path = Path("/var/lib/pacman/db.lck")
    pkg_cache: Path = Path("/var/cache/pacman/pkg")
    mirrorlist: Path = Path("/etc/pacman.d/mirrorlist")
    pacnew_root: Path = Path("/etc")
    symlink_roots: tuple[Path, ...] = field(default_factory=lambda: (Path("/etc"), Path("/usr")))
    proc_root: Path = Path("/proc")

    @property
    def mirrorlist_backup(self) -> Path:
        return self.mirrorlist.with_name(self.mirrorlist.name + ".bak")


def config_file_path() -> Path:
    """Return the Keystone config file path.

    Priority:
    - KEYSTONE_CONFIG_PATH (explicit file override)
    - /etc/keystone.conf
    """

    p = os.environ.get("KEYSTONE_CONFIG_PATH")
    if p:
        return Path(p)
    return DEFAULT_CONFIG_FILE


def default_log_file(today: date | None = None) -> Path:
    day = today or date.today()
    return Path("/var/log") / f"keystone-{day.isoformat()}.log"
