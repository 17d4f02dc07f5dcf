from __future__ import annotations

from ..core.model import Step
from .step_aur import aur_runner
from .step_cache import cache_runner
from .step_db_check import db_check_runner
from .step_db_lock import db_lock_runner
from .step_flatpak import flatpak_runner
from .step_kernels import kernels_runner
from .step_mirrors import mirrors_runner
from .step_network import network_runner
from .step_orphans import orphans_runner
from .step_pacfiles import pacfiles_runner
from .step_partial import partial_runner
from .step_services import services_runner
from .step_symlinks import symlinks_runner
from .step_upgrade import upgrade_runner


def steps() -> list[Step]:
    """The maintenance catalog, in execution order."""

    return [
        Step(1, "Network", "Checking network connectivity..", network_runner),
        Step(2, "Lock", "Checking for pacman database lock..", db_lock_runner),
        Step(3, "Partial", "Cleaning partial package downloads...", partial_runner),
        Step(4, "Mirrors", "Updating pacman mirrorlist...", mirrors_runner),
        Step(5, "Upgrade", "Performing full system update...", upgrade_runner),
        Step(6, "AUR", "Updating AUR packages...", aur_runner),
        Step(7, "Orphans", "Removing orphan packages...", orphans_runner),
        Step(8, "Cache", "Cleaning package cache...", cache_runner),
        Step(9, "Pacnew", "Checking for .pacnew and .pacsave files", pacfiles_runner),
        Step(10, "Consistency", "Checking pacman database consistency", db_check_runner),
        Step(11, "Symlinks", "Checking for broken symbolic links", symlinks_runner),
        Step(12, "Kernels", "Checking installed kernels...", kernels_runner),
        Step(13, "Units", "Checking for failed systemd units...", services_runner),
        Step(14, "Flatpak", "Updating Flatpak packages...", flatpak_runner),
    ]
