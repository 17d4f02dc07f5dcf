from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Profile:
    name: str
    description: str
    include_steps: list[str]  # by step name; empty means every step


PROFILES: dict[str, Profile] = {
    "full": Profile(
        name="full",
        description="Every maintenance step (default)",
        include_steps=[],
    ),
    "update": Profile(
        name="update",
        description="Pre-checks, mirrors and all package updates",
        include_steps=["Network", "Lock", "Partial", "Mirrors", "Upgrade", "AUR", "Flatpak"],
    ),
    "checks": Profile(
        name="checks",
        description="Report-only health checks (no package changes)",
        include_steps=["Pacnew", "Consistency", "Symlinks", "Kernels", "Units"],
    ),
}
