from __future__ import annotations

import logging
import os
import subprocess
import threading
from typing import Callable, Mapping, Optional

from .errors import FatalError

logger = logging.getLogger(__name__)

KEEPALIVE_INTERVAL_S = 45.0


def resolve_invoking_user(*, euid: int | None = None, environ: Mapping[str, str] | None = None) -> str:
    """Return the account that delegated root to us via sudo.

    Raises FatalError when not root, or when root was not obtained through sudo
    from a regular account.
    """

    uid = os.geteuid() if euid is None else euid
    env = os.environ if environ is None else environ

    if uid != 0:
        raise FatalError("This script must be run with sudo.")

    user = (env.get("SUDO_USER") or "").strip()
    if not user or user == "root":
        raise FatalError("This script should be run with sudo, not directly as root.")
    return user


def _refresh_sudo() -> None:
    subprocess.run(
        ["sudo", "-n", "true"],
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        check=False,
    )


class SudoKeepAlive:
    """Background loop that keeps the sudo timestamp fresh during long runs.

    Shares no state with the pipeline; stop() is safe to call at any time,
    including when the loop was never started.
    """

    def __init__(
        self,
        *,
        interval_s: float = KEEPALIVE_INTERVAL_S,
        refresh: Callable[[], None] = _refresh_sudo,
    ):
        self.interval_s = interval_s
        self._refresh = refresh
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        t = self._thread
        return t is not None and t.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._loop, name="sudo-keepalive", daemon=True)
        self._thread.start()

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self._refresh()
            except OSError as exc:
                logger.debug("sudo refresh failed: %s", exc)
            self._stop_event.wait(self.interval_s)

    def stop(self) -> None:
        self._stop_event.set()
        t = self._thread
        self._thread = None
        if t is not None:
            t.join(timeout=2.0)
            if t.is_alive():
                logger.warning("sudo keep-alive thread did not stop within timeout")
