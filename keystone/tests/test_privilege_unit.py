from __future__ import annotations

import threading

import pytest

from keystone.core.errors import FatalError
from keystone.core.privilege import SudoKeepAlive, resolve_invoking_user


def test_sudo_user_is_returned() -> None:
    assert resolve_invoking_user(euid=0, environ={"SUDO_USER": "alice"}) == "alice"


@pytest.mark.parametrize(
    ("euid", "environ"),
    [
        (1000, {"SUDO_USER": "alice"}),
        (0, {}),
        (0, {"SUDO_USER": ""}),
        (0, {"SUDO_USER": "root"}),
    ],
)
def test_wrong_privilege_context_is_fatal(euid: int, environ: dict) -> None:
    with pytest.raises(FatalError) as excinfo:
        resolve_invoking_user(euid=euid, environ=environ)
    assert excinfo.value.exit_code == 1


def test_keepalive_refreshes_until_stopped() -> None:
    refreshed = threading.Event()
    keepalive = SudoKeepAlive(interval_s=60.0, refresh=refreshed.set)

    keepalive.start()
    assert refreshed.wait(timeout=2.0)
    assert keepalive.running

    keepalive.stop()
    assert not keepalive.running


def test_keepalive_stop_without_start_is_harmless() -> None:
    SudoKeepAlive(refresh=lambda: None).stop()
