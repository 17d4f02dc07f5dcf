from __future__ import annotations

import argparse
import logging
import signal
import time
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

from .config import build_run_config, load_config_file
from .context import build_context
from .errors import FatalError, KeystoneError
from .model import RunConfig, Step
from .privilege import SudoKeepAlive, resolve_invoking_user
from .profiles import PROFILES
from .runner import run
from ..steps.step_defs import steps as all_steps
from ..utils import log_format
from ..utils.paths import DEFAULT_CONFIG_FILE, config_file_path

logger = logging.getLogger(__name__)

INTERRUPT_EXIT_CODE = 130


def _parse_csv(raw: str | None) -> list[str]:
    if raw is None:
        return []
    return [p.strip() for p in raw.replace(" ", ",").split(",") if p.strip()]


def _list_profiles() -> None:
    print("Available profiles:")
    for name, profile in sorted(PROFILES.items()):
        print(f"  {name:<8} - {profile.description}")


def _list_steps() -> None:
    for s in all_steps():
        print(f"  {s.number:>2}  {s.name:<12} - {s.description}")


def select_steps(steps: list[Step], *, profile: str, skip_steps: Iterable[str]) -> list[Step]:
    """Apply a profile and a skip list; raises ValueError on unknown selectors."""

    selected = steps
    include = {n.lower() for n in PROFILES[profile].include_steps}
    if include:
        selected = [s for s in selected if s.name.lower() in include]

    known = {str(s.number) for s in steps} | {s.name.lower() for s in steps}
    skip = {t.lower() for t in skip_steps}
    unknown = sorted(skip - known)
    if unknown:
        raise ValueError(f"Unknown step selector: {unknown[0]!r}")

    return [s for s in selected if str(s.number) not in skip and s.name.lower() not in skip]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="keystone",
        description="Sequenced maintenance for Arch-family systems. Run with sudo.",
        epilog=f"You can set defaults in {DEFAULT_CONFIG_FILE} instead of putting options every time.",
    )
    # Flags default to None so that "not given" never overrides the config file.
    parser.add_argument("-i", "--interactive", action="store_true", default=None, help="Enable interactive mode")
    parser.add_argument(
        "-c",
        "--country",
        metavar="CODE",
        help="Use a two-letter country code with reflector (e.g. US, DE)",
    )
    parser.add_argument("-l", "--logfile", metavar="PATH", type=Path, help="Write log output to the specified file")
    parser.add_argument(
        "-n", "--dry-run", action="store_true", default=None, help="Show what would be done, but make no changes"
    )
    parser.add_argument(
        "-m",
        "--update-mirrors",
        action="store_true",
        default=None,
        help="Refresh the pacman mirrorlist before running updates",
    )
    parser.add_argument("--profile", choices=sorted(PROFILES.keys()), help="Run a predefined subset of steps")
    parser.add_argument("--skip-steps", help="Comma/space-separated list of step numbers or names to skip")
    parser.add_argument("--list-profiles", action="store_true", help="List profiles and exit")
    parser.add_argument("--list-steps", action="store_true", help="List steps and exit")
    return parser


def cli_settings(args: argparse.Namespace) -> dict[str, object]:
    return {
        "interactive": args.interactive,
        "dry_run": args.dry_run,
        "update_mirrors": args.update_mirrors,
        "country": args.country,
        "log_file": args.logfile,
        "profile": args.profile,
        "skip_steps": tuple(_parse_csv(args.skip_steps)) or None,
    }


def load_run_config(args: argparse.Namespace) -> RunConfig:
    config_file = config_file_path()
    file_settings = load_config_file(config_file)
    if file_settings is not None:
        log_format.info(f"Loaded configuration from {config_file}")
    return build_run_config(file_settings=file_settings, cli_settings=cli_settings(args))


def _raise_interrupt(signum, frame) -> None:
    raise KeyboardInterrupt()


def finish(rc: int, *, started: float, keepalive: SudoKeepAlive) -> None:
    """Finalizer: runs however the run ended, once it has started."""

    keepalive.stop()

    if rc != 0:
        log_format.error(f"Script exited with a non-zero status: {rc}.")
    else:
        log_format.success("Script successfully finished.")

    runtime = int(time.monotonic() - started)
    log_format.step(f"Total execution time: {runtime // 60} minutes and {runtime % 60} seconds.")
    log_format.info("Reboot if kernel or other core system components have been updated.")
    logger.info("Log finished at %s", datetime.now().ctime())


def main(argv: Iterable[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.list_profiles:
        _list_profiles()
        return 0

    if args.list_steps:
        _list_steps()
        return 0

    try:
        select_steps(all_steps(), profile=args.profile or "full", skip_steps=_parse_csv(args.skip_steps))
    except ValueError as exc:
        parser.error(str(exc))

    log_format.configure_logging()

    started = time.monotonic()
    keepalive = SudoKeepAlive()
    log_handler: Optional[logging.FileHandler] = None
    previous_sigterm = signal.signal(signal.SIGTERM, _raise_interrupt)
    rc = 0

    try:
        run_as_user = resolve_invoking_user()
        config = load_run_config(args)

        selected = select_steps(all_steps(), profile=config.profile, skip_steps=config.skip_steps)

        if config.log_file is None:
            raise FatalError("No log file configured.")
        try:
            log_handler = log_format.attach_log_file(config.log_file)
        except OSError as exc:
            raise FatalError(f"Could not write to log file {config.log_file}: {exc}") from exc

        logger.info("Log started at %s for user %s", datetime.now().ctime(), run_as_user)
        if config.interactive:
            log_format.info("Running in interactive mode.")
        if config.dry_run:
            log_format.info("Dry-run mode enabled; no changes will be made.")
        else:
            keepalive.start()

        ctx = build_context(config, run_as_user=run_as_user)
        run(selected, ctx)

    except KeystoneError as exc:
        log_format.error(str(exc))
        rc = exc.exit_code
    except KeyboardInterrupt:
        log_format.error("Interrupted.")
        rc = INTERRUPT_EXIT_CODE
    except Exception:
        logger.exception("Unexpected error")
        rc = 1
    finally:
        finish(rc, started=started, keepalive=keepalive)
        log_format.detach_log_file(log_handler)
        signal.signal(signal.SIGTERM, previous_sigterm)

    return rc
