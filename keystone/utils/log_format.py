from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)

CONSOLE_FORMAT = "%(message)s"
FILE_FORMAT = "%(asctime)s %(message)s"


def step(msg: str) -> None:
    logger.info("\n==> %s", msg)


def info(msg: str) -> None:
    logger.info("    ➜ %s", msg)


def success(msg: str) -> None:
    logger.info("    ✔ %s", msg)


def error(msg: str) -> None:
    logger.error("    ✖ %s", msg)


def detail(msg: str) -> None:
    """Indented verbatim line (file names, package names, tool output)."""

    logger.info("    %s", msg)


def dry_run(command: str) -> None:
    logger.info("    [DRY-RUN] %s", command)


def configure_logging() -> None:
    """Configure root logging for a run.

    If callers already configured logging handlers, we don't override them.
    """

    if logging.getLogger().handlers:
        return

    level = logging.DEBUG if os.environ.get("KEYSTONE_DEBUG") else logging.INFO
    logging.basicConfig(level=level, format=CONSOLE_FORMAT, stream=sys.stdout)


def attach_log_file(path: Path) -> logging.FileHandler:
    """Duplicate everything logged from here on into *path* (append mode).

    Raises OSError when the directory or file cannot be created.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root = logging.getLogger()
    root.addHandler(handler)
    if root.getEffectiveLevel() > logging.INFO:
        root.setLevel(logging.INFO)
    return handler


def detach_log_file(handler: logging.FileHandler | None) -> None:
    if handler is None:
        return
    logging.getLogger().removeHandler(handler)
    handler.close()
