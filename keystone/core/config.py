"""Run configuration: defaults, then /etc/keystone.conf, then CLI flags.

The config file is a flat list of shell-style assignments::

    INTERACTIVE=true
    COUNTRY="DE"
    LOGFILE=/var/log/keystone.log
    SKIP_MIRRORS=false

Malformed content is the operator's responsibility: bad lines are logged and
skipped, there is no schema validation beyond type coercion.
"""

from __future__ import annotations

import dataclasses
import logging
import shlex
from pathlib import Path
from typing import Any, Mapping, Optional

from .model import RunConfig
from ..utils.paths import default_log_file

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on", "y"}
_FALSE = {"0", "false", "no", "off", "n", ""}


def _parse_bool(raw: str) -> Optional[bool]:
    v = raw.strip().lower()
    if v in _TRUE:
        return True
    if v in _FALSE:
        return False
    return None


def parse_config_text(text: str) -> dict[str, str]:
    """Parse `KEY=value` lines into a raw string mapping (later lines win)."""

    values: dict[str, str] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        try:
            tokens = shlex.split(line, comments=True)
        except ValueError as exc:
            logger.warning("Ignoring config line %d: %s", lineno, exc)
            continue
        if not tokens:
            continue
        if tokens[0] == "export":
            tokens = tokens[1:]
        if len(tokens) != 1 or "=" not in tokens[0]:
            logger.warning("Ignoring config line %d: expected KEY=value", lineno)
            continue
        key, _, value = tokens[0].partition("=")
        key = key.strip()
        if not key.isidentifier():
            logger.warning("Ignoring config line %d: invalid key %r", lineno, key)
            continue
        values[key] = value
    return values


def settings_from_raw(raw: Mapping[str, str]) -> dict[str, Any]:
    """Map raw config keys onto RunConfig field names."""

    settings: dict[str, Any] = {}

    for key, value in raw.items():
        if key in {"INTERACTIVE", "DRY_RUN", "UPDATE_MIRRORS", "SKIP_MIRRORS"}:
            flag = _parse_bool(value)
            if flag is None:
                logger.warning("Ignoring %s=%r: expected true/false", key, value)
                continue
            if key == "INTERACTIVE":
                settings["interactive"] = flag
            elif key == "DRY_RUN":
                settings["dry_run"] = flag
            elif key == "UPDATE_MIRRORS":
                settings["update_mirrors"] = flag
            else:
                settings["update_mirrors"] = not flag
        elif key in {"COUNTRY", "REFLECTOR_COUNTRY"}:
            settings["country"] = value.strip() or None
        elif key in {"LOGFILE", "LOG_FILE"}:
            if value.strip():
                settings["log_file"] = Path(value.strip())
        elif key == "CACHE_VER":
            try:
                keep = int(value)
            except ValueError:
                logger.warning("Ignoring CACHE_VER=%r: expected an integer", value)
                continue
            if keep < 0:
                logger.warning("Ignoring CACHE_VER=%r: must not be negative", value)
                continue
            settings["cache_versions"] = keep
        else:
            logger.debug("Unknown config key %s ignored", key)

    return settings


def load_config_file(config_file: Path) -> Optional[dict[str, Any]]:
    """Return settings from *config_file*, or None when it does not exist."""

    if not config_file.is_file():
        return None

    try:
        text = config_file.read_text(encoding="utf-8", errors="replace")
    except OSError as exc:
        logger.warning("Failed to read config %s: %s", config_file, exc)
        return None

    return settings_from_raw(parse_config_text(text))


def default_settings() -> dict[str, Any]:
    return {**dataclasses.asdict(RunConfig()), "log_file": default_log_file()}


def build_run_config(
    *,
    file_settings: Mapping[str, Any] | None = None,
    cli_settings: Mapping[str, Any] | None = None,
) -> RunConfig:
    """Merge defaults, config-file values and CLI values (later wins).

    CLI values of None mean "flag not given" and never override.
    """

    merged = default_settings()
    merged.update(file_settings or {})
    merged.update({k: v for k, v in (cli_settings or {}).items() if v is not None})

    merged["skip_steps"] = tuple(merged.get("skip_steps") or ())

    return RunConfig(**merged)
