from __future__ import annotations

import logging
import time
from dataclasses import replace

from .context import RunContext
from .errors import KeystoneError
from .model import Step, StepOutcome
from ..utils import log_format

logger = logging.getLogger(__name__)


def _report(outcome: StepOutcome) -> None:
    if not outcome.message:
        return
    if outcome.status == "success":
        log_format.success(outcome.message)
    elif outcome.status == "failure":
        log_format.error(outcome.message)
    else:
        log_format.info(outcome.message)


def run_step(step: Step, ctx: RunContext) -> StepOutcome:
    """Run one step, turning unexpected exceptions into a failure outcome.

    KeystoneError (fatal pre-conditions) is the only thing that escapes.
    """

    log_format.step(step.description)
    start = time.monotonic()

    try:
        outcome = step.runner(ctx)
    except KeystoneError:
        raise
    except Exception as exc:
        logger.exception("Step %s raised an unexpected error", step.name)
        outcome = StepOutcome.failure(f"{step.name} failed unexpectedly: {exc}")

    duration = time.monotonic() - start
    _report(outcome)
    logger.debug("[%d] %s: %s (%.1fs)", step.number, step.name, outcome.status, duration)

    return replace(outcome, duration_s=duration)


def run(steps: list[Step], ctx: RunContext) -> list[Step]:
    """Run *steps* in order, front to back, and return those that failed.

    A failing step never stops the pipeline.
    """

    failed: list[Step] = []
    for step in steps:
        outcome = run_step(step, ctx)
        if outcome.status == "failure":
            failed.append(step)

    if failed:
        log_format.step("Steps needing attention: " + ", ".join(s.name for s in failed))
    return failed
