from __future__ import annotations


class KeystoneError(Exception):
    """Base class for errors that end a maintenance run."""

    exit_code = 1


class FatalError(KeystoneError):
    """A pre-condition failed; the run stops before (or between) steps."""

    def __init__(self, message: str, *, exit_code: int = 1):
        super().__init__(message)
        self.exit_code = exit_code

