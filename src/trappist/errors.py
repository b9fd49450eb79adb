"""
Error taxonomy for the task spammer.

Every error carries an ``exit_code`` used by the CLI. Errors raised while
submitting a single task derive from :class:`SubmitError`; the scheduler
logs those and moves on to the next tick.
"""

from __future__ import annotations

from typing import Optional


class TrappistError(RuntimeError):
    exit_code: int = 1


class ConfigError(TrappistError):
    """Deployment metadata or settings are missing or malformed."""

    exit_code = 2


class CredentialError(TrappistError):
    """The signing key is absent or malformed."""

    exit_code = 2


class SubmitError(TrappistError):
    """Base class for failures of one submission attempt."""


class SubmissionError(SubmitError):
    """The transaction could not be built or broadcast."""

    exit_code = 3


class ConfirmationError(SubmitError):
    """The transaction was broadcast but not confirmed (timeout or revert).

    The transaction may still be mined; ``tx_hash`` identifies it.
    """

    exit_code = 4

    def __init__(self, message: str, tx_hash: Optional[str] = None) -> None:
        super().__init__(message)
        self.tx_hash = tx_hash
