"""Exception types raised across the draft engine."""

from __future__ import annotations


class CareerDraftError(Exception):
    """Base class for errors surfaced to the caller."""


class PayloadParseError(CareerDraftError, ValueError):
    """A generation response could not be turned into question entries."""


class GenerationError(CareerDraftError):
    """A generation request could not be issued."""


class SubmissionError(CareerDraftError):
    """Creating or updating a posting failed at the submission boundary."""

    def __init__(self, message: str, *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
