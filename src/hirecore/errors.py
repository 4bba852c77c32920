"""Error taxonomy shared by the hiring core."""

from __future__ import annotations


class HiringError(Exception):
    """Base class for hiring core errors."""


class ValidationError(HiringError, ValueError):
    """Raised when caller input is malformed."""


class InvalidTransition(ValidationError):
    """Raised when an interview cannot move to the requested status."""

    def __init__(self, interview_id: str, current: str, target: str):
        super().__init__(f"Interview {interview_id!r} cannot move from {current} to {target}")
        self.interview_id = interview_id
        self.current = current
        self.target = target


class NotFoundError(HiringError, LookupError):
    """Raised when a job, application or interview does not exist."""

    def __init__(self, kind: str, identifier: str):
        super().__init__(f"{kind} not found: {identifier!r}")
        self.kind = kind
        self.identifier = identifier


class ConflictError(HiringError):
    """Raised when an interview window overlaps a committed interview."""

    def __init__(self, interviewer_email: str, conflicting_ids: list[str]):
        super().__init__(
            f"Interviewer {interviewer_email!r} is already booked: {', '.join(conflicting_ids)}"
        )
        self.interviewer_email = interviewer_email
        self.conflicting_ids = conflicting_ids


class AnalysisFailed(HiringError):
    """Raised when the analysis service errors, times out or returns junk.

    Callers treat this as non-fatal and continue without a score.
    """


class NotificationFailed(HiringError):
    """Raised by dispatchers that cannot deliver a message.

    Never propagated past the notifier; only logged.
    """


__all__ = [
    "HiringError",
    "ValidationError",
    "InvalidTransition",
    "NotFoundError",
    "ConflictError",
    "AnalysisFailed",
    "NotificationFailed",
]
