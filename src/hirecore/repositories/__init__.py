"""Storage contracts consumed by the hiring core."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from ..schemas import Application, InterviewSlot, Job
from .memory import InMemoryApplicationRepository, InMemoryInterviewRepository


@runtime_checkable
class ApplicationRepository(Protocol):
    """Job/application store owned by the surrounding application.

    The core reads jobs and applications and patches application status; it
    never creates either.
    """

    def get_job(self, job_id: str) -> Job | None:
        """Return the job or None when unknown."""

    def get_application(self, application_id: str) -> Application | None:
        """Return the application or None when unknown."""

    def get_applications(self, job_id: str | None = None) -> list[Application]:
        """Return applications in insertion order, optionally for one job."""

    def update_application(self, application_id: str, patch: dict[str, Any]) -> Application | None:
        """Apply a partial update and return the stored application."""


@runtime_checkable
class InterviewRepository(Protocol):
    """Interview store written by the lifecycle manager."""

    def get(self, interview_id: str) -> InterviewSlot | None:
        """Return the interview or None when unknown."""

    def add(self, interview: InterviewSlot) -> None:
        """Persist a new interview."""

    def save(self, interview: InterviewSlot) -> None:
        """Replace a stored interview with an updated copy."""

    def list(
        self,
        *,
        interviewer_email: str | None = None,
        application_id: str | None = None,
    ) -> list[InterviewSlot]:
        """Return interviews matching the given filters."""


__all__ = [
    "ApplicationRepository",
    "InterviewRepository",
    "InMemoryApplicationRepository",
    "InMemoryInterviewRepository",
]
