"""In-memory repositories used by the CLI and tests."""

from __future__ import annotations

import threading
from typing import Any, Iterable

from ..schemas import Application, InterviewSlot, Job


class InMemoryApplicationRepository:
    """Dict-backed job/application store preserving insertion order."""

    def __init__(
        self,
        *,
        jobs: Iterable[Job] = (),
        applications: Iterable[Application] = (),
    ) -> None:
        self._jobs = {job.id: job for job in jobs}
        self._applications = {app.id: app for app in applications}
        self._lock = threading.Lock()

    def add_job(self, job: Job) -> None:
        with self._lock:
            self._jobs[job.id] = job

    def add_application(self, application: Application) -> None:
        with self._lock:
            self._applications[application.id] = application

    def get_job(self, job_id: str) -> Job | None:
        return self._jobs.get(job_id)

    def get_application(self, application_id: str) -> Application | None:
        return self._applications.get(application_id)

    def get_applications(self, job_id: str | None = None) -> list[Application]:
        with self._lock:
            applications = list(self._applications.values())
        if job_id is None:
            return applications
        return [app for app in applications if app.job_id == job_id]

    def update_application(self, application_id: str, patch: dict[str, Any]) -> Application | None:
        with self._lock:
            current = self._applications.get(application_id)
            if current is None:
                return None
            updated = Application.model_validate({**current.model_dump(), **patch})
            self._applications[application_id] = updated
            return updated


class InMemoryInterviewRepository:
    """Dict-backed interview store; snapshots are returned from list()."""

    def __init__(self, interviews: Iterable[InterviewSlot] = ()) -> None:
        self._interviews = {interview.id: interview for interview in interviews}
        self._lock = threading.Lock()

    def get(self, interview_id: str) -> InterviewSlot | None:
        return self._interviews.get(interview_id)

    def add(self, interview: InterviewSlot) -> None:
        with self._lock:
            if interview.id in self._interviews:
                raise KeyError(f"Interview already exists: {interview.id!r}")
            self._interviews[interview.id] = interview

    def save(self, interview: InterviewSlot) -> None:
        with self._lock:
            if interview.id not in self._interviews:
                raise KeyError(f"Unknown interview: {interview.id!r}")
            self._interviews[interview.id] = interview

    def list(
        self,
        *,
        interviewer_email: str | None = None,
        application_id: str | None = None,
    ) -> list[InterviewSlot]:
        with self._lock:
            interviews = list(self._interviews.values())
        if interviewer_email is not None:
            key = interviewer_email.strip().lower()
            interviews = [i for i in interviews if i.interviewer.email.lower() == key]
        if application_id is not None:
            interviews = [i for i in interviews if i.application_id == application_id]
        return interviews
