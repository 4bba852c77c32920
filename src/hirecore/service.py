"""Operations exposed to the surrounding web/API layer."""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import pendulum
import structlog

from .analysis import AnalysisGateway
from .core import (
    CandidateRanker,
    DuplicateDetector,
    DuplicateMatch,
    InterviewLifecycleManager,
    InterviewSlotAllocator,
    RankingEntry,
    TimeWindow,
)
from .errors import AnalysisFailed, NotFoundError
from .repositories import (
    ApplicationRepository,
    InMemoryApplicationRepository,
    InMemoryInterviewRepository,
)
from .schemas import (
    AnalysisResult,
    Application,
    CandidateIdentity,
    InterviewSlot,
    InterviewType,
    Job,
    Participant,
    round_half_up,
)


class HiringService:
    """Facade over the evaluation and scheduling components."""

    def __init__(
        self,
        *,
        applications: ApplicationRepository,
        gateway: AnalysisGateway,
        detector: DuplicateDetector,
        ranker: CandidateRanker,
        allocator: InterviewSlotAllocator,
        lifecycle: InterviewLifecycleManager,
    ) -> None:
        self._applications = applications
        self._gateway = gateway
        self._detector = detector
        self._ranker = ranker
        self._allocator = allocator
        self._lifecycle = lifecycle
        self._logger = structlog.get_logger(__name__)

    def detect_duplicates(
        self, identity: CandidateIdentity, job_id: str | None = None
    ) -> DuplicateMatch:
        return self._detector.detect(identity, job_id)

    def rank_candidates(self, job_id: str) -> list[RankingEntry]:
        return self._ranker.rank(job_id)

    def available_slots(
        self, interviewer_email: str, interviewer_name: str, duration_minutes: int = 60
    ) -> list[TimeWindow]:
        return self._allocator.available_slots(interviewer_email, interviewer_name, duration_minutes)

    def schedule_interview(
        self,
        application_id: str,
        interviewer: Participant,
        scheduled_time: datetime,
        duration: int | None = None,
        type: InterviewType = "video",
        location: str | None = None,
        meeting_link: str | None = None,
    ) -> InterviewSlot:
        return self._lifecycle.schedule(
            application_id,
            interviewer,
            scheduled_time,
            duration,
            type,
            location=location,
            meeting_link=meeting_link,
        )

    def reschedule_interview(
        self, interview_id: str, new_time: datetime, notes: str | None = None
    ) -> InterviewSlot:
        return self._lifecycle.reschedule(interview_id, new_time, notes)

    def cancel_interview(self, interview_id: str, reason: str | None = None) -> None:
        self._lifecycle.cancel(interview_id, reason)

    def list_interviews(self, application_id: str) -> list[InterviewSlot]:
        return self._lifecycle.list_by_application(application_id)

    def upcoming_interviews(self, days: int = 7) -> list[InterviewSlot]:
        return self._lifecycle.upcoming(days)

    def analyze_application(self, application_id: str, resume_text: str) -> AnalysisResult | None:
        """Score an application; returns None when the analysis service fails."""
        application = self._applications.get_application(application_id)
        if application is None:
            raise NotFoundError("application", application_id)
        job = self._applications.get_job(application.job_id)
        if job is None:
            raise NotFoundError("job", application.job_id)

        try:
            result = self._gateway.analyze(
                job_title=job.title,
                job_requirements=job.requirements,
                resume_text=resume_text,
                company_description=job.company_description,
            )
        except AnalysisFailed as exc:
            self._logger.warning(
                "analysis.skipped", application_id=application_id, error=str(exc)
            )
            return None

        ai_score = round_half_up(result.overall_score)
        self._applications.update_application(
            application_id, {"ai_score": ai_score, "ai_analysis": result.model_dump()}
        )
        self._logger.info("analysis.stored", application_id=application_id, ai_score=ai_score)
        return result

    def suggest_interview_questions(self, application_id: str) -> list[str]:
        """Targeted questions from a stored analysis; empty when unavailable."""
        application = self._applications.get_application(application_id)
        if application is None:
            raise NotFoundError("application", application_id)
        job = self._applications.get_job(application.job_id)
        if job is None:
            raise NotFoundError("job", application.job_id)
        analysis = application.ai_analysis or AnalysisResult()

        try:
            return self._gateway.generate_interview_questions(
                job_title=job.title,
                job_requirements=job.requirements,
                strengths=analysis.strengths,
                weaknesses=analysis.weaknesses,
            )
        except AnalysisFailed as exc:
            self._logger.warning(
                "analysis.questions_skipped", application_id=application_id, error=str(exc)
            )
            return []


@dataclass(slots=True)
class Snapshot:
    """Jobs, applications and interviews loaded from a JSON document."""

    applications: InMemoryApplicationRepository
    interviews: InMemoryInterviewRepository


class SnapshotLoader:
    """Load a JSON snapshot into in-memory repositories."""

    def load(self, path: Path) -> Snapshot:
        with path.open("r", encoding="utf-8") as handle:
            try:
                data = json.load(handle)
            except json.JSONDecodeError as exc:
                raise ValueError(f"Invalid snapshot JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError("Snapshot must be a JSON object")

        jobs = [Job.model_validate(item) for item in data.get("jobs", [])]
        applications = [Application.model_validate(item) for item in data.get("applications", [])]
        interviews = [InterviewSlot.model_validate(item) for item in data.get("interviews", [])]
        return Snapshot(
            applications=InMemoryApplicationRepository(jobs=jobs, applications=applications),
            interviews=InMemoryInterviewRepository(interviews),
        )


def json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return pendulum.instance(value).to_iso8601_string()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
