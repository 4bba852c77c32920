"""Interview state machine: schedule, reschedule, cancel and friends."""

from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Callable

import pydantic
import structlog

from ..audit import AuditLogger
from ..errors import ConflictError, InvalidTransition, NotFoundError, ValidationError
from ..notifications import InterviewEvent, InterviewNotifier
from ..repositories import ApplicationRepository, InterviewRepository
from ..schemas import InterviewSlot, InterviewStatus, InterviewType, Participant
from .scheduling import InterviewSlotAllocator

ALLOWED_TRANSITIONS: dict[str, frozenset[str]] = {
    "scheduled": frozenset({"confirmed", "rescheduled", "cancelled", "completed"}),
    "confirmed": frozenset({"rescheduled", "cancelled", "completed"}),
    "rescheduled": frozenset({"confirmed", "rescheduled", "cancelled", "completed"}),
    "cancelled": frozenset(),
    "completed": frozenset(),
}


@dataclass
class LifecycleConfig:
    """Side-effect settings for interview transitions."""

    interview_stage_status: str = "interviewed"
    default_duration: int = 60


class InterviewerLocks:
    """One lock per interviewer email, created on first use."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def __call__(self, interviewer_email: str) -> threading.Lock:
        key = interviewer_email.strip().lower()
        with self._guard:
            return self._locks.setdefault(key, threading.Lock())


def _new_interview_id() -> str:
    return f"interview_{uuid.uuid4().hex}"


class InterviewLifecycleManager:
    """Own interview state and keep an interviewer's bookings disjoint.

    The overlap check and the write happen under the interviewer's lock, so
    two concurrent requests for overlapping windows cannot both commit.
    Notifications go out after the write and never undo it.
    """

    def __init__(
        self,
        *,
        applications: ApplicationRepository,
        interviews: InterviewRepository,
        allocator: InterviewSlotAllocator,
        notifier: InterviewNotifier,
        config: LifecycleConfig | None = None,
        audit_logger: AuditLogger | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._applications = applications
        self._interviews = interviews
        self._allocator = allocator
        self._notifier = notifier
        self._config = config or LifecycleConfig()
        self._audit = audit_logger
        self._new_id = id_factory or _new_interview_id
        self._locks = InterviewerLocks()
        self._logger = structlog.get_logger(__name__)

    def schedule(
        self,
        application_id: str,
        interviewer: Participant,
        scheduled_time: datetime,
        duration: int | None = None,
        type: InterviewType = "video",
        location: str | None = None,
        meeting_link: str | None = None,
    ) -> InterviewSlot:
        application = self._applications.get_application(application_id)
        if application is None:
            raise NotFoundError("application", application_id)

        now = self._allocator.now()
        interview = self._build_slot(
            id=self._new_id(),
            application_id=application_id,
            interviewer=interviewer,
            candidate={"name": application.candidate_name, "email": application.candidate_email},
            scheduled_time=_require_aware(scheduled_time),
            duration=duration if duration is not None else self._config.default_duration,
            type=type,
            location=location,
            meeting_link=meeting_link,
            status="scheduled",
            created_at=now,
            updated_at=now,
        )

        with self._locks(interview.interviewer.email):
            self._ensure_free(interview)
            self._interviews.add(interview)

        if self._applications.update_application(
            application_id, {"status": self._config.interview_stage_status}
        ) is None:
            self._logger.warning("interview.application_update_missed", application_id=application_id)

        self._record(interview, previous=None)
        self._notifier.publish(InterviewEvent(kind="scheduled", interview=interview))
        return interview

    def reschedule(
        self,
        interview_id: str,
        new_time: datetime,
        notes: str | None = None,
    ) -> InterviewSlot:
        new_time = _require_aware(new_time)
        interviewer_email = self.get(interview_id).interviewer.email

        with self._locks(interviewer_email):
            current = self.get(interview_id)
            self._check_transition(current, "rescheduled")
            updated = current.model_copy(
                update={
                    "scheduled_time": new_time,
                    "status": "rescheduled",
                    "notes": notes or current.notes,
                    "updated_at": self._allocator.now(),
                }
            )
            self._ensure_free(updated)
            self._interviews.save(updated)

        self._record(updated, previous=current.status)
        self._notifier.publish(InterviewEvent(kind="rescheduled", interview=updated))
        return updated

    def cancel(self, interview_id: str, reason: str | None = None) -> None:
        """Cancel an interview; cancelling a cancelled interview does nothing."""
        interviewer_email = self.get(interview_id).interviewer.email

        with self._locks(interviewer_email):
            current = self.get(interview_id)
            if current.status == "cancelled":
                self._logger.info("interview.cancel_noop", interview_id=interview_id)
                return
            self._check_transition(current, "cancelled")
            updated = current.model_copy(
                update={
                    "status": "cancelled",
                    "notes": reason or current.notes,
                    "updated_at": self._allocator.now(),
                }
            )
            self._interviews.save(updated)

        self._record(updated, previous=current.status)
        self._notifier.publish(InterviewEvent(kind="cancelled", interview=updated, reason=reason))

    def confirm(self, interview_id: str) -> InterviewSlot:
        return self._transition(interview_id, "confirmed")

    def complete(self, interview_id: str) -> InterviewSlot:
        return self._transition(interview_id, "completed")

    def get(self, interview_id: str) -> InterviewSlot:
        interview = self._interviews.get(interview_id)
        if interview is None:
            raise NotFoundError("interview", interview_id)
        return interview

    def list_by_application(self, application_id: str) -> list[InterviewSlot]:
        interviews = self._interviews.list(application_id=application_id)
        return sorted(interviews, key=lambda interview: interview.scheduled_time)

    def upcoming(self, days: int = 7) -> list[InterviewSlot]:
        if days < 0:
            raise ValidationError("days must not be negative")
        now = self._allocator.now()
        horizon = now + timedelta(days=days)
        interviews = [
            interview
            for interview in self._interviews.list()
            if interview.is_active and now <= interview.scheduled_time <= horizon
        ]
        return sorted(interviews, key=lambda interview: interview.scheduled_time)

    def _transition(self, interview_id: str, target: InterviewStatus) -> InterviewSlot:
        interviewer_email = self.get(interview_id).interviewer.email
        with self._locks(interviewer_email):
            current = self.get(interview_id)
            self._check_transition(current, target)
            updated = current.model_copy(
                update={"status": target, "updated_at": self._allocator.now()}
            )
            self._interviews.save(updated)

        self._record(updated, previous=current.status)
        self._notifier.publish(InterviewEvent(kind=target, interview=updated))
        return updated

    def _ensure_free(self, interview: InterviewSlot) -> None:
        conflicts = self._allocator.find_conflicts(
            interview.interviewer.email,
            interview.scheduled_time,
            interview.end_time,
            exclude_id=interview.id,
        )
        if conflicts:
            self._logger.info(
                "interview.conflict",
                interviewer_email=interview.interviewer.email,
                requested=interview.scheduled_time.isoformat(),
                conflicting_ids=[c.id for c in conflicts],
            )
            raise ConflictError(interview.interviewer.email, [c.id for c in conflicts])

    @staticmethod
    def _check_transition(interview: InterviewSlot, target: str) -> None:
        if target not in ALLOWED_TRANSITIONS[interview.status]:
            raise InvalidTransition(interview.id, interview.status, target)

    @staticmethod
    def _build_slot(**fields: Any) -> InterviewSlot:
        try:
            return InterviewSlot(**fields)
        except pydantic.ValidationError as exc:
            raise ValidationError(str(exc)) from exc

    def _record(self, interview: InterviewSlot, *, previous: str | None) -> None:
        self._logger.info(
            f"interview.{interview.status}",
            interview_id=interview.id,
            application_id=interview.application_id,
            interviewer_email=interview.interviewer.email,
            scheduled_time=interview.scheduled_time.isoformat(),
        )
        if self._audit:
            self._audit.append(
                {
                    "interview_id": interview.id,
                    "application_id": interview.application_id,
                    "interviewer_email": interview.interviewer.email,
                    "from": previous,
                    "to": interview.status,
                    "scheduled_time": interview.scheduled_time.isoformat(),
                    "at": interview.updated_at.isoformat(),
                }
            )


def _require_aware(value: datetime) -> datetime:
    if not isinstance(value, datetime):
        raise ValidationError("Interview time must be a datetime")
    if value.tzinfo is None or value.utcoffset() is None:
        raise ValidationError("Interview time must be timezone-aware")
    return value
