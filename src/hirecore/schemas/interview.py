from __future__ import annotations

from datetime import datetime, timedelta
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

InterviewType = Literal["phone", "video", "in-person"]
InterviewStatus = Literal["scheduled", "confirmed", "rescheduled", "cancelled", "completed"]

TERMINAL_STATUSES: frozenset[str] = frozenset({"cancelled", "completed"})


class Participant(BaseModel):
    """Name and email of an interview participant."""

    name: str
    email: str

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("email")
    @classmethod
    def require_email(cls, value: str) -> str:
        value = value.strip()
        if "@" not in value:
            raise ValueError("email must contain '@'")
        return value


class InterviewSlot(BaseModel):
    """Committed interview between a candidate and an interviewer.

    Slots are never deleted; cancellation is a status change so the history
    stays auditable.
    """

    id: str
    application_id: str
    interviewer: Participant
    candidate: Participant
    scheduled_time: datetime
    duration: int = Field(default=60, gt=0)
    type: InterviewType = "video"
    location: str | None = None
    meeting_link: str | None = None
    status: InterviewStatus = "scheduled"
    notes: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(extra="forbid")

    @field_validator("scheduled_time", "created_at", "updated_at")
    @classmethod
    def require_timezone(cls, value: datetime) -> datetime:
        if value.tzinfo is None or value.utcoffset() is None:
            raise ValueError("datetime must be timezone-aware")
        return value

    @model_validator(mode="after")
    def check_venue(self) -> "InterviewSlot":
        if self.type == "phone" and (self.location or self.meeting_link):
            raise ValueError("phone interviews take neither a location nor a meeting link")
        if self.type == "video" and self.location:
            raise ValueError("video interviews take a meeting link, not a location")
        if self.type == "in-person" and self.meeting_link:
            raise ValueError("in-person interviews take a location, not a meeting link")
        return self

    @property
    def end_time(self) -> datetime:
        return self.scheduled_time + timedelta(minutes=self.duration)

    @property
    def is_active(self) -> bool:
        return self.status != "cancelled"
