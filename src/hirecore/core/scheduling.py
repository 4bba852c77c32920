"""Interview slot generation and overlap checks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from itertools import islice
from typing import Any, Callable, Iterator

import pendulum
import structlog

from ..errors import ValidationError
from ..repositories import InterviewRepository
from ..schemas import InterviewSlot


@dataclass
class SchedulingConfig:
    """Business calendar used to propose interview slots."""

    window_days: int = 14
    first_hour: int = 9
    last_hour: int = 16
    max_slots: int = 20
    timezone: str = "UTC"
    weekdays: tuple[int, ...] = (0, 1, 2, 3, 4)


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Half-open interval [start, end)."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValidationError("Time window must end after it starts")

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return windows_overlap(self.start, self.end, start, end)


def windows_overlap(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    return start1 < end2 and end1 > start2


class InterviewSlotAllocator:
    """Propose free interview windows for an interviewer.

    Results depend only on the current interview set and the clock, and are
    recomputed on every call.
    """

    def __init__(
        self,
        *,
        interviews: InterviewRepository,
        config: SchedulingConfig | None = None,
        now_provider: Callable[[], Any] | None = None,
    ) -> None:
        self._interviews = interviews
        self._config = config or SchedulingConfig()
        self._now_provider = now_provider or (lambda: pendulum.now(self._config.timezone))
        self._logger = structlog.get_logger(__name__)

    def now(self) -> pendulum.DateTime:
        return pendulum.instance(self._now_provider()).in_timezone(self._config.timezone)

    def available_slots(
        self,
        interviewer_email: str,
        interviewer_name: str,
        duration_minutes: int = 60,
    ) -> list[TimeWindow]:
        if duration_minutes <= 0:
            raise ValidationError("Interview duration must be positive")

        now = self.now()
        busy = [
            (interview.scheduled_time, interview.end_time)
            for interview in self._interviews.list(interviewer_email=interviewer_email)
            if interview.is_active
        ]
        slots = list(islice(self._free_windows(now, duration_minutes, busy), self._config.max_slots))

        self._logger.debug(
            "scheduling.slots",
            interviewer_email=interviewer_email,
            interviewer_name=interviewer_name,
            duration=duration_minutes,
            found=len(slots),
        )
        return slots

    def _free_windows(
        self,
        now: pendulum.DateTime,
        duration_minutes: int,
        busy: list[tuple[datetime, datetime]],
    ) -> Iterator[TimeWindow]:
        config = self._config
        for offset in range(config.window_days + 1):
            day = now.add(days=offset)
            if day.weekday() not in config.weekdays:
                continue
            for hour in range(config.first_hour, config.last_hour + 1):
                start = day.set(hour=hour, minute=0, second=0, microsecond=0)
                if start <= now:
                    continue
                end = start.add(minutes=duration_minutes)
                if any(windows_overlap(start, end, b_start, b_end) for b_start, b_end in busy):
                    continue
                yield TimeWindow(start=start, end=end)

    def find_conflicts(
        self,
        interviewer_email: str,
        start: datetime,
        end: datetime,
        *,
        exclude_id: str | None = None,
    ) -> list[InterviewSlot]:
        """Return active interviews of the interviewer overlapping [start, end)."""
        return [
            interview
            for interview in self._interviews.list(interviewer_email=interviewer_email)
            if interview.is_active
            and interview.id != exclude_id
            and windows_overlap(start, end, interview.scheduled_time, interview.end_time)
        ]
