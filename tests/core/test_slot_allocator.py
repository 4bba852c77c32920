from __future__ import annotations

from typing import Any

import pendulum
import pytest

from hirecore.core import InterviewSlotAllocator, SchedulingConfig, TimeWindow, windows_overlap
from hirecore.errors import ValidationError
from hirecore.repositories import InMemoryInterviewRepository
from hirecore.schemas import InterviewSlot

# Monday
NOW = pendulum.datetime(2024, 6, 3, 8, 0, tz="UTC")
TUESDAY_TEN = pendulum.datetime(2024, 6, 4, 10, 0, tz="UTC")


def build_interview(interview_id: str, scheduled_time, **kwargs: Any) -> InterviewSlot:
    defaults: dict[str, Any] = {
        "id": interview_id,
        "application_id": "A1",
        "interviewer": {"name": "Lee", "email": "lee@corp.com"},
        "candidate": {"name": "Jane", "email": "jane@x.com"},
        "scheduled_time": scheduled_time,
        "duration": 60,
        "created_at": NOW,
        "updated_at": NOW,
    }
    defaults.update(kwargs)
    return InterviewSlot(**defaults)


def build_allocator(
    interviews: list[InterviewSlot] = (),
    config: SchedulingConfig | None = None,
    now=NOW,
) -> InterviewSlotAllocator:
    return InterviewSlotAllocator(
        interviews=InMemoryInterviewRepository(interviews),
        config=config,
        now_provider=lambda: now,
    )


def starts(windows: list[TimeWindow]) -> list[pendulum.DateTime]:
    return [window.start for window in windows]


def test_slots_around_existing_interview():
    allocator = build_allocator([build_interview("I1", TUESDAY_TEN)])

    slots = starts(allocator.available_slots("lee@corp.com", "Lee", 60))

    assert TUESDAY_TEN not in slots
    assert TUESDAY_TEN.set(hour=9) in slots
    assert TUESDAY_TEN.set(hour=11) in slots


def test_longer_duration_excludes_earlier_overlapping_slot():
    allocator = build_allocator([build_interview("I1", TUESDAY_TEN)])

    slots = starts(allocator.available_slots("lee@corp.com", "Lee", 90))

    assert TUESDAY_TEN.set(hour=9) not in slots
    assert TUESDAY_TEN not in slots
    assert TUESDAY_TEN.set(hour=11) in slots


def test_slots_are_capped_and_chronological():
    allocator = build_allocator()

    windows = allocator.available_slots("lee@corp.com", "Lee")

    assert len(windows) == 20
    assert starts(windows) == sorted(starts(windows))
    assert windows[0].start == NOW.set(hour=9)
    assert windows[0].end == NOW.set(hour=10)


def test_slots_stay_inside_business_calendar():
    allocator = build_allocator(config=SchedulingConfig(max_slots=500))

    windows = allocator.available_slots("lee@corp.com", "Lee", 30)

    # Mon 3 Jun through Mon 17 Jun inclusive: 11 weekdays, 8 hours each.
    assert len(windows) == 88
    for window in windows:
        assert window.start.weekday() < 5
        assert 9 <= window.start.hour <= 16
        assert window.start.minute == 0
        assert window.start > NOW
        assert window.start <= NOW.add(days=14).end_of("day")


def test_past_hours_of_today_are_skipped():
    allocator = build_allocator(now=NOW.set(hour=12, minute=30))

    first = allocator.available_slots("lee@corp.com", "Lee")[0]

    assert first.start == NOW.set(hour=13)


def test_cancelled_and_other_interviewers_do_not_block():
    allocator = build_allocator(
        [
            build_interview("I1", TUESDAY_TEN, status="cancelled"),
            build_interview(
                "I2", TUESDAY_TEN.set(hour=11), interviewer={"name": "Kim", "email": "kim@corp.com"}
            ),
        ]
    )

    slots = starts(allocator.available_slots("LEE@corp.com", "Lee"))

    assert TUESDAY_TEN in slots
    assert TUESDAY_TEN.set(hour=11) in slots


def test_slots_use_configured_timezone():
    allocator = build_allocator(config=SchedulingConfig(timezone="America/New_York"))

    first = allocator.available_slots("lee@corp.com", "Lee")[0]

    # 08:00 UTC is 04:00 in New York, so the first slot is 09:00 local that day.
    assert first.start.hour == 9
    assert first.start.in_timezone("UTC") == pendulum.datetime(2024, 6, 3, 13, 0, tz="UTC")


@pytest.mark.parametrize("duration", [0, -15])
def test_non_positive_duration_rejected(duration: int):
    allocator = build_allocator()

    with pytest.raises(ValidationError):
        allocator.available_slots("lee@corp.com", "Lee", duration)


def test_find_conflicts_excludes_given_id_and_touching_windows():
    existing = build_interview("I1", TUESDAY_TEN)
    allocator = build_allocator([existing])

    assert allocator.find_conflicts("lee@corp.com", TUESDAY_TEN.add(minutes=30), TUESDAY_TEN.add(hours=2)) == [existing]
    assert allocator.find_conflicts("lee@corp.com", TUESDAY_TEN.add(hours=1), TUESDAY_TEN.add(hours=2)) == []
    assert allocator.find_conflicts(
        "lee@corp.com", TUESDAY_TEN, TUESDAY_TEN.add(hours=1), exclude_id="I1"
    ) == []


def test_windows_overlap_is_half_open():
    assert windows_overlap(TUESDAY_TEN, TUESDAY_TEN.add(hours=1), TUESDAY_TEN.add(minutes=59), TUESDAY_TEN.add(hours=2))
    assert not windows_overlap(TUESDAY_TEN, TUESDAY_TEN.add(hours=1), TUESDAY_TEN.add(hours=1), TUESDAY_TEN.add(hours=2))


def test_time_window_requires_positive_length():
    with pytest.raises(ValidationError):
        TimeWindow(start=TUESDAY_TEN, end=TUESDAY_TEN)
