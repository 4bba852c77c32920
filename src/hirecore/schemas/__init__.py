"""Pydantic schema definitions for hiring data structures."""

from __future__ import annotations

from .candidate import (
    EXPERIENCE_LEVELS,
    AnalysisResult,
    Application,
    CandidateIdentity,
    CompetencyBreakdown,
    ExperienceLevel,
    SalaryRange,
    clamp_score,
    round_half_up,
)
from .interview import (
    TERMINAL_STATUSES,
    InterviewSlot,
    InterviewStatus,
    InterviewType,
    Participant,
)
from .job import Job

__all__ = [
    "AnalysisResult",
    "Application",
    "CandidateIdentity",
    "CompetencyBreakdown",
    "EXPERIENCE_LEVELS",
    "ExperienceLevel",
    "InterviewSlot",
    "InterviewStatus",
    "InterviewType",
    "Job",
    "Participant",
    "SalaryRange",
    "TERMINAL_STATUSES",
    "clamp_score",
    "round_half_up",
]
