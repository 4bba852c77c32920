"""Candidate evaluation and interview scheduling components."""

from __future__ import annotations

# NOTE: keep imports explicit for export clarity.
from .duplicates import DuplicateConfig, DuplicateDetector, DuplicateMatch, name_similarity
from .lifecycle import ALLOWED_TRANSITIONS, InterviewLifecycleManager, LifecycleConfig
from .ranking import CandidateRanker, RankingConfig, RankingEntry
from .scheduling import InterviewSlotAllocator, SchedulingConfig, TimeWindow, windows_overlap

__all__ = [
    "ALLOWED_TRANSITIONS",
    "CandidateRanker",
    "DuplicateConfig",
    "DuplicateDetector",
    "DuplicateMatch",
    "InterviewLifecycleManager",
    "InterviewSlotAllocator",
    "LifecycleConfig",
    "RankingConfig",
    "RankingEntry",
    "SchedulingConfig",
    "TimeWindow",
    "name_similarity",
    "windows_overlap",
]
