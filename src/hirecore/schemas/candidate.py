from __future__ import annotations

import math
from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

ExperienceLevel = Literal["entry", "mid", "senior", "lead", "executive"]

EXPERIENCE_LEVELS: tuple[str, ...] = ("entry", "mid", "senior", "lead", "executive")


def clamp_score(value: Any) -> float | None:
    """Coerce a 0-100 score, clamping out-of-range values."""
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("score must be numeric, not boolean")
    number = float(value)
    if math.isnan(number):
        raise ValueError("score must not be NaN")
    return min(max(number, 0.0), 100.0)


def round_half_up(value: float) -> int:
    """Round a non-negative score to an int, halves going up."""
    # The inner round() absorbs float noise from weighted sums.
    return int(round(value, 6) + 0.5)


class CandidateIdentity(BaseModel):
    """Identity fields carried by an incoming application."""

    email: str
    name: str
    phone: str | None = None
    resume_text: str | None = None

    model_config = ConfigDict(extra="forbid")


class SalaryRange(BaseModel):
    """Suggested salary band returned by the analysis service."""

    min: float = 0.0
    max: float = 0.0
    currency: str = "USD"

    model_config = ConfigDict(extra="ignore")

    @field_validator("min", "max", mode="before")
    @classmethod
    def non_negative(cls, value: Any) -> float:
        if value is None:
            return 0.0
        if isinstance(value, bool):
            raise ValueError("salary bound must be numeric")
        return max(float(value), 0.0)

    @model_validator(mode="after")
    def ordered_bounds(self) -> "SalaryRange":
        if self.min > self.max:
            self.min, self.max = self.max, self.min
        return self


class CompetencyBreakdown(BaseModel):
    """Per-competency sub-scores, each 0-100."""

    technical: float | None = None
    communication: float | None = None
    problem_solving: float | None = None
    teamwork: float | None = None
    adaptability: float | None = None

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    @field_validator(
        "technical", "communication", "problem_solving", "teamwork", "adaptability", mode="before"
    )
    @classmethod
    def clamp_competency(cls, value: Any) -> float | None:
        return clamp_score(value)


class AnalysisResult(BaseModel):
    """Normalized résumé analysis for a candidate/job pair.

    Every numeric score is clamped into [0, 100] on validation, so instances
    are always safe to store.
    """

    overall_score: float = 0.0
    skills_match: list[str] = Field(default_factory=list)
    experience_level: ExperienceLevel | None = None
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    cultural_fit: float | None = None
    technical_competency: float | None = None
    leadership_potential: float | None = None
    recommendations: str = ""
    red_flags: list[str] = Field(default_factory=list)
    interview_questions: list[str] = Field(default_factory=list)
    salary_range: SalaryRange = Field(default_factory=SalaryRange)
    competency_breakdown: CompetencyBreakdown = Field(default_factory=CompetencyBreakdown)

    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)

    @field_validator("overall_score", mode="before")
    @classmethod
    def clamp_overall(cls, value: Any) -> float:
        clamped = clamp_score(value)
        return 0.0 if clamped is None else clamped

    @field_validator("cultural_fit", "technical_competency", "leadership_potential", mode="before")
    @classmethod
    def clamp_subscores(cls, value: Any) -> float | None:
        return clamp_score(value)

    @field_validator(
        "skills_match", "strengths", "weaknesses", "red_flags", "interview_questions", mode="before"
    )
    @classmethod
    def default_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("experience_level", mode="before")
    @classmethod
    def known_level(cls, value: Any) -> str | None:
        if not isinstance(value, str):
            return None
        level = value.strip().lower()
        return level if level in EXPERIENCE_LEVELS else None

    @field_validator("recommendations", mode="before")
    @classmethod
    def default_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("salary_range", "competency_breakdown", mode="before")
    @classmethod
    def default_mapping(cls, value: Any) -> Any:
        return {} if value is None else value


class Application(BaseModel):
    """Job application as read from the application store."""

    id: str
    job_id: str
    candidate_email: str
    candidate_name: str
    candidate_phone: str | None = None
    current_company: str | None = None
    current_role: str | None = None
    status: str = "submitted"
    ai_score: int | None = None
    ai_analysis: AnalysisResult | None = None
    applied_at: datetime | None = None

    model_config = ConfigDict(extra="allow")

    @field_validator("ai_score", mode="before")
    @classmethod
    def clamp_ai_score(cls, value: Any) -> int | None:
        clamped = clamp_score(value)
        return None if clamped is None else round_half_up(clamped)
