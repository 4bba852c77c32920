"""Pydantic configuration schema for YAML input."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .candidate import ExperienceLevel

RankingFactor = Literal["technical", "experience", "cultural", "leadership"]


class _Section(BaseModel):
    model_config = ConfigDict(extra="forbid")


class RankingSection(_Section):
    weights: dict[RankingFactor, float] | None = None
    experience_scores: dict[ExperienceLevel, float] | None = None
    default_experience_score: float | None = None
    default_cultural_score: float | None = None
    default_leadership_score: float | None = None
    leadership_threshold: float | None = None
    technical_threshold: float | None = None
    cultural_threshold: float | None = None
    problem_solving_threshold: float | None = None


class DuplicatesSection(_Section):
    name_similarity_threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    fallback_confidence: float | None = Field(default=None, ge=0.0, le=100.0)
    max_escalation_candidates: int | None = Field(default=None, ge=1)
    resume_snippet_chars: int | None = Field(default=None, ge=0)


class SchedulingSection(_Section):
    window_days: int | None = Field(default=None, ge=0)
    first_hour: int | None = Field(default=None, ge=0, le=23)
    last_hour: int | None = Field(default=None, ge=0, le=23)
    max_slots: int | None = Field(default=None, ge=1)
    timezone: str | None = None
    weekdays: tuple[int, ...] | None = None


class LifecycleSection(_Section):
    interview_stage_status: str | None = None
    default_duration: int | None = Field(default=None, gt=0)


class AnalysisSection(_Section):
    endpoint: str | None = None
    api_key: str | None = None
    model: str | None = None
    timeout: float | None = Field(default=None, gt=0)


class NotificationsSection(_Section):
    backend: str = "log"
    sender: str | None = None
    region: str | None = None
    team_name: str | None = None


class AppConfig(BaseModel):
    ranking: RankingSection = Field(default_factory=RankingSection)
    duplicates: DuplicatesSection = Field(default_factory=DuplicatesSection)
    scheduling: SchedulingSection = Field(default_factory=SchedulingSection)
    lifecycle: LifecycleSection = Field(default_factory=LifecycleSection)
    analysis: AnalysisSection = Field(default_factory=AnalysisSection)
    notifications: NotificationsSection = Field(default_factory=NotificationsSection)

    model_config = ConfigDict(extra="forbid")

    def to_settings(self) -> dict[str, Any]:
        settings: dict[str, Any] = {}
        for name in ("ranking", "duplicates", "scheduling", "lifecycle", "analysis"):
            section = getattr(self, name).model_dump(exclude_none=True)
            if section:
                settings[name] = section
        notifications = self.notifications.model_dump(exclude_none=True)
        if notifications != {"backend": "log"}:
            settings["notifications"] = notifications
        return settings


def load_config(raw: Any) -> AppConfig:
    if not isinstance(raw, dict):
        raise ValidationError.from_exception_data(
            "AppConfig",
            [{"type": "dict_type", "loc": ("config",), "input": raw}],
        )
    return AppConfig.model_validate(raw)
