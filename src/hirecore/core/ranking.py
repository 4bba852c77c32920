"""Composite candidate ranking for a job."""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from ..errors import NotFoundError, ValidationError
from ..repositories import ApplicationRepository
from ..schemas import AnalysisResult, Application, round_half_up

DEFAULT_WEIGHTS: dict[str, float] = {
    "technical": 0.4,
    "experience": 0.3,
    "cultural": 0.2,
    "leadership": 0.1,
}

DEFAULT_EXPERIENCE_SCORES: dict[str, float] = {
    "entry": 60.0,
    "mid": 75.0,
    "senior": 85.0,
    "lead": 90.0,
    "executive": 95.0,
}


@dataclass
class RankingConfig:
    """Weights, lookup tables and thresholds used for ranking."""

    weights: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    experience_scores: dict[str, float] = field(
        default_factory=lambda: dict(DEFAULT_EXPERIENCE_SCORES)
    )
    default_experience_score: float = 70.0
    default_cultural_score: float = 70.0
    default_leadership_score: float = 50.0
    leadership_threshold: float = 80.0
    technical_threshold: float = 90.0
    cultural_threshold: float = 85.0
    problem_solving_threshold: float = 85.0

    def __post_init__(self) -> None:
        unknown = set(self.weights) - set(DEFAULT_WEIGHTS)
        if unknown:
            raise ValidationError(f"Unknown ranking weight(s): {', '.join(sorted(unknown))}")


@dataclass(slots=True)
class RankingEntry:
    """Ranked view of one application."""

    application_id: str
    composite_score: int
    rank: int
    match_percentage: int
    key_strengths: list[str] = field(default_factory=list)
    differentiators: list[str] = field(default_factory=list)


class CandidateRanker:
    """Rank analysed applications for a job by weighted composite score."""

    def __init__(
        self,
        *,
        applications: ApplicationRepository,
        config: RankingConfig | None = None,
    ) -> None:
        self._applications = applications
        self._config = config or RankingConfig()
        self._logger = structlog.get_logger(__name__)

    def rank(self, job_id: str) -> list[RankingEntry]:
        if self._applications.get_job(job_id) is None:
            raise NotFoundError("job", job_id)

        scored: list[tuple[int, Application]] = []
        skipped = 0
        for app in self._applications.get_applications(job_id):
            if app.ai_score is None or app.ai_analysis is None:
                skipped += 1
                continue
            scored.append((self.composite_score(app.ai_analysis, ai_score=app.ai_score), app))

        # sorted() is stable, so equal scores keep insertion order.
        ordered = sorted(scored, key=lambda item: item[0], reverse=True)

        entries = [
            RankingEntry(
                application_id=app.id,
                composite_score=score,
                rank=position,
                match_percentage=score,
                key_strengths=list(app.ai_analysis.strengths),
                differentiators=self.differentiators(app.ai_analysis),
            )
            for position, (score, app) in enumerate(ordered, start=1)
        ]
        self._logger.info("ranking.completed", job_id=job_id, ranked=len(entries), skipped=skipped)
        return entries

    def composite_score(self, analysis: AnalysisResult, *, ai_score: float | None = None) -> int:
        """Weighted blend of sub-scores, rounded to the nearest integer."""
        config = self._config
        technical = analysis.technical_competency
        if technical is None:
            technical = float(ai_score or 0)
        cultural = analysis.cultural_fit
        if cultural is None:
            cultural = config.default_cultural_score
        leadership = analysis.leadership_potential
        if leadership is None:
            leadership = config.default_leadership_score

        components = {
            "technical": technical,
            "experience": self.experience_score(analysis.experience_level),
            "cultural": cultural,
            "leadership": leadership,
        }
        total = sum(components[name] * weight for name, weight in config.weights.items())
        return round_half_up(total)

    def experience_score(self, level: str | None) -> float:
        if level is None:
            return self._config.default_experience_score
        return self._config.experience_scores.get(level, self._config.default_experience_score)

    def differentiators(self, analysis: AnalysisResult) -> list[str]:
        config = self._config
        found: list[str] = []
        if _exceeds(analysis.leadership_potential, config.leadership_threshold):
            found.append("Strong leadership potential")
        if _exceeds(analysis.technical_competency, config.technical_threshold):
            found.append("Exceptional technical skills")
        if _exceeds(analysis.cultural_fit, config.cultural_threshold):
            found.append("Excellent cultural fit")
        if _exceeds(analysis.competency_breakdown.problem_solving, config.problem_solving_threshold):
            found.append("Outstanding problem-solving abilities")
        return found


def _exceeds(value: float | None, threshold: float) -> bool:
    return value is not None and value > threshold
