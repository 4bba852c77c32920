from __future__ import annotations

from typing import Any

import pytest

from hirecore.core import CandidateRanker, RankingConfig
from hirecore.errors import NotFoundError
from hirecore.repositories import InMemoryApplicationRepository
from hirecore.schemas import AnalysisResult, Application, Job


def build_analysis(**kwargs: Any) -> dict[str, Any]:
    defaults: dict[str, Any] = {
        "overallScore": 80,
        "technicalCompetency": 90,
        "experienceLevel": "senior",
        "culturalFit": 80,
        "leadershipPotential": 60,
        "strengths": ["Python"],
    }
    defaults.update(kwargs)
    return defaults


def build_application(app_id: str, analysis: dict[str, Any] | None, **kwargs: Any) -> Application:
    defaults: dict[str, Any] = {
        "id": app_id,
        "job_id": "J1",
        "candidate_email": f"{app_id}@example.com",
        "candidate_name": app_id,
        "ai_score": None if analysis is None else analysis.get("overallScore"),
        "ai_analysis": analysis,
    }
    defaults.update(kwargs)
    return Application(**defaults)


def build_ranker(applications: list[Application], config: RankingConfig | None = None):
    repository = InMemoryApplicationRepository(
        jobs=[Job(id="J1", title="Backend Engineer")], applications=applications
    )
    return CandidateRanker(applications=repository, config=config)


def test_composite_score_rounds_half_up():
    ranker = build_ranker([])
    analysis = AnalysisResult.model_validate(build_analysis())

    assert ranker.composite_score(analysis) == 84


def test_rank_orders_descending_and_numbers_positions():
    ranker = build_ranker(
        [
            build_application("low", build_analysis(technicalCompetency=50)),
            build_application("high", build_analysis(technicalCompetency=100)),
            build_application("mid", build_analysis()),
        ]
    )

    entries = ranker.rank("J1")

    assert [entry.application_id for entry in entries] == ["high", "mid", "low"]
    assert [entry.rank for entry in entries] == [1, 2, 3]
    assert all(entry.match_percentage == entry.composite_score for entry in entries)
    assert entries[1].composite_score == 84
    assert entries[0].key_strengths == ["Python"]


def test_rank_keeps_original_order_for_ties():
    ranker = build_ranker(
        [
            build_application("first", build_analysis()),
            build_application("second", build_analysis()),
            build_application("third", build_analysis()),
        ]
    )

    entries = ranker.rank("J1")

    assert [entry.application_id for entry in entries] == ["first", "second", "third"]


def test_rank_skips_applications_without_analysis():
    ranker = build_ranker(
        [
            build_application("pending", None),
            build_application("scored", build_analysis()),
            build_application("score_only", None, ai_score=70),
            build_application("other_job", build_analysis(), job_id="J2"),
        ]
    )

    entries = ranker.rank("J1")

    assert [entry.application_id for entry in entries] == ["scored"]


def test_rank_unknown_job_raises():
    ranker = build_ranker([])

    with pytest.raises(NotFoundError):
        ranker.rank("missing")


def test_rank_with_no_scored_applications_is_empty():
    ranker = build_ranker([build_application("pending", None)])

    assert ranker.rank("J1") == []


def test_missing_subscores_use_fallbacks():
    ranker = build_ranker([])
    analysis = AnalysisResult.model_validate({"overallScore": 60})

    # technical falls back to ai_score, experience 70, cultural 70, leadership 50
    expected = round(0.4 * 60 + 0.3 * 70 + 0.2 * 70 + 0.1 * 50)
    assert ranker.composite_score(analysis, ai_score=60) == expected


def test_unknown_experience_level_uses_default():
    ranker = build_ranker([])

    assert ranker.experience_score(None) == 70
    assert ranker.experience_score("lead") == 90
    assert AnalysisResult.model_validate({"experienceLevel": "wizard"}).experience_level is None


def test_differentiators_require_strictly_greater_scores():
    ranker = build_ranker([])
    analysis = AnalysisResult.model_validate(
        build_analysis(
            leadershipPotential=81,
            technicalCompetency=90,
            culturalFit=86,
            competencyBreakdown={"problemSolving": 95},
        )
    )

    assert ranker.differentiators(analysis) == [
        "Strong leadership potential",
        "Excellent cultural fit",
        "Outstanding problem-solving abilities",
    ]


def test_custom_weights_change_composite():
    config = RankingConfig(
        weights={"technical": 1.0, "experience": 0.0, "cultural": 0.0, "leadership": 0.0}
    )
    ranker = build_ranker([], config=config)
    analysis = AnalysisResult.model_validate(build_analysis(technicalCompetency=77))

    assert ranker.composite_score(analysis) == 77
