from __future__ import annotations

import pendulum
import pytest
from pydantic import ValidationError

from hirecore.schemas import AnalysisResult, Application, CandidateIdentity, InterviewSlot


def test_scores_are_clamped_into_range():
    result = AnalysisResult.model_validate(
        {
            "overallScore": 140,
            "culturalFit": -5,
            "technicalCompetency": "88.5",
            "leadershipPotential": None,
            "competencyBreakdown": {"technical": 101, "problemSolving": 40},
        }
    )

    assert result.overall_score == 100
    assert result.cultural_fit == 0
    assert result.technical_competency == 88.5
    assert result.leadership_potential is None
    assert result.competency_breakdown.technical == 100
    assert result.competency_breakdown.problem_solving == 40


def test_missing_and_null_fields_get_defaults():
    result = AnalysisResult.model_validate(
        {"strengths": None, "salaryRange": None, "recommendations": None, "unexpected": 1}
    )

    assert result.overall_score == 0
    assert result.strengths == []
    assert result.red_flags == []
    assert result.recommendations == ""
    assert result.salary_range.currency == "USD"
    assert result.experience_level is None


def test_salary_range_is_normalized():
    result = AnalysisResult.model_validate(
        {"salaryRange": {"min": 150000, "max": 120000, "currency": "EUR"}}
    )

    assert (result.salary_range.min, result.salary_range.max) == (120000, 150000)
    assert result.salary_range.currency == "EUR"


def test_experience_level_is_case_insensitive():
    assert AnalysisResult.model_validate({"experienceLevel": " Senior "}).experience_level == "senior"


@pytest.mark.parametrize("value", [True, float("nan"), "high"])
def test_non_numeric_scores_are_rejected(value):
    with pytest.raises(ValidationError):
        AnalysisResult.model_validate({"overallScore": value})


def test_snake_case_dump_round_trips_through_application():
    analysis = AnalysisResult.model_validate({"overallScore": 77.6, "strengths": ["SQL"]})

    application = Application(
        id="A1",
        job_id="J1",
        candidate_email="a@b.com",
        candidate_name="A",
        ai_score=analysis.overall_score,
        ai_analysis=analysis.model_dump(),
    )

    assert application.ai_score == 78
    assert application.ai_analysis.strengths == ["SQL"]


def test_candidate_identity_forbids_unknown_fields():
    with pytest.raises(ValidationError):
        CandidateIdentity(email="a@b.com", name="A", nickname="Al")


def test_interview_slot_requires_aware_datetimes():
    aware = pendulum.datetime(2024, 6, 4, 10, tz="UTC")
    fields = {
        "id": "I1",
        "application_id": "A1",
        "interviewer": {"name": "Lee", "email": "lee@corp.com"},
        "candidate": {"name": "Jane", "email": "jane@x.com"},
        "created_at": aware,
        "updated_at": aware,
    }

    slot = InterviewSlot(scheduled_time=aware, **fields)
    assert slot.end_time == aware.add(hours=1)
    assert slot.is_active

    with pytest.raises(ValidationError):
        InterviewSlot(scheduled_time=aware.naive(), **fields)
    with pytest.raises(ValidationError):
        InterviewSlot(
            scheduled_time=aware, **{**fields, "interviewer": {"name": "Lee", "email": "lee"}}
        )


@pytest.mark.parametrize(("raw", "expected"), [(84.5, 85), (83.5, 84), (0.5, 1), (84.49, 84)])
def test_ai_score_rounds_halves_up(raw: float, expected: int):
    application = Application(
        id="A1", job_id="J1", candidate_email="a@b.com", candidate_name="A", ai_score=raw
    )

    assert application.ai_score == expected
